"""
Card API endpoints.

Cards are written with multipart forms so an image can travel with the
card fields. Reads return each card with its design inlined.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from cardsmith.api.designs import (
    BAD_REQUEST_RESPONSE,
    NOT_FOUND_RESPONSE,
    CamelModel,
    DesignResponse,
    MessageResponse,
    design_to_response,
)
from cardsmith.config import MAX_NAME_LENGTH, MAX_STAT_VALUE, settings
from cardsmith.models.card import CardFields, ImageUpload
from cardsmith.models.db import CardDB
from cardsmith.services.card_service import CardService, get_card_service

router = APIRouter(prefix="/cards", tags=["cards"])

# Form field types shared by create and update
Stat = Annotated[int, Form(ge=0, le=MAX_STAT_VALUE)]
OptionalStat = Annotated[int | None, Form(ge=0, le=MAX_STAT_VALUE)]


class CardResponse(CamelModel):
    """Response model for a single card."""

    id: int
    name: str
    type: str = ""
    hp: int = 0
    attack: int = 0
    defense: int = 0
    special_attack: int = 0
    special_defense: int = 0
    speed: int = 0
    image: str | None = None
    image_url: str | None = None
    card_design: DesignResponse | None = None
    created_at: datetime | None = None


def image_path(key: str) -> str:
    """Path the image for a blob key is served from."""
    return f"/files/{key}"


def card_to_response(card: CardDB) -> CardResponse:
    """Convert a database card, with its design loaded, to its API representation."""
    return CardResponse(
        id=card.id,
        name=card.name,
        type=card.type or "",
        hp=card.hp,
        attack=card.attack,
        defense=card.defense,
        special_attack=card.special_attack,
        special_defense=card.special_defense,
        speed=card.speed,
        image=card.image,
        image_url=image_path(card.image) if card.image else None,
        card_design=design_to_response(card.card_design) if card.card_design else None,
        created_at=card.created_at,
    )


async def read_upload(upload: UploadFile | None) -> ImageUpload | None:
    """
    Read an uploaded file into memory.

    Browsers send an empty part when no file was chosen; that counts as
    no upload. At most one byte past the size limit is read so oversized
    files are rejected without buffering them whole.
    """
    if upload is None or not upload.filename:
        return None

    data = await upload.read(settings.max_upload_bytes + 1)
    if not data:
        return None

    return ImageUpload(
        data=data,
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
    )


@router.post(
    "",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST_RESPONSE,
)
async def create_card(
    service: Annotated[CardService, Depends(get_card_service)],
    name: Annotated[str, Form(max_length=MAX_NAME_LENGTH)],
    card_type: Annotated[str, Form(alias="type", max_length=MAX_NAME_LENGTH)] = "",
    hp: Stat = 0,
    attack: Stat = 0,
    defense: Stat = 0,
    special_attack: Annotated[int, Form(alias="specialAttack", ge=0, le=MAX_STAT_VALUE)] = 0,
    special_defense: Annotated[int, Form(alias="specialDefense", ge=0, le=MAX_STAT_VALUE)] = 0,
    speed: Stat = 0,
    card_design: Annotated[str | None, Form(alias="cardDesign")] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> CardResponse:
    """
    Create a card.

    `cardDesign` may be a design id or a design name. The optional
    `image` file is stored first and linked to the new card.
    """
    fields = CardFields(
        name=name,
        type=card_type,
        hp=hp,
        attack=attack,
        defense=defense,
        special_attack=special_attack,
        special_defense=special_defense,
        speed=speed,
        card_design=card_design,
    )
    card = await service.create(fields, await read_upload(image))
    return card_to_response(card)


@router.get("", response_model=list[CardResponse])
async def list_cards(
    service: Annotated[CardService, Depends(get_card_service)],
    design_id: Annotated[int | None, Query(alias="designId")] = None,
) -> list[CardResponse]:
    """
    List all cards, newest first, each with its design inlined.

    Pass `designId` to only list cards using that design.
    """
    return [card_to_response(card) for card in await service.list(design_id=design_id)]


@router.get("/{card_id}", response_model=CardResponse, responses=NOT_FOUND_RESPONSE)
async def get_card(
    card_id: int,
    service: Annotated[CardService, Depends(get_card_service)],
) -> CardResponse:
    """Get a single card with its design inlined."""
    return card_to_response(await service.get(card_id))


@router.put(
    "/{card_id}",
    response_model=CardResponse,
    responses={**NOT_FOUND_RESPONSE, **BAD_REQUEST_RESPONSE},
)
async def update_card(
    card_id: int,
    request: Request,
    service: Annotated[CardService, Depends(get_card_service)],
    name: Annotated[str | None, Form(max_length=MAX_NAME_LENGTH)] = None,
    card_type: Annotated[str | None, Form(alias="type", max_length=MAX_NAME_LENGTH)] = None,
    hp: OptionalStat = None,
    attack: OptionalStat = None,
    defense: OptionalStat = None,
    special_attack: Annotated[
        int | None, Form(alias="specialAttack", ge=0, le=MAX_STAT_VALUE)
    ] = None,
    special_defense: Annotated[
        int | None, Form(alias="specialDefense", ge=0, le=MAX_STAT_VALUE)
    ] = None,
    speed: OptionalStat = None,
    card_design: Annotated[str | None, Form(alias="cardDesign")] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> CardResponse:
    """
    Update a card in place.

    Only the fields present in the form change. Without a new `image`
    the current image is kept. An empty `cardDesign` removes the design.
    """
    if card_design is None and "cardDesign" in await request.form():
        # Empty form values arrive as None; the key being present means "clear"
        card_design = ""

    fields = CardFields(
        name=name,
        type=card_type,
        hp=hp,
        attack=attack,
        defense=defense,
        special_attack=special_attack,
        special_defense=special_defense,
        speed=speed,
        card_design=card_design,
    )
    card = await service.update(card_id, fields, await read_upload(image))
    return card_to_response(card)


@router.delete("/{card_id}", response_model=MessageResponse, responses=NOT_FOUND_RESPONSE)
async def delete_card(
    card_id: int,
    service: Annotated[CardService, Depends(get_card_service)],
) -> MessageResponse:
    """
    Delete a card.

    Its image is removed from storage first; a failure there is logged
    and does not prevent the card from being deleted.
    """
    await service.delete(card_id)
    return MessageResponse(message="Card deleted successfully")
