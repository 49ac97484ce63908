"""
Card design API endpoints.

Provides CRUD operations for card designs and a CSS preview of a design.
"""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cardsmith.config import MAX_NAME_LENGTH
from cardsmith.models.db import CardDesignDB
from cardsmith.models.design import DesignStyles
from cardsmith.models.failure import FailureDetail
from cardsmith.services.card_style import card_style
from cardsmith.services.design_service import DesignService, get_design_service

router = APIRouter(prefix="/designs", tags=["designs"])


class CamelModel(BaseModel):
    """Base for API models that use camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DesignRequest(CamelModel):
    """Request model for creating or replacing a design."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description="Unique design name",
        examples=["Fire"],
    )
    styles: DesignStyles = Field(
        default_factory=DesignStyles,
        description="Full style bundle; omitted fields use defaults",
        examples=[{"background": "#ff0000", "borderWidth": 2}],
    )


class DesignResponse(CamelModel):
    """Response model for a single design."""

    id: int
    name: str
    styles: DesignStyles
    created_at: datetime | None = None


class MessageResponse(BaseModel):
    """Response model for delete operations."""

    message: str


NOT_FOUND_RESPONSE: dict[int | str, dict[str, Any]] = {404: {"model": FailureDetail}}
BAD_REQUEST_RESPONSE: dict[int | str, dict[str, Any]] = {400: {"model": FailureDetail}}


def design_to_response(design: CardDesignDB) -> DesignResponse:
    """Convert a database design to its API representation."""
    return DesignResponse(
        id=design.id,
        name=design.name,
        styles=DesignStyles.model_validate(design.styles or {}),
        created_at=design.created_at,
    )


@router.post(
    "",
    response_model=DesignResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST_RESPONSE,
)
async def create_design(
    request: DesignRequest,
    service: Annotated[DesignService, Depends(get_design_service)],
) -> DesignResponse:
    """
    Create a card design.

    Fails with 400 if a design with the same name already exists.
    """
    design = await service.create(request.name, request.styles)
    return design_to_response(design)


@router.get("", response_model=list[DesignResponse])
async def list_designs(
    service: Annotated[DesignService, Depends(get_design_service)],
) -> list[DesignResponse]:
    """List all card designs, newest first."""
    return [design_to_response(design) for design in await service.list()]


@router.get("/{design_id}", response_model=DesignResponse, responses=NOT_FOUND_RESPONSE)
async def get_design(
    design_id: int,
    service: Annotated[DesignService, Depends(get_design_service)],
) -> DesignResponse:
    """Get a single card design."""
    return design_to_response(await service.get(design_id))


@router.get("/{design_id}/preview", responses=NOT_FOUND_RESPONSE)
async def preview_design(
    design_id: int,
    service: Annotated[DesignService, Depends(get_design_service)],
) -> dict[str, Any]:
    """
    Get the CSS a card using this design is rendered with.

    Gradient colors take precedence over the flat background when two or
    more are set.
    """
    design = await service.get(design_id)
    return card_style(design.styles)


@router.put(
    "/{design_id}",
    response_model=DesignResponse,
    responses={**NOT_FOUND_RESPONSE, **BAD_REQUEST_RESPONSE},
)
async def update_design(
    design_id: int,
    request: DesignRequest,
    service: Annotated[DesignService, Depends(get_design_service)],
) -> DesignResponse:
    """
    Replace a card design.

    The style bundle is replaced as a whole; fields left out of the
    request revert to their defaults.
    """
    design = await service.update(design_id, request.name, request.styles)
    return design_to_response(design)


@router.delete("/{design_id}", response_model=MessageResponse, responses=NOT_FOUND_RESPONSE)
async def delete_design(
    design_id: int,
    service: Annotated[DesignService, Depends(get_design_service)],
) -> MessageResponse:
    """
    Delete a card design.

    Cards that used the design are kept and render with default styles.
    """
    await service.delete(design_id)
    return MessageResponse(message="Design deleted successfully")
