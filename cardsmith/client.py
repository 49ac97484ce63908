"""
Async HTTP client for the CardSmith API.

Wraps every endpoint and holds the per-screen state the front end works
with: the gallery (cards, designs and the selected design filter) and the
design editor (the design being edited and its working style bundle).
State objects are plain values owned by whoever created them.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from cardsmith.config import settings
from cardsmith.models.design import DesignStyles
from cardsmith.services.card_style import CardStyle, card_style

logger = logging.getLogger(__name__)

ALL_DESIGNS = "all"

STAT_KEYS = ("hp", "attack", "defense", "specialAttack", "specialDefense", "speed")


class CardSmithAPIError(Exception):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, message: str, kind: str | None = None):
        self.status_code = status_code
        self.message = message
        self.kind = kind
        super().__init__(f"{status_code}: {message}")


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    message = response.reason_phrase or "Request failed"
    kind = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message", message)
        kind = body.get("kind")

    raise CardSmithAPIError(response.status_code, message, kind)


def _card_form(card: dict[str, Any]) -> dict[str, str]:
    """Encode card fields as multipart form values, skipping unset ones."""
    form: dict[str, str] = {}
    for key in ("name", "type", *STAT_KEYS, "cardDesign"):
        value = card.get(key)
        if value is not None:
            form[key] = str(value)
    return form


@dataclass
class GalleryView:
    """
    Cards and designs shown in the gallery, with the active design filter.

    `selected_design` is a design id or ALL_DESIGNS.
    """

    cards: list[dict[str, Any]] = field(default_factory=list)
    designs: list[dict[str, Any]] = field(default_factory=list)
    selected_design: int | str = ALL_DESIGNS

    def visible_cards(self) -> list[dict[str, Any]]:
        """Cards matching the selected design filter."""
        if self.selected_design == ALL_DESIGNS:
            return list(self.cards)
        return [
            card
            for card in self.cards
            if card.get("cardDesign") and card["cardDesign"]["id"] == self.selected_design
        ]

    def style_for(self, card: dict[str, Any]) -> CardStyle:
        """Preview CSS for a card; cards without a design use defaults."""
        design = card.get("cardDesign")
        return card_style(design["styles"] if design else None)


@dataclass
class DesignEditorState:
    """
    Working state of the design editor.

    Holds the design being edited (None while creating a new one) and the
    style bundle as currently changed by the user.
    """

    name: str = ""
    styles: DesignStyles = field(default_factory=DesignStyles)
    design_id: int | None = None

    @classmethod
    def from_design(cls, design: dict[str, Any]) -> "DesignEditorState":
        return cls(
            name=design["name"],
            styles=DesignStyles.model_validate(design.get("styles") or {}),
            design_id=design["id"],
        )

    def set_style(self, field_name: str, value: Any) -> None:
        """Change one style field, accepting snake_case or camelCase names."""
        data = self.styles.model_dump()
        alias_to_name = {
            info.alias: name for name, info in DesignStyles.model_fields.items() if info.alias
        }
        key = alias_to_name.get(field_name, field_name)
        if key not in data:
            raise KeyError(field_name)
        data[key] = value
        self.styles = DesignStyles.model_validate(data)

    def preview(self) -> CardStyle:
        return card_style(self.styles)

    def payload(self) -> dict[str, Any]:
        return {"name": self.name, "styles": self.styles.to_document()}


class CardSmithClient:
    """
    Client for the CardSmith HTTP API.

    Usage:
        async with CardSmithClient("http://localhost:8000") as client:
            designs = await client.list_designs()
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "CardSmithClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        _raise_for_status(response)
        return response.json()

    # --- designs ---

    async def create_design(self, name: str, styles: dict[str, Any] | None = None) -> Any:
        return await self._request("POST", "/designs", json={"name": name, "styles": styles or {}})

    async def list_designs(self) -> Any:
        return await self._request("GET", "/designs")

    async def get_design(self, design_id: int) -> Any:
        return await self._request("GET", f"/designs/{design_id}")

    async def update_design(
        self, design_id: int, name: str, styles: dict[str, Any] | None = None
    ) -> Any:
        return await self._request(
            "PUT", f"/designs/{design_id}", json={"name": name, "styles": styles or {}}
        )

    async def delete_design(self, design_id: int) -> Any:
        return await self._request("DELETE", f"/designs/{design_id}")

    async def save_design(self, editor: DesignEditorState) -> Any:
        """Create or update the design held by the editor."""
        payload = editor.payload()
        if editor.design_id is None:
            design = await self.create_design(payload["name"], payload["styles"])
            editor.design_id = design["id"]
            return design
        return await self.update_design(editor.design_id, payload["name"], payload["styles"])

    # --- cards ---

    async def create_card(
        self,
        card: dict[str, Any],
        image: bytes | None = None,
        filename: str = "image.png",
        content_type: str = "image/png",
    ) -> Any:
        """
        Create a card.

        `card` uses the API's field names (``specialAttack``,
        ``cardDesign``). The image, if given, is sent as a multipart file.
        """
        files = {"image": (filename, image, content_type)} if image is not None else None
        return await self._request("POST", "/cards", data=_card_form(card), files=files)

    async def list_cards(self, design_id: int | None = None) -> Any:
        params = {"designId": design_id} if design_id is not None else None
        return await self._request("GET", "/cards", params=params)

    async def get_card(self, card_id: int) -> Any:
        return await self._request("GET", f"/cards/{card_id}")

    async def update_card(
        self,
        card_id: int,
        card: dict[str, Any],
        image: bytes | None = None,
        filename: str = "image.png",
        content_type: str = "image/png",
    ) -> Any:
        """
        Update a card.

        Only the fields in `card` are sent. Leaving `image` out keeps the
        card's current image.
        """
        files = {"image": (filename, image, content_type)} if image is not None else None
        return await self._request(
            "PUT", f"/cards/{card_id}", data=_card_form(card), files=files
        )

    async def delete_card(self, card_id: int) -> Any:
        return await self._request("DELETE", f"/cards/{card_id}")

    # --- files ---

    def image_url(self, card: dict[str, Any]) -> str | None:
        """Absolute URL of a card's image, or None if it has none."""
        if not card.get("imageUrl"):
            return None
        return f"{self.base_url}{card['imageUrl']}"

    async def fetch_image(self, key: str) -> bytes:
        response = await self._client.get(f"/files/{key}")
        _raise_for_status(response)
        return response.content

    # --- screens ---

    async def load_gallery(self, design_filter: int | str = ALL_DESIGNS) -> GalleryView:
        """Fetch cards and designs concurrently for the gallery."""
        cards, designs = await asyncio.gather(self.list_cards(), self.list_designs())
        logger.debug("Loaded gallery: %d cards, %d designs", len(cards), len(designs))
        return GalleryView(cards=cards, designs=designs, selected_design=design_filter)
