from dataclasses import dataclass, fields

STAT_FIELDS = ("hp", "attack", "defense", "special_attack", "special_defense", "speed")


@dataclass
class CardFields:
    """
    Writable card attributes.

    Every attribute is optional so the same type serves create and partial
    update: ``None`` means "not provided" and leaves the stored value alone.

    Attributes:
        name: Card name shown as the title
        type: Free-form card type (e.g., "Fire")
        hp, attack, defense, special_attack, special_defense, speed: Stats
        card_design: Design reference as sent by the client, an id or a
            design name. An empty string clears the reference.
    """

    name: str | None = None
    type: str | None = None
    hp: int | None = None
    attack: int | None = None
    defense: int | None = None
    special_attack: int | None = None
    special_defense: int | None = None
    speed: int | None = None
    card_design: str | None = None

    def provided(self) -> dict[str, object]:
        """Fields that were set, excluding the design reference."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "card_design" and getattr(self, f.name) is not None
        }


@dataclass(frozen=True, slots=True)
class ImageUpload:
    """
    An uploaded image waiting to be stored.

    Attributes:
        data: Raw file bytes
        filename: Name the client gave the file
        content_type: MIME type reported by the client
    """

    data: bytes
    filename: str
    content_type: str
