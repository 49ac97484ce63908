from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DesignStyles(BaseModel):
    """
    Visual style bundle applied to a card.

    Field names travel as camelCase on the wire (``borderWidth``) and are
    snake_case in Python. Unset fields fall back to the defaults below.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    background: str = "#ffffff"
    gradient_colors: list[str] = Field(
        default_factory=list,
        description="Gradient stops; two or more replace the flat background",
    )

    border_color: str = "#000000"
    border_width: int = Field(default=2, ge=0)
    border_style: str = "solid"
    border_radius: int = Field(default=10, ge=0)

    shadow_color: str = "rgba(0,0,0,0.2)"
    shadow_blur: int = Field(default=10, ge=0)

    title_color: str = "#000000"
    text_color: str = "#000000"
    stats_bg_color: str = "#f5f5f5"

    title_font_weight: str = "normal"
    title_alignment: str = "left"
    title_size: str = "24px"
    text_font_weight: str = "normal"
    text_size: str = "16px"

    # Not camelCase-derived: the stored key is "customCSS"
    custom_css: str = Field(default="", alias="customCSS")

    def to_document(self) -> dict[str, object]:
        """Serialize for storage using the wire (camelCase) keys."""
        return self.model_dump(by_alias=True)
