"""
Card preview styling.

Translates a design's style bundle into the CSS properties a card
preview is rendered with. Cards without a design (or whose design was
deleted) render with the default bundle.
"""

from typing import Any

from cardsmith.models.design import DesignStyles

CardStyle = dict[str, Any]


def card_background(styles: DesignStyles) -> str:
    """Gradient when two or more stops are set, otherwise the flat background."""
    if len(styles.gradient_colors) > 1:
        return f"linear-gradient(45deg, {', '.join(styles.gradient_colors)})"
    return styles.background


def card_style(styles: DesignStyles | dict[str, Any] | None) -> CardStyle:
    """
    Build the CSS for a card preview.

    Args:
        styles: A style bundle, its stored dict form, or None for defaults

    Returns:
        CSS properties for the card container, with nested rules for
        the title, body text and stats panel
    """
    if styles is None:
        styles = DesignStyles()
    elif isinstance(styles, dict):
        styles = DesignStyles.model_validate(styles)

    css: CardStyle = {
        "background": card_background(styles),
        "border": f"{styles.border_width}px {styles.border_style} {styles.border_color}",
        "borderRadius": f"{styles.border_radius}px",
        "boxShadow": f"0 0 {styles.shadow_blur}px {styles.shadow_color}",
        "padding": "20px",
        "color": styles.text_color,
        "& .card-title": {
            "color": styles.title_color,
            "fontWeight": styles.title_font_weight,
            "textAlign": styles.title_alignment,
            "fontSize": styles.title_size,
        },
        "& .card-text": {
            "fontWeight": styles.text_font_weight,
            "fontSize": styles.text_size,
        },
        "& .stats-container": {
            "backgroundColor": styles.stats_bg_color,
        },
    }
    if styles.custom_css:
        css["customCSS"] = styles.custom_css
    return css
