from cardsmith.services.card_service import CardService, get_card_service
from cardsmith.services.card_style import card_background, card_style
from cardsmith.services.design_service import DesignService, get_design_service

__all__ = [
    "CardService",
    "DesignService",
    "card_background",
    "card_style",
    "get_card_service",
    "get_design_service",
]
