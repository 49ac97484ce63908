from cardsmith.db.database import get_session, init_db
from cardsmith.db.operations import (
    create_card,
    create_design,
    delete_card,
    delete_design,
    get_card,
    get_design,
    get_design_by_name,
    list_cards,
    list_designs,
    list_image_keys,
    update_card,
    update_design,
)

__all__ = [
    "create_card",
    "create_design",
    "delete_card",
    "delete_design",
    "get_card",
    "get_design",
    "get_design_by_name",
    "get_session",
    "init_db",
    "list_cards",
    "list_designs",
    "list_image_keys",
    "update_card",
    "update_design",
]
