from decktester.db.database import get_session, init_db
from decktester.db.operations import (
    add_collaborator,
    create_deck,
    deck_to_composition,
    get_deck,
    has_access,
    load_deck_composition,
)

__all__ = [
    "add_collaborator",
    "create_deck",
    "deck_to_composition",
    "get_deck",
    "get_session",
    "has_access",
    "init_db",
    "load_deck_composition",
]
