"""Database models and operations for user items."""

from src.database.items.models import Item, ItemKind, ItemStatus
from src.database.items.operations import (
    get_item_by_id,
    get_open_tasks_with_due,
    get_open_undated_tasks,
    get_stale_inbox_items,
    update_reminder_state,
)

__all__ = [
    # Models
    "Item",
    "ItemKind",
    "ItemStatus",
    # Operations
    "get_item_by_id",
    "get_open_tasks_with_due",
    "get_open_undated_tasks",
    "get_stale_inbox_items",
    "update_reminder_state",
]
