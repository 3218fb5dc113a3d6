from typing import Optional
from sqlmodel import Session

from retrievo_escrow.models.item import ItemRecord, ItemStatus
from retrievo_escrow.utils.errors import InvalidInput, InvalidState, NotFound, Unauthorized


# Largest value a SQL INTEGER primary key can hold
MAX_ITEM_ID = 2**63 - 1


def require_item(session: Session, item_id: int) -> ItemRecord:
    # ids start at 1, so 0 and negatives are never assigned
    in_range = item_id is not None and 0 < item_id <= MAX_ITEM_ID
    item = session.get(ItemRecord, item_id) if in_range else None

    if not item:
        raise NotFound(f"Item {item_id} not found")

    return item


def require_owner(item: ItemRecord, caller: str):
    if item.owner != caller:
        raise Unauthorized("Only the owner can perform this action")


def require_not_owner(item: ItemRecord, caller: str):
    if item.owner == caller:
        raise InvalidInput("You cannot claim your own item")


def require_status(item: ItemRecord, status: ItemStatus):
    if item.status != status:
        raise InvalidState(
            f"Item {item.id} is {item.status.value}, expected {status.value}"
        )


def require_finder(item: ItemRecord) -> str:
    if not item.finder:
        raise InvalidState(f"Item {item.id} has no finder assigned")

    return item.finder


def require_text(value: Optional[str], field: str) -> str:
    cleaned = (value or "").strip()

    if not cleaned:
        raise InvalidInput(f"{field} must not be empty")

    return cleaned


def require_positive(value, field: str) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInput(f"{field} must be a positive integer")

    return value
