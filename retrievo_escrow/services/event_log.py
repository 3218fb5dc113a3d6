from datetime import datetime
from typing import List, Optional
from sqlmodel import Session, or_, select

from retrievo_escrow.models.event import EventKind, ItemEvent
from retrievo_escrow.models.item import ItemRecord
from retrievo_escrow.utils.guards import MAX_ITEM_ID


def append(
    session: Session,
    kind: EventKind,
    item: ItemRecord,
    at: datetime,
    finder: Optional[str] = None,
    description: Optional[str] = None,
    reward_value: Optional[int] = None,
) -> ItemEvent:
    event = ItemEvent(
        created_at=at,
        kind=kind,
        item_id=item.id,
        owner=item.owner,
        finder=finder,
        description=description,
        reward_value=reward_value,
    )

    session.add(event)
    return event


def list_events(
    session: Session,
    account: Optional[str] = None,
    item_id: Optional[int] = None,
    limit: int = 50,
) -> List[ItemEvent]:
    """
    Feed for external observers. The ledger itself never reads this back.
    """
    query = select(ItemEvent).order_by(ItemEvent.id.desc()).limit(limit)

    if item_id is not None:
        if not 0 < item_id <= MAX_ITEM_ID:
            return []

        query = query.where(ItemEvent.item_id == item_id)

    if account is not None:
        query = query.where(or_(ItemEvent.owner == account, ItemEvent.finder == account))

    return list(session.exec(query).all())
