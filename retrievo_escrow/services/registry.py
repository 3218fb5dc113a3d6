"""
Item registry and lifecycle.

Every mutating operation runs under `ledger_transaction`: guards first, then
staged record/reputation changes, then the fund transfer, then the event.
Nothing is committed unless all of it succeeds.

    open --claim--> pending_confirmation --confirm--> rewarded
    open --cancel--> cancelled
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional
from sqlmodel import Session, select

from retrievo_escrow.models.event import EventKind
from retrievo_escrow.models.item import ItemRecord, ItemStatus
from retrievo_escrow.services import event_log, reputation
from retrievo_escrow.services.escrow import EscrowCustodian, PayoutGateway
from retrievo_escrow.utils import guards
from retrievo_escrow.utils.errors import NotFound

logger = logging.getLogger(__name__)

ledger_lock = threading.Lock()


@contextmanager
def ledger_transaction(session: Session):
    with ledger_lock:
        try:
            yield
            session.commit()
        except Exception:
            session.rollback()
            raise


def _now() -> datetime:
    return datetime.now(timezone.utc)


def report_item(
    session: Session,
    caller: str,
    description: str,
    location: str,
    reward_value: int,
) -> int:
    with ledger_transaction(session):
        description = guards.require_text(description, "description")
        reward_value = guards.require_positive(reward_value, "reward_value")

        now = _now()

        reputation.record_loss(session, caller)

        item = ItemRecord(
            owner=caller,
            description=description,
            location=(location or "").strip(),
            reward_value=reward_value,
            created_at=now,
            updated_at=now,
        )

        session.add(item)
        session.flush()  # allocates the id

        EscrowCustodian(session).accept(item, reward_value)

        event_log.append(
            session,
            EventKind.ITEM_REPORTED,
            item,
            at=now,
            description=description,
            reward_value=reward_value,
        )

        item_id = item.id

    logger.info("item %s reported by %s with reward %s", item_id, caller, reward_value)
    return item_id


def claim_found(session: Session, caller: str, item_id: int, proof_description: str):
    with ledger_transaction(session):
        item = guards.require_item(session, item_id)
        guards.require_status(item, ItemStatus.OPEN)
        guards.require_not_owner(item, caller)
        proof_description = guards.require_text(proof_description, "proof_description")

        now = _now()

        reputation.get_or_create_profile(session, caller)

        item.finder = caller
        item.proof_description = proof_description
        item.status = ItemStatus.PENDING_CONFIRMATION
        item.updated_at = now
        session.add(item)

        event_log.append(session, EventKind.ITEM_FOUND, item, at=now, finder=caller)

    logger.info("item %s claimed by %s", item_id, caller)


def confirm_return_and_release_reward(
    session: Session,
    caller: str,
    item_id: int,
    gateway: Optional[PayoutGateway] = None,
) -> int:
    with ledger_transaction(session):
        item = guards.require_item(session, item_id)
        guards.require_owner(item, caller)
        guards.require_status(item, ItemStatus.PENDING_CONFIRMATION)
        finder = guards.require_finder(item)

        now = _now()

        item.status = ItemStatus.REWARDED
        item.updated_at = now
        session.add(item)

        reputation.record_find(session, finder)
        reputation.record_return(session, caller)

        amount = EscrowCustodian(session, gateway).release(item)

        event_log.append(
            session,
            EventKind.REWARD_CLAIMED,
            item,
            at=now,
            finder=finder,
            reward_value=amount,
        )

    logger.info("item %s returned, %s released to %s", item_id, amount, finder)
    return amount


def cancel_item(
    session: Session,
    caller: str,
    item_id: int,
    gateway: Optional[PayoutGateway] = None,
) -> int:
    with ledger_transaction(session):
        item = guards.require_item(session, item_id)
        guards.require_owner(item, caller)
        guards.require_status(item, ItemStatus.OPEN)

        now = _now()

        item.status = ItemStatus.CANCELLED
        item.updated_at = now

        amount = EscrowCustodian(session, gateway).refund(item)

        item.reward_value = 0
        session.add(item)

        event_log.append(session, EventKind.ITEM_CANCELLED, item, at=now)

    logger.info("item %s cancelled, %s refunded to %s", item_id, amount, caller)
    return amount


def get_item(session: Session, item_id: int) -> ItemRecord:
    return guards.require_item(session, item_id)


def is_item_active(session: Session, item_id: int) -> bool:
    # Unknown ids hold no escrow, so they read as inactive
    try:
        return guards.require_item(session, item_id).is_active
    except NotFound:
        return False


def list_items(
    session: Session,
    status: Optional[ItemStatus] = None,
    owner: Optional[str] = None,
    limit: int = 50,
) -> List[ItemRecord]:
    query = select(ItemRecord).order_by(ItemRecord.id.desc()).limit(limit)

    if status is not None:
        query = query.where(ItemRecord.status == status)

    if owner is not None:
        query = query.where(ItemRecord.owner == owner)

    return list(session.exec(query).all())
