import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from sqlmodel import Session, col, func, select

from retrievo_escrow.models.escrow import CUSTODY_ACCOUNT_ID, EscrowAccount, Payout
from retrievo_escrow.models.item import ACTIVE_STATUSES, ItemRecord
from retrievo_escrow.utils.errors import InvalidState, TransferFailure

logger = logging.getLogger(__name__)

RELEASE = "release"
REFUND = "refund"


class PayoutGateway(ABC):
    """
    Moves value out of custody to a recipient.
    Implementations raise on failure; the caller rolls the whole operation back.
    """

    @abstractmethod
    def transfer(self, session: Session, recipient: str, amount: int, item_id: int, kind: str):
        ...


class LedgerPayoutGateway(PayoutGateway):
    """Credits the recipient by writing a payout receipt in the same transaction."""

    def transfer(self, session: Session, recipient: str, amount: int, item_id: int, kind: str):
        payout = Payout(item_id=item_id, recipient=recipient, amount=amount, kind=kind)
        session.add(payout)
        session.flush()
        return payout


def get_payout_gateway() -> PayoutGateway:
    return LedgerPayoutGateway()


class EscrowCustodian:
    """
    Pure transfer mechanism over the single custody account.
    Per-item custody is derived from item status, never stored separately.
    """

    def __init__(self, session: Session, gateway: PayoutGateway = None):
        self.session = session
        self.gateway = gateway or LedgerPayoutGateway()

    def _account(self) -> EscrowAccount:
        account = self.session.get(EscrowAccount, CUSTODY_ACCOUNT_ID)

        if not account:
            account = EscrowAccount(id=CUSTODY_ACCOUNT_ID)
            self.session.add(account)
            self.session.flush()

        return account

    def accept(self, item: ItemRecord, value: int):
        if value <= 0:
            raise InvalidState(f"Cannot take {value} into custody for item {item.id}")

        account = self._account()
        account.held += value
        account.updated_at = datetime.now(timezone.utc)

        self.session.add(account)

    def release(self, item: ItemRecord) -> int:
        if not item.finder:
            raise InvalidState(f"Item {item.id} has no finder to release to")

        return self._pay_out(item, item.finder, RELEASE)

    def refund(self, item: ItemRecord) -> int:
        return self._pay_out(item, item.owner, REFUND)

    def _pay_out(self, item: ItemRecord, recipient: str, kind: str) -> int:
        amount = item.reward_value
        account = self._account()

        if amount <= 0 or account.held < amount:
            raise InvalidState(f"Custody does not cover item {item.id}")

        try:
            self.gateway.transfer(self.session, recipient, amount, item.id, kind)
        except TransferFailure:
            logger.warning("%s of %s for item %s to %s failed", kind, amount, item.id, recipient)
            raise
        except Exception as e:
            logger.warning("%s of %s for item %s to %s failed: %s", kind, amount, item.id, recipient, e)
            raise TransferFailure(f"Transfer to {recipient} failed") from e

        account.held -= amount
        account.updated_at = datetime.now(timezone.utc)
        self.session.add(account)

        return amount

    def custody_for(self, item: ItemRecord) -> int:
        return item.reward_value if item.is_active else 0

    def total_held(self) -> int:
        account = self.session.get(EscrowAccount, CUSTODY_ACCOUNT_ID)
        return account.held if account else 0


def active_reward_total(session: Session) -> int:
    return session.exec(
        select(func.coalesce(func.sum(ItemRecord.reward_value), 0))
        .where(col(ItemRecord.status).in_(ACTIVE_STATUSES))
    ).one()


def active_item_count(session: Session) -> int:
    return session.exec(
        select(func.count(ItemRecord.id))
        .where(col(ItemRecord.status).in_(ACTIVE_STATUSES))
    ).one()


def received_by(session: Session, account: str) -> int:
    return session.exec(
        select(func.coalesce(func.sum(Payout.amount), 0))
        .where(Payout.recipient == account)
    ).one()
