from fastapi import APIRouter, Depends
from sqlmodel import Session

from retrievo_escrow.db.db import get_session
from retrievo_escrow.models.item import TERMINAL_STATUSES
from retrievo_escrow.routers.items import item_details
from retrievo_escrow.services import registry, reputation
from retrievo_escrow.services.escrow import received_by
from retrievo_escrow.utils.auth_helper import get_caller


router = APIRouter()


def reputation_view(session: Session, account: str) -> dict:
    items_lost, items_found, score = reputation.get_user_reputation(session, account)

    return {
        "account": account,
        "items_lost": items_lost,
        "items_found": items_found,
        "reputation_score": score,
    }


@router.get("/me")
def get_my_profile(
    session: Session = Depends(get_session),
    caller: str = Depends(get_caller),
):
    items = registry.list_items(session, owner=caller, limit=100)

    # Separate by lifecycle
    active_items = [item for item in items if item.is_active]
    closed_items = [item for item in items if item.status in TERMINAL_STATUSES]

    return {
        "reputation": reputation_view(session, caller),
        "payouts_received": received_by(session, caller),
        "active_items": [item_details(session, item) for item in active_items],
        "closed_items": [item_details(session, item) for item in closed_items],
    }


@router.get("/{account}/reputation")
def get_user_reputation(
    account: str,
    session: Session = Depends(get_session),
):
    return reputation_view(session, account)
