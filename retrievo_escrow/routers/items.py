from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session

from retrievo_escrow.db.db import get_session
from retrievo_escrow.models.item import ItemRecord, ItemStatus
from retrievo_escrow.services import registry
from retrievo_escrow.services.escrow import EscrowCustodian, PayoutGateway, get_payout_gateway
from retrievo_escrow.utils.auth_helper import get_caller
from retrievo_escrow.utils.form_validator import ClaimItemRequest, ReportItemRequest, validate_report_form


router = APIRouter()


def item_details(session: Session, item: ItemRecord) -> dict:
    return {
        "id": item.id,
        "owner": item.owner,
        "description": item.description,
        "location": item.location,
        "reward_value": item.reward_value,
        "is_found": item.is_found,
        "is_claimed": item.is_claimed,
        "finder": item.finder,
        "timestamp": item.created_at,
        "status": item.status.value,
        "is_active": item.is_active,
        "custody": EscrowCustodian(session).custody_for(item),
    }


# Mutating routes are plain `def` so they run in the threadpool under the ledger lock

@router.post("/report")
def report_item(
    payload: ReportItemRequest,
    session: Session = Depends(get_session),
    caller: str = Depends(get_caller),
):
    form = validate_report_form(payload)

    item_id = registry.report_item(
        session,
        caller,
        description=form.description,
        location=form.location,
        reward_value=form.reward_value,
    )

    return {"item_id": item_id}


@router.get("/all")
def get_all_items(
    status: Optional[ItemStatus] = None,
    owner: Optional[str] = None,
    limit: int = 50,
    session: Session = Depends(get_session),
):
    items = registry.list_items(session, status=status, owner=owner, limit=limit)

    return {
        "items": [item_details(session, item) for item in items],
    }


@router.get("/{item_id}")
def get_item(
    item_id: int,
    session: Session = Depends(get_session),
):
    item = registry.get_item(session, item_id)
    return item_details(session, item)


@router.get("/{item_id}/active")
def is_item_active(
    item_id: int,
    session: Session = Depends(get_session),
):
    return {"active": registry.is_item_active(session, item_id)}


@router.post("/{item_id}/claim")
def claim_found(
    item_id: int,
    payload: ClaimItemRequest,
    session: Session = Depends(get_session),
    caller: str = Depends(get_caller),
):
    registry.claim_found(session, caller, item_id, payload.proof_description)
    return {"ok": True}


@router.post("/{item_id}/confirm")
def confirm_return(
    item_id: int,
    session: Session = Depends(get_session),
    caller: str = Depends(get_caller),
    gateway: PayoutGateway = Depends(get_payout_gateway),
):
    amount = registry.confirm_return_and_release_reward(session, caller, item_id, gateway)
    return {"ok": True, "released": amount}


@router.post("/{item_id}/cancel")
def cancel_item(
    item_id: int,
    session: Session = Depends(get_session),
    caller: str = Depends(get_caller),
    gateway: PayoutGateway = Depends(get_payout_gateway),
):
    amount = registry.cancel_item(session, caller, item_id, gateway)
    return {"ok": True, "refunded": amount}
