from fastapi import APIRouter, Depends
from sqlmodel import Session

from retrievo_escrow.db.db import get_session
from retrievo_escrow.services.escrow import EscrowCustodian, active_item_count, active_reward_total


router = APIRouter()


@router.get("/summary")
def get_custody_summary(session: Session = Depends(get_session)):
    held = EscrowCustodian(session).total_held()
    active_rewards = active_reward_total(session)

    return {
        "held": held,
        "active_items": active_item_count(session),
        "active_reward_total": active_rewards,
        "balanced": held == active_rewards,
    }
