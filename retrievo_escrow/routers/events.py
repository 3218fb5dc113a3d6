from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session

from retrievo_escrow.db.db import get_session
from retrievo_escrow.services import event_log
from retrievo_escrow.utils.auth_helper import get_caller


router = APIRouter()


@router.get("/")
def get_my_events(
    limit: int = 20,
    item_id: Optional[int] = None,
    session: Session = Depends(get_session),
    caller: str = Depends(get_caller),
):
    # An item's history is public; otherwise show what involves the caller
    if item_id is not None:
        events = event_log.list_events(session, item_id=item_id, limit=limit)
    else:
        events = event_log.list_events(session, account=caller, limit=limit)

    return {"events": events}
