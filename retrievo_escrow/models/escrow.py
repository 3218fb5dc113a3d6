from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


CUSTODY_ACCOUNT_ID = 1


class EscrowAccount(SQLModel, table=True):
    __tablename__ = "escrow_account"

    # Single row holding everything currently in custody
    id: int = Field(default=CUSTODY_ACCOUNT_ID, primary_key=True)
    held: int = Field(default=0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Payout(SQLModel, table=True):
    __tablename__ = "payouts"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    item_id: int = Field(foreign_key="items.id", index=True)
    recipient: str = Field(foreign_key="users.account", index=True)

    amount: int
    kind: str = Field(index=True)  # values: "release", "refund"
