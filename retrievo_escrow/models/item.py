import enum
from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class ItemStatus(str, enum.Enum):
    OPEN = "open"
    PENDING_CONFIRMATION = "pending_confirmation"
    REWARDED = "rewarded"
    CANCELLED = "cancelled"


# Escrow is held for these statuses only
ACTIVE_STATUSES = (ItemStatus.OPEN, ItemStatus.PENDING_CONFIRMATION)
TERMINAL_STATUSES = (ItemStatus.REWARDED, ItemStatus.CANCELLED)


class ItemRecord(SQLModel, table=True):
    __tablename__ = "items"
    # ids must never be reused, even after cancellation
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reporter info
    owner: str = Field(foreign_key="users.account", index=True)

    # Item fields
    description: str
    location: str = Field(default="")
    reward_value: int  # minor currency units

    status: ItemStatus = Field(default=ItemStatus.OPEN, index=True)

    # Finder info, set once by a claim
    finder: Optional[str] = Field(default=None, foreign_key="users.account", index=True)
    proof_description: Optional[str] = Field(default=None)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_found(self) -> bool:
        return self.status in (ItemStatus.PENDING_CONFIRMATION, ItemStatus.REWARDED)

    @property
    def is_claimed(self) -> bool:
        return self.status == ItemStatus.REWARDED
