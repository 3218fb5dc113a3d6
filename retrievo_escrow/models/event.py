import enum
from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class EventKind(str, enum.Enum):
    ITEM_REPORTED = "item_reported"
    ITEM_FOUND = "item_found"
    REWARD_CLAIMED = "reward_claimed"
    ITEM_CANCELLED = "item_cancelled"


class ItemEvent(SQLModel, table=True):
    __tablename__ = "events"

    # Insertion order is completion order
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    kind: EventKind = Field(index=True)
    item_id: int = Field(foreign_key="items.id", index=True)

    # Accounts involved
    owner: str = Field(index=True)
    finder: Optional[str] = Field(default=None, index=True)

    # Payload, depending on kind
    description: Optional[str] = None
    reward_value: Optional[int] = None
