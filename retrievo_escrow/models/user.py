from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class UserProfile(SQLModel, table=True):
    __tablename__ = "users"

    account: str = Field(primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Counters only ever go up
    items_lost_count: int = Field(default=0)
    items_found_count: int = Field(default=0)
    reputation_score: int = Field(default=0)
