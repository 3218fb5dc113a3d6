import os

# Must be set before the app reads it
os.environ.setdefault("JWT_SECRET", "test_secret_for_retrievo_escrow_tests_that_is_long_enough")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from retrievo_escrow.db.db import create_db_and_tables, get_session
from retrievo_escrow.main import app
from retrievo_escrow.services.escrow import PayoutGateway, get_payout_gateway
from retrievo_escrow.utils.errors import TransferFailure

OWNER = "alice"
FINDER = "bob"
STRANGER = "carol"


class FailingGateway(PayoutGateway):
    """Payout rail that is down."""

    def __init__(self):
        self.attempts = 0

    def transfer(self, session, recipient, amount, item_id, kind):
        self.attempts += 1
        raise TransferFailure(f"payout rail unavailable for {recipient}")


class BrokenGateway(PayoutGateway):
    """Payout rail raising something other than TransferFailure."""

    def transfer(self, session, recipient, amount, item_id, kind):
        raise ConnectionError("connection reset")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_gateway():
    gateway = FailingGateway()
    app.dependency_overrides[get_payout_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_payout_gateway, None)


def auth_headers(account):
    token = jwt.encode({"sub": account}, os.environ["JWT_SECRET"], algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}
