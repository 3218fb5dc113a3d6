"""
Parallel ledger calls over a file-backed database, one session per thread.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlmodel import Session, create_engine

from conftest import OWNER
from retrievo_escrow.db.db import create_db_and_tables
from retrievo_escrow.models.item import ItemStatus
from retrievo_escrow.services import registry
from retrievo_escrow.services.escrow import EscrowCustodian, active_reward_total

WORKERS = 8
REPORTS = 40


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False},
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


def test_parallel_reports_and_cancels_stay_consistent(file_engine):
    def report(n):
        with Session(file_engine) as session:
            return registry.report_item(session, f"{OWNER}-{n % 5}", f"item {n}", "", 10)

    def cancel(item_id):
        with Session(file_engine) as session:
            owner = registry.get_item(session, item_id).owner
            return registry.cancel_item(session, owner, item_id)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        ids = list(pool.map(report, range(REPORTS)))

    assert sorted(ids) == list(range(1, REPORTS + 1))

    to_cancel = [item_id for item_id in ids if item_id % 2 == 0]

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        refunds = list(pool.map(cancel, to_cancel))

    assert refunds == [10] * len(to_cancel)

    with Session(file_engine) as session:
        held = EscrowCustodian(session).total_held()

        assert held == active_reward_total(session)
        assert held == 10 * (REPORTS - len(to_cancel))

        cancelled = registry.list_items(session, status=ItemStatus.CANCELLED, limit=REPORTS)
        assert sorted(i.id for i in cancelled) == to_cancel
