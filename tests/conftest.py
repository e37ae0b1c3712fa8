"""
Shared fixtures: a fresh SQLite database per test and builders for records.
"""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from govindexer.core.config import VoteConflictPolicy
from govindexer.core.database import DatabaseManager
from govindexer.indexer import GovDatabase
from govindexer.services import make_encoding_config
from govindexer.types import (
    Proposal, ProposalStatus, TextProposal
)


SUBMIT_TIME = datetime(2024, 3, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gov.db'}")
    await DatabaseManager.create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def encoding_config():
    return make_encoding_config()


@pytest_asyncio.fixture
async def gov_db(engine, encoding_config):
    db = GovDatabase(engine, encoding_config)
    yield db
    await db.close()


@pytest_asyncio.fixture
async def last_vote_wins_db(engine, encoding_config):
    db = GovDatabase(engine, encoding_config, vote_conflict_policy=VoteConflictPolicy.LAST_VOTE_WINS)
    yield db
    await db.close()


def make_proposal(
    proposal_id: int,
    status: ProposalStatus = ProposalStatus.DEPOSIT_PERIOD,
    content=None,
    proposer: str = "cosmos1proposer",
) -> Proposal:
    return Proposal(
        proposal_id=proposal_id,
        proposal_route="gov",
        proposal_type="Text",
        content=content or TextProposal(
            title=f"Proposal {proposal_id}",
            description=f"Description of proposal {proposal_id}"
        ),
        status=status,
        submit_time=SUBMIT_TIME,
        deposit_end_time=SUBMIT_TIME + timedelta(days=2),
        voting_start_time=None,
        voting_end_time=None,
        proposer=proposer,
    )


@pytest.fixture
def proposal_factory():
    return make_proposal
