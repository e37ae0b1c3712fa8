"""
Batched writer for governance facts: proposals, deposits, votes and tally results.

Every call turns its records into one multi-row INSERT executed in its own
transaction, so a batch is applied completely or not at all. Batches larger
than the driver's bind-parameter limit are split into several INSERTs inside
that same transaction. Duplicate
delivery is absorbed by the tables' natural keys:

- proposal (id)                                   -> first writer wins
- deposit (proposal_id, depositor_address, height) -> first writer wins
- vote (proposal_id, voter_address)                -> VoteConflictPolicy
- tally result (proposal_id)                       -> newest height wins
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence

import structlog
from sqlalchemy import Table, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from govindexer.core.config import VoteConflictPolicy
from govindexer.core.database import get_upsert_insert, session_scope
from govindexer.models import (
    ProposalDepositRow, ProposalRow, ProposalTallyResultRow, ProposalVoteRow
)
from govindexer.types.coins import coins_from_json, coins_to_json
from govindexer.types.gov import (
    OPEN_PROPOSAL_STATUSES, Deposit, Proposal, ProposalStatus, ProposalUpdate,
    TallyResult, Vote, VoteOption
)

from .content_codec import ContentCodec


logger = structlog.get_logger(__name__)

# asyncpg refuses statements with more bind parameters than this
MAX_BIND_PARAMS = 32767


class EntityKind(str, Enum):
    """Kinds of facts accepted by EventWriter.append_many."""
    PROPOSAL = "proposal"
    DEPOSIT = "deposit"
    VOTE = "vote"
    TALLY_RESULT = "tally_result"


def to_db_time(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def latest_by_key(rows: Iterable[Dict[str, Any]], key: Callable[[Dict[str, Any]], Hashable]) -> List[Dict[str, Any]]:
    """
    Collapse rows sharing a natural key to the one with the highest height.

    A later row wins on equal heights. ON CONFLICT DO UPDATE may not touch
    the same row twice in one statement, so guarded-replace batches go
    through here first.
    """
    latest: Dict[Hashable, Dict[str, Any]] = {}
    for row in rows:
        row_key = key(row)
        kept = latest.get(row_key)
        if kept is None or row["height"] >= kept["height"]:
            latest[row_key] = row
    return list(latest.values())


def chunk_rows(rows: List[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
    """
    Split rows so no single statement exceeds MAX_BIND_PARAMS parameters.

    A proposal row carries 12 parameters, so one statement holds at most
    2730 proposals; deposits (4 parameters) fit 8191 per statement.
    """
    if not rows:
        return []
    size = max(1, MAX_BIND_PARAMS // len(rows[0]))
    return [rows[start:start + size] for start in range(0, len(rows), size)]


class EventWriter:
    """
    Appends governance facts in atomic multi-row statements.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        dialect_name: str,
        codec: ContentCodec,
        vote_conflict_policy: VoteConflictPolicy = VoteConflictPolicy.IGNORE
    ):
        self._session_maker = session_maker
        self._insert = get_upsert_insert(dialect_name)
        self.codec = codec
        self.vote_conflict_policy = VoteConflictPolicy(vote_conflict_policy)
        self.logger = logger.bind(service="event_writer")

        self._appenders: Dict[EntityKind, Callable] = {
            EntityKind.PROPOSAL: self.save_proposals,
            EntityKind.DEPOSIT: self.save_deposits,
            EntityKind.VOTE: self.save_votes,
            EntityKind.TALLY_RESULT: self.save_tally_results,
        }

    async def append_many(self, kind: EntityKind, records: Sequence[Any]) -> None:
        """Store a batch of records of the given kind."""
        await self._appenders[EntityKind(kind)](records)

    async def _execute(
        self,
        kind: EntityKind,
        rows: List[Dict[str, Any]],
        build_stmt: Callable[[List[Dict[str, Any]]], Any]
    ) -> None:
        try:
            async with session_scope(self._session_maker) as session:
                for chunk in chunk_rows(rows):
                    await session.execute(build_stmt(chunk))
        except Exception as e:
            self.logger.error(
                "Failed to store batch",
                kind=kind.value,
                records=len(rows),
                error=str(e)
            )
            raise

        self.logger.debug("Batch stored", kind=kind.value, records=len(rows))

    # Writes ------------------------------------------------------------------

    def _proposal_row(self, proposal: Proposal) -> Dict[str, Any]:
        # Encoding first: unsupported content must fail before anything else
        content = self.codec.encode_json(proposal.content)
        return {
            "id": proposal.proposal_id,
            "title": proposal.content.get_title(),
            "description": proposal.content.get_description(),
            "content": content,
            "proposer_address": proposal.proposer,
            "proposal_route": proposal.proposal_route,
            "proposal_type": proposal.proposal_type,
            "status": ProposalStatus(proposal.status).value,
            "submit_time": to_db_time(proposal.submit_time),
            "deposit_end_time": to_db_time(proposal.deposit_end_time),
            "voting_start_time": to_db_time(proposal.voting_start_time),
            "voting_end_time": to_db_time(proposal.voting_end_time),
        }

    async def save_proposals(self, proposals: Sequence[Proposal]) -> None:
        """
        Insert proposals; ids that already exist are skipped.

        Raises:
            UnsupportedContentTypeError: a proposal's content is not serializable;
                nothing from the batch is written
        """
        if not proposals:
            return

        rows = [self._proposal_row(proposal) for proposal in proposals]
        await self._execute(
            EntityKind.PROPOSAL,
            rows,
            lambda chunk: self._insert(ProposalRow.__table__).values(chunk).on_conflict_do_nothing()
        )

    async def update_proposal(self, proposal_update: ProposalUpdate) -> None:
        """Set status and voting period of a proposal, unconditionally."""
        table: Table = ProposalRow.__table__
        stmt = (
            update(table)
            .where(table.c.id == proposal_update.proposal_id)
            .values(
                status=ProposalStatus(proposal_update.status).value,
                voting_start_time=to_db_time(proposal_update.voting_start_time),
                voting_end_time=to_db_time(proposal_update.voting_end_time),
            )
        )

        try:
            async with session_scope(self._session_maker) as session:
                await session.execute(stmt)
        except Exception as e:
            self.logger.error(
                "Failed to update proposal",
                proposal_id=proposal_update.proposal_id,
                error=str(e)
            )
            raise

        self.logger.debug(
            "Proposal updated",
            proposal_id=proposal_update.proposal_id,
            status=ProposalStatus(proposal_update.status).value
        )

    async def save_deposits(self, deposits: Sequence[Deposit]) -> None:
        """Insert deposit events; repeated (proposal, depositor, height) are skipped."""
        if not deposits:
            return

        rows = [
            {
                "proposal_id": deposit.proposal_id,
                "depositor_address": deposit.depositor,
                "amount": coins_to_json(deposit.amount),
                "height": deposit.height,
            }
            for deposit in deposits
        ]
        await self._execute(
            EntityKind.DEPOSIT,
            rows,
            lambda chunk: self._insert(ProposalDepositRow.__table__).values(chunk).on_conflict_do_nothing()
        )

    async def save_vote(self, vote: Vote) -> None:
        await self.save_votes([vote])

    async def save_votes(self, votes: Sequence[Vote]) -> None:
        """
        Insert votes.

        With VoteConflictPolicy.IGNORE a repeated (proposal, voter) is skipped.
        With LAST_VOTE_WINS it replaces the stored vote unless the stored one
        has a greater height.
        """
        if not votes:
            return

        table: Table = ProposalVoteRow.__table__
        rows = [
            {
                "proposal_id": vote.proposal_id,
                "voter_address": vote.voter,
                "option": VoteOption(vote.option).value,
                "height": vote.height,
            }
            for vote in votes
        ]

        def replace_older(chunk):
            stmt = self._insert(table).values(chunk)
            return stmt.on_conflict_do_update(
                index_elements=[table.c.proposal_id, table.c.voter_address],
                set_={
                    "option": stmt.excluded.option,
                    "height": stmt.excluded.height,
                },
                where=table.c.height <= stmt.excluded.height,
            )

        def keep_first(chunk):
            return self._insert(table).values(chunk).on_conflict_do_nothing()

        if self.vote_conflict_policy is VoteConflictPolicy.LAST_VOTE_WINS:
            rows = latest_by_key(rows, lambda row: (row["proposal_id"], row["voter_address"]))
            await self._execute(EntityKind.VOTE, rows, replace_older)
        else:
            await self._execute(EntityKind.VOTE, rows, keep_first)

    async def save_tally_results(self, tallies: Sequence[TallyResult]) -> None:
        """Insert or refresh tally snapshots, never regressing to an older height."""
        if not tallies:
            return

        table: Table = ProposalTallyResultRow.__table__
        rows = latest_by_key(
            (
                {
                    "proposal_id": tally.proposal_id,
                    "yes": str(tally.yes),
                    "abstain": str(tally.abstain),
                    "no": str(tally.no),
                    "no_with_veto": str(tally.no_with_veto),
                    "height": tally.height,
                }
                for tally in tallies
            ),
            lambda row: row["proposal_id"],
        )

        def replace_older(chunk):
            stmt = self._insert(table).values(chunk)
            return stmt.on_conflict_do_update(
                index_elements=[table.c.proposal_id],
                set_={
                    name: stmt.excluded[name]
                    for name in ("yes", "abstain", "no", "no_with_veto", "height")
                },
                where=table.c.height <= stmt.excluded.height,
            )

        await self._execute(EntityKind.TALLY_RESULT, rows, replace_older)

    # Reads -------------------------------------------------------------------

    async def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        """
        Return the proposal with the given id, or None if not found.

        Raises:
            ContentDecodeError: stored content cannot be decoded
        """
        async with session_scope(self._session_maker) as session:
            result = await session.execute(
                select(ProposalRow).where(ProposalRow.id == proposal_id)
            )
            row = result.scalar_one_or_none()

        if row is None:
            return None

        return Proposal(
            proposal_id=row.id,
            proposal_route=row.proposal_route,
            proposal_type=row.proposal_type,
            content=self.codec.decode_json(row.content),
            status=ProposalStatus(row.status),
            submit_time=row.submit_time,
            deposit_end_time=row.deposit_end_time,
            voting_start_time=row.voting_start_time,
            voting_end_time=row.voting_end_time,
            proposer=row.proposer_address,
        )

    async def get_open_proposal_ids(self) -> List[int]:
        """Ids of the proposals currently in deposit or voting period."""
        async with session_scope(self._session_maker) as session:
            result = await session.execute(
                select(ProposalRow.id)
                .where(ProposalRow.status.in_([status.value for status in OPEN_PROPOSAL_STATUSES]))
                .order_by(ProposalRow.id)
            )
            return list(result.scalars().all())

    async def get_tally_result(self, proposal_id: int) -> Optional[TallyResult]:
        async with session_scope(self._session_maker) as session:
            row = await session.get(ProposalTallyResultRow, proposal_id)

        if row is None:
            return None

        return TallyResult(
            proposal_id=row.proposal_id,
            yes=int(row.yes),
            abstain=int(row.abstain),
            no=int(row.no),
            no_with_veto=int(row.no_with_veto),
            height=row.height,
        )

    async def get_deposits(self, proposal_id: int) -> List[Deposit]:
        async with session_scope(self._session_maker) as session:
            result = await session.execute(
                select(ProposalDepositRow)
                .where(ProposalDepositRow.proposal_id == proposal_id)
                .order_by(ProposalDepositRow.height, ProposalDepositRow.depositor_address)
            )
            rows = result.scalars().all()

        return [
            Deposit(
                proposal_id=row.proposal_id,
                depositor=row.depositor_address,
                amount=coins_from_json(row.amount),
                height=row.height,
            )
            for row in rows
        ]

    async def get_votes(self, proposal_id: int) -> List[Vote]:
        async with session_scope(self._session_maker) as session:
            result = await session.execute(
                select(ProposalVoteRow)
                .where(ProposalVoteRow.proposal_id == proposal_id)
                .order_by(ProposalVoteRow.voter_address)
            )
            rows = result.scalars().all()

        return [
            Vote(
                proposal_id=row.proposal_id,
                voter=row.voter_address,
                option=VoteOption(row.option),
                height=row.height,
            )
            for row in rows
        ]
