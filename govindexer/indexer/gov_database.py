"""
Persistence facade invoked by the ingestion pipeline once per decoded event
or block.
"""

from typing import Any, List, Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from govindexer.core.config import Settings, VoteConflictPolicy
from govindexer.core.database import DatabaseManager, create_engine, create_session_maker
from govindexer.core.exceptions import DatabaseError
from govindexer.services.address_resolver import AddressResolver, default_address_resolver
from govindexer.services.encoding import EncodingConfig
from govindexer.services.event_writer import EntityKind, EventWriter
from govindexer.services.params_store import ParamsCategory, ParamsStore, StoredParams
from govindexer.types.emoney import EMoneyGasPrices
from govindexer.types.gov import (
    Deposit, GovParams, Proposal, ProposalUpdate, TallyResult, Vote
)
from govindexer.types.interchainstaking import InterchainStakingParams
from govindexer.types.messages import ProtocolMessage


logger = structlog.get_logger(__name__)


class GovDatabase:
    """
    Governance state projection over a relational store.

    Features:
    - Height-guarded singleton parameter rows
    - Atomic, duplicate-tolerant batch inserts of governance facts
    - Type-tagged storage of polymorphic proposal content
    - Address extraction for decoded messages

    The encoding configuration is passed in explicitly; nothing here reads
    process-wide codec state.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        encoding_config: EncodingConfig,
        vote_conflict_policy: VoteConflictPolicy = VoteConflictPolicy.IGNORE,
        address_resolver: Optional[AddressResolver] = None
    ):
        self.logger = logger.bind(service="gov_database")
        self.engine = engine
        self.encoding_config = encoding_config

        session_maker = create_session_maker(engine)
        dialect_name = engine.dialect.name

        self.params = ParamsStore(session_maker, dialect_name)
        self.events = EventWriter(
            session_maker,
            dialect_name,
            encoding_config.codec,
            vote_conflict_policy
        )
        self.address_resolver = address_resolver or default_address_resolver()
        self._closed = False

        self.logger.info(
            "Governance database ready",
            dialect=dialect_name,
            vote_conflict_policy=self.events.vote_conflict_policy.value,
            content_types=len(encoding_config.content_registry)
        )

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        encoding_config: EncodingConfig,
        address_resolver: Optional[AddressResolver] = None
    ) -> "GovDatabase":
        return cls(
            create_engine(config),
            encoding_config,
            vote_conflict_policy=config.vote_conflict_policy,
            address_resolver=address_resolver
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def create_tables(self) -> None:
        self._ensure_open()
        await DatabaseManager.create_tables(self.engine)

    async def health_check(self) -> bool:
        self._ensure_open()
        return await DatabaseManager.health_check(self.engine)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.engine.dispose()
        self.logger.info("Governance database closed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise DatabaseError("Governance database is closed")

    # Parameters --------------------------------------------------------------

    async def put_params(self, category: ParamsCategory, payload: Any, height: int) -> None:
        self._ensure_open()
        await self.params.put(category, payload, height)

    async def get_params(self, category: ParamsCategory) -> Optional[StoredParams]:
        self._ensure_open()
        return await self.params.get(category)

    async def save_gov_params(self, params: GovParams) -> None:
        """Saves the given x/gov parameters unless newer ones are stored."""
        await self.put_params(ParamsCategory.GOV, params.params, params.height)

    async def get_gov_params(self) -> Optional[GovParams]:
        """Returns the most recent governance parameters, or None."""
        stored = await self.get_params(ParamsCategory.GOV)
        if stored is None:
            return None
        return GovParams(params=stored.payload, height=stored.height)

    async def save_interchain_staking_params(self, params: InterchainStakingParams) -> None:
        await self.put_params(ParamsCategory.INTERCHAIN_STAKING, params.params, params.height)

    async def get_interchain_staking_params(self) -> Optional[InterchainStakingParams]:
        stored = await self.get_params(ParamsCategory.INTERCHAIN_STAKING)
        if stored is None:
            return None
        return InterchainStakingParams(params=stored.payload, height=stored.height)

    async def save_emoney_gas_prices(self, gas_prices: EMoneyGasPrices) -> None:
        await self.put_params(ParamsCategory.EMONEY_GAS_PRICES, gas_prices.gas_prices, gas_prices.height)

    async def get_emoney_gas_prices(self) -> Optional[EMoneyGasPrices]:
        stored = await self.get_params(ParamsCategory.EMONEY_GAS_PRICES)
        if stored is None:
            return None
        return EMoneyGasPrices(gas_prices=stored.payload, height=stored.height)

    # Governance facts --------------------------------------------------------

    async def append_many(self, kind: EntityKind, records: Sequence[Any]) -> None:
        self._ensure_open()
        await self.events.append_many(kind, records)

    async def save_proposals(self, proposals: Sequence[Proposal]) -> None:
        self._ensure_open()
        await self.events.save_proposals(proposals)

    async def update_proposal(self, proposal_update: ProposalUpdate) -> None:
        self._ensure_open()
        await self.events.update_proposal(proposal_update)

    async def save_deposits(self, deposits: Sequence[Deposit]) -> None:
        self._ensure_open()
        await self.events.save_deposits(deposits)

    async def save_vote(self, vote: Vote) -> None:
        self._ensure_open()
        await self.events.save_vote(vote)

    async def save_votes(self, votes: Sequence[Vote]) -> None:
        self._ensure_open()
        await self.events.save_votes(votes)

    async def save_tally_results(self, tallies: Sequence[TallyResult]) -> None:
        self._ensure_open()
        await self.events.save_tally_results(tallies)

    async def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        self._ensure_open()
        return await self.events.get_proposal(proposal_id)

    async def get_open_proposal_ids(self) -> List[int]:
        self._ensure_open()
        return await self.events.get_open_proposal_ids()

    async def get_tally_result(self, proposal_id: int) -> Optional[TallyResult]:
        self._ensure_open()
        return await self.events.get_tally_result(proposal_id)

    # Messages ----------------------------------------------------------------

    def get_message_addresses(self, msg: ProtocolMessage) -> List[str]:
        return self.address_resolver.resolve(msg)
