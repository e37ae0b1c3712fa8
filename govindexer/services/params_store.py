"""
Singleton parameter store.

Each parameter category lives in a one-row table. Writes are a single
``INSERT ... ON CONFLICT (one_row_id) DO UPDATE ... WHERE stored.height <=
excluded.height`` statement, so a stale write leaves the row untouched
without a read-then-write race between concurrent callers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from govindexer.core.database import get_upsert_insert, session_scope
from govindexer.core.exceptions import SerializationError
from govindexer.models import EMoneyGasPricesRow, GovParamsRow, InterchainStakingParamsRow
from govindexer.models.base import SingletonRowMixin
from govindexer.types.coins import DecCoin
from govindexer.types.gov import GovParamsPayload
from govindexer.types.interchainstaking import InterchainStakingParamsPayload


logger = structlog.get_logger(__name__)


class ParamsCategory(str, Enum):
    """Parameter groups kept as singleton rows."""
    GOV = "gov"
    INTERCHAIN_STAKING = "interchain_staking"
    EMONEY_GAS_PRICES = "emoney_gas_prices"


@dataclass(frozen=True)
class StoredParams:
    """Current payload of a category and the height it was written at."""
    payload: Any
    height: int


@dataclass(frozen=True)
class _ParamsTable:
    model: Type[SingletonRowMixin]
    adapter: TypeAdapter
    to_columns: Callable[[Any], Dict[str, Any]]
    from_row: Callable[[Any], Any]


def _gov_columns(dumped: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "deposit_params": dumped["deposit_params"],
        "voting_params": dumped["voting_params"],
        "tally_params": dumped["tally_params"],
    }


def _gov_from_row(row: GovParamsRow) -> Dict[str, Any]:
    return {
        "deposit_params": row.deposit_params,
        "voting_params": row.voting_params,
        "tally_params": row.tally_params,
    }


def _gas_price_columns(dumped: List[Dict[str, Any]]) -> Dict[str, Any]:
    denoms = [coin["denom"] for coin in dumped]
    if len(denoms) != len(set(denoms)):
        raise SerializationError(
            "Gas prices contain duplicate denominations",
            {"denoms": denoms}
        )
    return {"gas_prices": sorted(dumped, key=lambda coin: coin["denom"])}


_TABLES: Dict[ParamsCategory, _ParamsTable] = {
    ParamsCategory.GOV: _ParamsTable(
        model=GovParamsRow,
        adapter=TypeAdapter(GovParamsPayload),
        to_columns=_gov_columns,
        from_row=_gov_from_row,
    ),
    ParamsCategory.INTERCHAIN_STAKING: _ParamsTable(
        model=InterchainStakingParamsRow,
        adapter=TypeAdapter(InterchainStakingParamsPayload),
        to_columns=lambda dumped: {"params": dumped},
        from_row=lambda row: row.params,
    ),
    ParamsCategory.EMONEY_GAS_PRICES: _ParamsTable(
        model=EMoneyGasPricesRow,
        adapter=TypeAdapter(List[DecCoin]),
        to_columns=_gas_price_columns,
        from_row=lambda row: row.gas_prices,
    ),
}


class ParamsStore:
    """
    Height-guarded singleton storage for chain parameters.

    ``put`` never reports whether a write was applied or ignored as stale;
    callers that need to know re-read with ``get``.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], dialect_name: str):
        self._session_maker = session_maker
        self._insert = get_upsert_insert(dialect_name)
        self.logger = logger.bind(service="params_store")

    def _serialize(self, category: ParamsCategory, payload: Any) -> Dict[str, Any]:
        table = _TABLES[category]
        try:
            value = table.adapter.validate_python(payload)
            dumped = table.adapter.dump_python(value, mode="json")
        except (ValidationError, PydanticSerializationError) as e:
            raise SerializationError(
                f"Failed to serialize {category.value} params: {e}",
                {"category": category.value}
            ) from e
        return table.to_columns(dumped)

    async def put(self, category: ParamsCategory, payload: Any, height: int) -> None:
        """
        Store the payload of a category unless a newer height is already stored.

        Raises:
            SerializationError: payload could not be encoded; nothing was written
        """
        category = ParamsCategory(category)
        columns = self._serialize(category, payload)
        table = _TABLES[category].model.__table__

        stmt = self._insert(table).values(**columns, height=height)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.one_row_id],
            set_={name: stmt.excluded[name] for name in (*columns, "height")},
            where=table.c.height <= stmt.excluded.height,
        )

        try:
            async with session_scope(self._session_maker) as session:
                result = await session.execute(stmt)
                applied = result.rowcount != 0
        except Exception as e:
            self.logger.error(
                "Failed to store params",
                category=category.value,
                height=height,
                error=str(e)
            )
            raise

        if applied:
            self.logger.debug("Params stored", category=category.value, height=height)
        else:
            self.logger.debug("Stale params write ignored", category=category.value, height=height)

    async def get(self, category: ParamsCategory) -> Optional[StoredParams]:
        """
        Return the current payload of a category, or None if never written.

        Raises:
            SerializationError: the stored payload no longer decodes
        """
        category = ParamsCategory(category)
        table = _TABLES[category]

        async with session_scope(self._session_maker) as session:
            result = await session.execute(select(table.model).limit(1))
            row = result.scalar_one_or_none()

        if row is None:
            return None

        try:
            payload = table.adapter.validate_python(table.from_row(row))
        except ValidationError as e:
            raise SerializationError(
                f"Stored {category.value} params are malformed: {e}",
                {"category": category.value, "height": row.height}
            ) from e

        return StoredParams(payload=payload, height=row.height)
