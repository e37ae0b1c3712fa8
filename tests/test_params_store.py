"""
Test the height-guarded singleton parameter store.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from govindexer.core.exceptions import DatabaseError, SerializationError
from govindexer.models import EMoneyGasPricesRow, GovParamsRow
from govindexer.services import ParamsCategory
from govindexer.types import (
    Coin, DecCoin, DepositParams, EMoneyGasPrices, GovParams, GovParamsPayload,
    InterchainStakingParams, InterchainStakingParamsPayload, TallyParams, VotingParams
)


def make_gov_params(height: int, min_deposit: int = 10_000_000, quorum: str = "0.334") -> GovParams:
    return GovParams(
        params=GovParamsPayload(
            deposit_params=DepositParams(
                min_deposit=[Coin(denom="uatom", amount=min_deposit)],
                max_deposit_period=timedelta(days=14),
            ),
            voting_params=VotingParams(voting_period=timedelta(days=14)),
            tally_params=TallyParams(
                quorum=Decimal(quorum),
                threshold=Decimal("0.5"),
                veto_threshold=Decimal("0.334"),
            ),
        ),
        height=height,
    )


async def count_rows(engine, model) -> int:
    async with engine.connect() as conn:
        return (await conn.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_get_before_any_write_returns_none(gov_db):
    assert await gov_db.get_gov_params() is None
    assert await gov_db.get_interchain_staking_params() is None
    assert await gov_db.get_emoney_gas_prices() is None


@pytest.mark.asyncio
async def test_gov_params_round_trip(gov_db):
    params = make_gov_params(height=10)
    await gov_db.save_gov_params(params)

    stored = await gov_db.get_gov_params()
    assert stored == params


@pytest.mark.asyncio
async def test_gov_params_same_write_twice_is_idempotent(gov_db, engine):
    params = make_gov_params(height=10)
    await gov_db.save_gov_params(params)
    await gov_db.save_gov_params(params)

    assert await gov_db.get_gov_params() == params
    assert await count_rows(engine, GovParamsRow) == 1


@pytest.mark.asyncio
async def test_gov_params_stale_write_is_ignored(gov_db, engine):
    await gov_db.save_gov_params(make_gov_params(height=10, min_deposit=100))
    await gov_db.save_gov_params(make_gov_params(height=5, min_deposit=5))

    stored = await gov_db.get_gov_params()
    assert stored.height == 10
    assert stored.params.deposit_params.min_deposit == [Coin(denom="uatom", amount=100)]
    assert await count_rows(engine, GovParamsRow) == 1


@pytest.mark.asyncio
async def test_gov_params_newer_write_replaces(gov_db):
    await gov_db.save_gov_params(make_gov_params(height=10, quorum="0.4"))
    await gov_db.save_gov_params(make_gov_params(height=20, quorum="0.2"))

    stored = await gov_db.get_gov_params()
    assert stored.height == 20
    assert stored.params.tally_params.quorum == Decimal("0.2")


@pytest.mark.asyncio
async def test_gov_params_same_height_write_replaces(gov_db):
    await gov_db.save_gov_params(make_gov_params(height=10, min_deposit=100))
    await gov_db.save_gov_params(make_gov_params(height=10, min_deposit=250))

    stored = await gov_db.get_gov_params()
    assert stored == make_gov_params(height=10, min_deposit=250)


@pytest.mark.asyncio
async def test_large_coin_amounts_survive(gov_db):
    huge = 10 ** 30
    await gov_db.save_gov_params(make_gov_params(height=1, min_deposit=huge))

    stored = await gov_db.get_gov_params()
    assert stored.params.deposit_params.min_deposit[0].amount == huge


@pytest.mark.asyncio
async def test_interchain_staking_params_guard(gov_db):
    newer = InterchainStakingParams(
        params=InterchainStakingParamsPayload(
            deposit_interval=20,
            validatorset_interval=200,
            commission_rate=Decimal("0.025"),
            unbonding_enabled=True,
        ),
        height=50,
    )
    older = InterchainStakingParams(
        params=InterchainStakingParamsPayload(
            deposit_interval=10,
            validatorset_interval=100,
            commission_rate=Decimal("0.05"),
        ),
        height=40,
    )

    await gov_db.save_interchain_staking_params(newer)
    await gov_db.save_interchain_staking_params(older)

    assert await gov_db.get_interchain_staking_params() == newer


@pytest.mark.asyncio
async def test_emoney_gas_prices_single_sorted_row(gov_db, engine):
    gas_prices = EMoneyGasPrices(
        gas_prices=[
            DecCoin(denom="ungm", amount=Decimal("1")),
            DecCoin(denom="echf", amount=Decimal("0.53")),
            DecCoin(denom="edkk", amount=Decimal("3.70")),
        ],
        height=1,
    )
    await gov_db.save_emoney_gas_prices(gas_prices)

    stored = await gov_db.get_emoney_gas_prices()
    assert stored.height == 1
    assert [coin.denom for coin in stored.gas_prices] == ["echf", "edkk", "ungm"]
    assert stored.gas_prices[1].amount == Decimal("3.7")
    assert await count_rows(engine, EMoneyGasPricesRow) == 1


@pytest.mark.asyncio
async def test_put_accepts_category_value_and_plain_payload(gov_db):
    await gov_db.put_params(
        "emoney_gas_prices",
        [{"denom": "eeur", "amount": "0.25"}],
        7,
    )

    stored = await gov_db.get_params(ParamsCategory.EMONEY_GAS_PRICES)
    assert stored.height == 7
    assert stored.payload == [DecCoin(denom="eeur", amount=Decimal("0.25"))]


@pytest.mark.asyncio
async def test_unserializable_payload_fails_before_write(gov_db):
    await gov_db.save_gov_params(make_gov_params(height=3))

    with pytest.raises(SerializationError):
        await gov_db.put_params(ParamsCategory.GOV, {"deposit_params": "nope"}, 99)

    stored = await gov_db.get_gov_params()
    assert stored.height == 3


@pytest.mark.asyncio
async def test_duplicate_gas_price_denoms_rejected(gov_db):
    with pytest.raises(SerializationError) as exc_info:
        await gov_db.put_params(
            ParamsCategory.EMONEY_GAS_PRICES,
            [
                DecCoin(denom="echf", amount=Decimal("1")),
                DecCoin(denom="echf", amount=Decimal("2")),
            ],
            1,
        )

    assert exc_info.value.details["denoms"] == ["echf", "echf"]
    assert await gov_db.get_emoney_gas_prices() is None


def test_gas_prices_model_rejects_duplicate_denoms():
    with pytest.raises(ValidationError):
        EMoneyGasPrices(
            gas_prices=[
                DecCoin(denom="echf", amount=Decimal("1")),
                DecCoin(denom="echf", amount=Decimal("2")),
            ],
            height=1,
        )


@pytest.mark.asyncio
async def test_closed_database_refuses_work(gov_db):
    await gov_db.close()

    with pytest.raises(DatabaseError):
        await gov_db.get_gov_params()
