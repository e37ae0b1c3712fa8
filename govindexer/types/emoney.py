"""
e-Money authority gas prices.
"""

from typing import List

from pydantic import BaseModel, field_validator

from .coins import DecCoin


class EMoneyGasPrices(BaseModel):
    """Minimum gas prices, one decimal amount per denomination."""

    gas_prices: List[DecCoin]
    height: int

    @field_validator("gas_prices")
    @classmethod
    def validate_unique_denoms(cls, v: List[DecCoin]) -> List[DecCoin]:
        denoms = [coin.denom for coin in v]
        if len(denoms) != len(set(denoms)):
            raise ValueError(f"Duplicate denominations in gas prices: {denoms}")
        return sorted(v, key=lambda coin: coin.denom)
