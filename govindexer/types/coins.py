"""
Coin values shared by governance records and parameters.
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, field_serializer


class Coin(BaseModel):
    """Integer amount of a single denomination."""

    model_config = ConfigDict(frozen=True)

    denom: str
    amount: int

    @field_serializer("amount", when_used="json")
    def _amount_as_string(self, amount: int) -> str:
        # Amounts exceed 64 bits on many chains
        return str(amount)


class DecCoin(BaseModel):
    """Decimal amount of a single denomination."""

    model_config = ConfigDict(frozen=True)

    denom: str
    amount: Decimal


def coins_to_json(coins: List[Coin]) -> List[dict]:
    return [coin.model_dump(mode="json") for coin in coins]


def coins_from_json(raw: List[dict]) -> List[Coin]:
    return [Coin.model_validate(item) for item in raw or []]
