"""
e-Money authority gas price table.
"""

from typing import Dict, List

from sqlalchemy import BigInteger, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, SingletonRowMixin


class EMoneyGasPricesRow(SingletonRowMixin, BaseModel):
    """Minimum gas prices set by the e-Money authority."""

    __tablename__ = "emoney_gas_prices"

    gas_prices: Mapped[List[Dict[str, str]]] = mapped_column(
        JSON,
        comment="Decimal coins sorted by denom as [{denom, amount}]"
    )

    height: Mapped[int] = mapped_column(BigInteger, index=True)

    def __repr__(self) -> str:
        return f"<EMoneyGasPricesRow(height={self.height})>"
