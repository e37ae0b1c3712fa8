"""
Interchain staking parameters table.
"""

from typing import Any, Dict

from sqlalchemy import BigInteger, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, SingletonRowMixin


class InterchainStakingParamsRow(SingletonRowMixin, BaseModel):
    """Current interchain staking module parameters."""

    __tablename__ = "interchain_staking_params"

    params: Mapped[Dict[str, Any]] = mapped_column(JSON)

    height: Mapped[int] = mapped_column(BigInteger, index=True)

    def __repr__(self) -> str:
        return f"<InterchainStakingParamsRow(height={self.height})>"
