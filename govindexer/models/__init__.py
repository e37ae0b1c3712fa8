"""
Database models for the governance indexer.

Contains SQLAlchemy tables that hold the projected governance state
and chain parameters.
"""

from .base import BaseModel, SingletonRowMixin
from .gov import (
    GovParamsRow, ProposalRow, ProposalDepositRow, ProposalVoteRow,
    ProposalTallyResultRow
)
from .interchainstaking import InterchainStakingParamsRow
from .emoney import EMoneyGasPricesRow

__all__ = [
    "BaseModel",
    "SingletonRowMixin",
    "GovParamsRow",
    "ProposalRow",
    "ProposalDepositRow",
    "ProposalVoteRow",
    "ProposalTallyResultRow",
    "InterchainStakingParamsRow",
    "EMoneyGasPricesRow",
]
