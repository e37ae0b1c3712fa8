"""
Domain types exchanged between the ingestion pipeline and the persistence layer.
"""

from .coins import Coin, DecCoin
from .content import (
    ProposalContent, TextProposal, ParameterChangeProposal, ParamChange,
    SoftwareUpgradeProposal, CancelSoftwareUpgradeProposal, Plan
)
from .gov import (
    ProposalStatus, VoteOption, OPEN_PROPOSAL_STATUSES,
    DepositParams, VotingParams, TallyParams, GovParamsPayload, GovParams,
    Proposal, ProposalUpdate, Deposit, Vote, TallyResult
)
from .interchainstaking import InterchainStakingParams, InterchainStakingParamsPayload
from .emoney import EMoneyGasPrices

__all__ = [
    "Coin",
    "DecCoin",
    "ProposalContent",
    "TextProposal",
    "ParameterChangeProposal",
    "ParamChange",
    "SoftwareUpgradeProposal",
    "CancelSoftwareUpgradeProposal",
    "Plan",
    "ProposalStatus",
    "VoteOption",
    "OPEN_PROPOSAL_STATUSES",
    "DepositParams",
    "VotingParams",
    "TallyParams",
    "GovParamsPayload",
    "GovParams",
    "Proposal",
    "ProposalUpdate",
    "Deposit",
    "Vote",
    "TallyResult",
    "InterchainStakingParams",
    "InterchainStakingParamsPayload",
    "EMoneyGasPrices",
]
