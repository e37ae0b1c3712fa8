"""
Governance domain types: module parameters and the decoded event records
that the ingestion pipeline hands to the persistence layer.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .coins import Coin
from .content import ProposalContent


class ProposalStatus(str, Enum):
    """Lifecycle status of a governance proposal."""
    UNSPECIFIED = "PROPOSAL_STATUS_UNSPECIFIED"
    DEPOSIT_PERIOD = "PROPOSAL_STATUS_DEPOSIT_PERIOD"
    VOTING_PERIOD = "PROPOSAL_STATUS_VOTING_PERIOD"
    PASSED = "PROPOSAL_STATUS_PASSED"
    REJECTED = "PROPOSAL_STATUS_REJECTED"
    FAILED = "PROPOSAL_STATUS_FAILED"
    INVALID = "PROPOSAL_STATUS_INVALID"

    @property
    def is_open(self) -> bool:
        return self in OPEN_PROPOSAL_STATUSES


OPEN_PROPOSAL_STATUSES = frozenset({ProposalStatus.DEPOSIT_PERIOD, ProposalStatus.VOTING_PERIOD})


class VoteOption(str, Enum):
    """Option chosen by a voter."""
    UNSPECIFIED = "VOTE_OPTION_UNSPECIFIED"
    YES = "VOTE_OPTION_YES"
    ABSTAIN = "VOTE_OPTION_ABSTAIN"
    NO = "VOTE_OPTION_NO"
    NO_WITH_VETO = "VOTE_OPTION_NO_WITH_VETO"


# Parameters ------------------------------------------------------------------

class DepositParams(BaseModel):
    min_deposit: List[Coin]
    max_deposit_period: timedelta


class VotingParams(BaseModel):
    voting_period: timedelta


class TallyParams(BaseModel):
    quorum: Decimal
    threshold: Decimal
    veto_threshold: Decimal


class GovParamsPayload(BaseModel):
    deposit_params: DepositParams
    voting_params: VotingParams
    tally_params: TallyParams


class GovParams(BaseModel):
    """x/gov parameters observed at a given height."""

    params: GovParamsPayload
    height: int


# Records ---------------------------------------------------------------------

@dataclass
class Proposal:
    """A submitted governance proposal."""
    proposal_id: int
    proposal_route: str
    proposal_type: str
    content: ProposalContent
    status: ProposalStatus
    submit_time: datetime
    deposit_end_time: Optional[datetime]
    voting_start_time: Optional[datetime]
    voting_end_time: Optional[datetime]
    proposer: str

    @property
    def title(self) -> str:
        return self.content.get_title()

    @property
    def description(self) -> str:
        return self.content.get_description()


@dataclass
class ProposalUpdate:
    """Status transition of an existing proposal."""
    proposal_id: int
    status: ProposalStatus
    voting_start_time: Optional[datetime] = None
    voting_end_time: Optional[datetime] = None


@dataclass
class Deposit:
    """A single deposit event."""
    proposal_id: int
    depositor: str
    amount: List[Coin]
    height: int


@dataclass
class Vote:
    """A vote cast on a proposal."""
    proposal_id: int
    voter: str
    option: VoteOption
    height: int


@dataclass
class TallyResult:
    """Tally snapshot of a proposal at a given height."""
    proposal_id: int
    yes: int
    abstain: int
    no: int
    no_with_veto: int
    height: int
