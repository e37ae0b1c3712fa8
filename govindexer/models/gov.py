"""
Governance tables - parameters, proposals, deposits, votes and tally results.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    BigInteger, DateTime, ForeignKey, Index, JSON, String, Text
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, SingletonRowMixin


class GovParamsRow(SingletonRowMixin, BaseModel):
    """Current x/gov parameters, one row regardless of how often written."""

    __tablename__ = "gov_params"

    deposit_params: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        comment="Deposit parameters as JSON"
    )

    voting_params: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        comment="Voting parameters as JSON"
    )

    tally_params: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        comment="Tally parameters as JSON"
    )

    height: Mapped[int] = mapped_column(
        BigInteger,
        index=True,
        comment="Height at which the parameters were observed"
    )

    def __repr__(self) -> str:
        return f"<GovParamsRow(height={self.height})>"


class ProposalRow(BaseModel):
    """Governance proposal, inserted once at submission."""

    __tablename__ = "proposal"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="On-chain proposal id"
    )

    title: Mapped[str] = mapped_column(Text)
    description: Mapped[str] = mapped_column(Text)

    content: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        comment="Type-tagged content envelope"
    )

    proposer_address: Mapped[str] = mapped_column(String(128))
    proposal_route: Mapped[str] = mapped_column(Text)
    proposal_type: Mapped[str] = mapped_column(Text)

    status: Mapped[str] = mapped_column(
        String(50),
        comment="ProposalStatus value"
    )

    submit_time: Mapped[datetime] = mapped_column(DateTime)
    deposit_end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    voting_start_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    voting_end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)

    __table_args__ = (
        Index("idx_proposal_status", "status"),
        Index("idx_proposal_proposer", "proposer_address"),
    )

    def __repr__(self) -> str:
        return f"<ProposalRow(id={self.id}, status={self.status})>"


class ProposalDepositRow(BaseModel):
    """One deposit event; the primary key is the deposit's natural key."""

    __tablename__ = "proposal_deposit"

    proposal_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("proposal.id"),
        primary_key=True
    )

    depositor_address: Mapped[str] = mapped_column(
        String(128),
        primary_key=True
    )

    height: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True
    )

    amount: Mapped[List[Dict[str, str]]] = mapped_column(
        JSON,
        comment="Deposited coins as [{denom, amount}]"
    )

    def __repr__(self) -> str:
        return f"<ProposalDepositRow(proposal={self.proposal_id}, depositor={self.depositor_address})>"


class ProposalVoteRow(BaseModel):
    """The live vote of one voter on one proposal."""

    __tablename__ = "proposal_vote"

    proposal_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("proposal.id"),
        primary_key=True
    )

    voter_address: Mapped[str] = mapped_column(
        String(128),
        primary_key=True
    )

    option: Mapped[str] = mapped_column(String(50))

    height: Mapped[int] = mapped_column(BigInteger)

    def __repr__(self) -> str:
        return f"<ProposalVoteRow(proposal={self.proposal_id}, voter={self.voter_address}, option={self.option})>"


class ProposalTallyResultRow(BaseModel):
    """Latest tally snapshot of a proposal."""

    __tablename__ = "proposal_tally_result"

    proposal_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("proposal.id"),
        primary_key=True,
        comment="Unique per proposal"
    )

    # Arbitrary precision integers kept as text
    yes: Mapped[str] = mapped_column(Text)
    abstain: Mapped[str] = mapped_column(Text)
    no: Mapped[str] = mapped_column(Text)
    no_with_veto: Mapped[str] = mapped_column(Text)

    height: Mapped[int] = mapped_column(BigInteger)

    def __repr__(self) -> str:
        return f"<ProposalTallyResultRow(proposal={self.proposal_id}, height={self.height})>"
