"""
Typed protocol messages handed over by the transaction decoder.

Only the fields needed to tell which accounts a message involves are modelled.
"""

from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict

from .coins import Coin
from .gov import VoteOption


class ProtocolMessage(BaseModel):
    """Base class for decoded transaction messages."""

    model_config = ConfigDict(frozen=True)

    type_url: ClassVar[str]


# x/bank

class MsgSend(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.bank.v1beta1.MsgSend"

    from_address: str
    to_address: str
    amount: List[Coin] = []


class BankIO(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    coins: List[Coin] = []


class MsgMultiSend(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.bank.v1beta1.MsgMultiSend"

    inputs: List[BankIO]
    outputs: List[BankIO]


# x/staking

class MsgCreateValidator(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.staking.v1beta1.MsgCreateValidator"

    delegator_address: str
    validator_address: str


class MsgEditValidator(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.staking.v1beta1.MsgEditValidator"

    validator_address: str


class MsgDelegate(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.staking.v1beta1.MsgDelegate"

    delegator_address: str
    validator_address: str
    amount: Optional[Coin] = None


class MsgUndelegate(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.staking.v1beta1.MsgUndelegate"

    delegator_address: str
    validator_address: str
    amount: Optional[Coin] = None


class MsgBeginRedelegate(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.staking.v1beta1.MsgBeginRedelegate"

    delegator_address: str
    validator_src_address: str
    validator_dst_address: str
    amount: Optional[Coin] = None


class MsgCancelUnbondingDelegation(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.staking.v1beta1.MsgCancelUnbondingDelegation"

    delegator_address: str
    validator_address: str
    amount: Optional[Coin] = None
    creation_height: int = 0


# x/gov

class MsgSubmitProposal(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.gov.v1beta1.MsgSubmitProposal"

    proposer: str
    initial_deposit: List[Coin] = []


class MsgDeposit(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.gov.v1beta1.MsgDeposit"

    proposal_id: int
    depositor: str
    amount: List[Coin] = []


class MsgVote(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.gov.v1beta1.MsgVote"

    proposal_id: int
    voter: str
    option: VoteOption


# x/distribution

class MsgWithdrawDelegatorReward(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.distribution.v1beta1.MsgWithdrawDelegatorReward"

    delegator_address: str
    validator_address: str


class MsgSetWithdrawAddress(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.distribution.v1beta1.MsgSetWithdrawAddress"

    delegator_address: str
    withdraw_address: str


# x/slashing

class MsgUnjail(ProtocolMessage):
    type_url: ClassVar[str] = "/cosmos.slashing.v1beta1.MsgUnjail"

    validator_addr: str
