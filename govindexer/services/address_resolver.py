"""
Resolution of the account addresses involved in a protocol message.

A resolver either recognizes the message kind and returns its addresses, or
declines by returning None. AddressResolver tries its resolvers in order and
the first one that does not decline wins, so chain-specific resolvers go in
front of the generic one.
"""

from typing import Callable, Dict, List, Optional, Type

import structlog

from govindexer.core.exceptions import MessageNotSupportedError, kind_of
from govindexer.types.messages import (
    ProtocolMessage,
    MsgSend, MsgMultiSend,
    MsgCreateValidator, MsgEditValidator, MsgDelegate, MsgUndelegate,
    MsgBeginRedelegate, MsgCancelUnbondingDelegation,
    MsgSubmitProposal, MsgDeposit, MsgVote,
    MsgWithdrawDelegatorReward, MsgSetWithdrawAddress,
    MsgUnjail,
)


logger = structlog.get_logger(__name__)

MessageAddressesResolver = Callable[[ProtocolMessage], Optional[List[str]]]


_COSMOS_MESSAGE_ADDRESSES: Dict[Type[ProtocolMessage], Callable[[ProtocolMessage], List[str]]] = {
    # x/bank
    MsgSend: lambda msg: [msg.from_address, msg.to_address],
    MsgMultiSend: lambda msg: [io.address for io in (*msg.inputs, *msg.outputs)],

    # x/staking
    MsgCreateValidator: lambda msg: [msg.delegator_address, msg.validator_address],
    MsgEditValidator: lambda msg: [msg.validator_address],
    MsgDelegate: lambda msg: [msg.delegator_address, msg.validator_address],
    MsgUndelegate: lambda msg: [msg.delegator_address, msg.validator_address],
    MsgBeginRedelegate: lambda msg: [
        msg.delegator_address, msg.validator_src_address, msg.validator_dst_address
    ],

    # x/gov
    MsgSubmitProposal: lambda msg: [msg.proposer],
    MsgDeposit: lambda msg: [msg.depositor],
    MsgVote: lambda msg: [msg.voter],

    # x/distribution
    MsgWithdrawDelegatorReward: lambda msg: [msg.delegator_address, msg.validator_address],
    MsgSetWithdrawAddress: lambda msg: [msg.delegator_address, msg.withdraw_address],

    # x/slashing
    MsgUnjail: lambda msg: [msg.validator_addr],
}


def cosmos_message_addresses_resolver(msg: ProtocolMessage) -> Optional[List[str]]:
    """Generic resolver for the standard Cosmos SDK messages."""
    extract = _COSMOS_MESSAGE_ADDRESSES.get(type(msg))
    if extract is None:
        return None
    return extract(msg)


def missing_staking_messages_resolver(msg: ProtocolMessage) -> Optional[List[str]]:
    """Staking messages the generic resolver does not know about."""
    if isinstance(msg, MsgCancelUnbondingDelegation):
        return [msg.delegator_address, msg.validator_address]
    return None


class AddressResolver:
    """Ordered chain of message resolvers, first match wins."""

    def __init__(self, *resolvers: MessageAddressesResolver):
        if not resolvers:
            raise ValueError("AddressResolver needs at least one resolver")
        self._resolvers = tuple(resolvers)
        self.logger = logger.bind(service="address_resolver")

    @property
    def resolvers(self) -> tuple:
        return self._resolvers

    def resolve(self, msg: ProtocolMessage) -> List[str]:
        """
        Return the addresses involved in the message.

        Raises:
            MessageNotSupportedError: every resolver declined the message
        """
        for resolver in self._resolvers:
            addresses = resolver(msg)
            if addresses is not None:
                return addresses

        self.logger.debug("No resolver for message", kind=kind_of(msg))
        raise MessageNotSupportedError(kind_of(msg))


def join_message_resolvers(*resolvers: MessageAddressesResolver) -> AddressResolver:
    return AddressResolver(*resolvers)


def default_address_resolver() -> AddressResolver:
    """Chain-specific resolvers first, generic Cosmos resolver last."""
    return join_message_resolvers(
        missing_staking_messages_resolver,
        cosmos_message_addresses_resolver,
    )
