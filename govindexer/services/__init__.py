"""
Projection services: parameter store, event writer, content codec and
address resolution.
"""

from .content_codec import (
    ContentCodec, ContentEnvelope, ContentRegistry, make_content_registry
)
from .encoding import EncodingConfig, make_encoding_config
from .params_store import ParamsCategory, ParamsStore, StoredParams
from .event_writer import EntityKind, EventWriter
from .address_resolver import (
    AddressResolver, cosmos_message_addresses_resolver,
    default_address_resolver, join_message_resolvers,
    missing_staking_messages_resolver
)

__all__ = [
    "ContentCodec",
    "ContentEnvelope",
    "ContentRegistry",
    "make_content_registry",
    "EncodingConfig",
    "make_encoding_config",
    "ParamsCategory",
    "ParamsStore",
    "StoredParams",
    "EntityKind",
    "EventWriter",
    "AddressResolver",
    "cosmos_message_addresses_resolver",
    "default_address_resolver",
    "join_message_resolvers",
    "missing_staking_messages_resolver",
]
