"""
Encoding configuration assembled once at startup and passed explicitly to
the components that need it.
"""

from dataclasses import dataclass
from typing import Type

from govindexer.types.content import ProposalContent

from .content_codec import ContentCodec, ContentRegistry, make_content_registry


@dataclass(frozen=True)
class EncodingConfig:
    content_registry: ContentRegistry
    codec: ContentCodec


def make_encoding_config(*extra_content_types: Type[ProposalContent]) -> EncodingConfig:
    """
    Build the encoding configuration.

    Args:
        extra_content_types: chain-specific proposal content kinds to support
            in addition to the built-in ones
    """
    registry = make_content_registry(*extra_content_types)
    return EncodingConfig(content_registry=registry, codec=ContentCodec(registry))
