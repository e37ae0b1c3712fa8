"""
Codec for polymorphic governance proposal content.

Content is stored as a type-tagged envelope::

    {"@type": "/cosmos.gov.v1beta1.TextProposal", "value": "<base64 JSON bytes>"}

The type url selects the content class on the way back, so the reader never
needs to know the set of content kinds in advance; it only needs a registry
that contains the kind.
"""

import base64
import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, Union

import structlog
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from govindexer.core.exceptions import (
    ContentDecodeError, SerializationError, UnknownContentTypeError,
    UnsupportedContentTypeError, kind_of
)
from govindexer.types.content import (
    ProposalContent, TextProposal, ParameterChangeProposal,
    SoftwareUpgradeProposal, CancelSoftwareUpgradeProposal
)


logger = structlog.get_logger(__name__)

TYPE_KEY = "@type"
VALUE_KEY = "value"

DEFAULT_CONTENT_TYPES = (
    TextProposal,
    ParameterChangeProposal,
    SoftwareUpgradeProposal,
    CancelSoftwareUpgradeProposal,
)


class ContentRegistry:
    """
    Read-only mapping of type url to content class.

    Built once at startup; use ``with_types`` to derive an extended registry.
    """

    def __init__(self, content_types: Iterable[Type[ProposalContent]] = ()):
        types_by_url: Dict[str, Type[ProposalContent]] = {}
        for content_type in content_types:
            if not (isinstance(content_type, type) and issubclass(content_type, ProposalContent)):
                raise TypeError(f"Not a ProposalContent class: {content_type!r}")
            existing = types_by_url.get(content_type.type_url)
            if existing is not None and existing is not content_type:
                raise ValueError(
                    f"Type url {content_type.type_url} already registered for {existing.__name__}"
                )
            types_by_url[content_type.type_url] = content_type
        self._types = MappingProxyType(types_by_url)

    def with_types(self, *content_types: Type[ProposalContent]) -> "ContentRegistry":
        return ContentRegistry([*self._types.values(), *content_types])

    def resolve(self, type_url: str) -> Type[ProposalContent]:
        try:
            return self._types[type_url]
        except KeyError:
            raise UnknownContentTypeError(type_url) from None

    def get(self, type_url: str) -> Optional[Type[ProposalContent]]:
        return self._types.get(type_url)

    def type_urls(self) -> List[str]:
        return sorted(self._types)

    def __contains__(self, type_url: object) -> bool:
        return type_url in self._types

    def __len__(self) -> int:
        return len(self._types)


def make_content_registry(*extra_types: Type[ProposalContent]) -> ContentRegistry:
    """Registry with the built-in content kinds plus any chain-specific ones."""
    return ContentRegistry([*DEFAULT_CONTENT_TYPES, *extra_types])


@dataclass(frozen=True)
class ContentEnvelope:
    """Type identifier plus the serialized bytes of one content kind."""
    type_url: str
    value: bytes

    def to_json(self) -> Dict[str, str]:
        return {
            TYPE_KEY: self.type_url,
            VALUE_KEY: base64.b64encode(self.value).decode("ascii"),
        }

    @classmethod
    def from_json(cls, raw: Union[Mapping[str, Any], str, bytes]) -> "ContentEnvelope":
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError as e:
                raise ContentDecodeError(f"Content envelope is not valid JSON: {e}") from e

        if not isinstance(raw, Mapping):
            raise ContentDecodeError(
                "Content envelope must be a JSON object",
                {"kind": kind_of(raw)}
            )

        type_url = raw.get(TYPE_KEY)
        encoded = raw.get(VALUE_KEY)
        if not isinstance(type_url, str) or not isinstance(encoded, str):
            raise ContentDecodeError(
                "Content envelope is missing its type or value",
                {"keys": sorted(raw)}
            )

        try:
            value = base64.b64decode(encoded, validate=True)
        except ValueError as e:
            # binascii.Error and non-ASCII text both land here
            raise ContentDecodeError(
                f"Content envelope value is not base64: {e}",
                {"type_url": type_url}
            ) from e

        return cls(type_url=type_url, value=value)


class ContentCodec:
    """Encodes proposal content into envelopes and decodes them back."""

    def __init__(self, registry: ContentRegistry):
        self.registry = registry
        self.logger = logger.bind(service="content_codec")

    def encode(self, content: Any) -> ContentEnvelope:
        """
        Wrap content into a type-tagged envelope.

        Raises:
            UnsupportedContentTypeError: content is not a ProposalContent, or its
                class is not the one registered for its type url
            SerializationError: the content model could not be dumped
        """
        if not isinstance(content, ProposalContent):
            raise UnsupportedContentTypeError(kind_of(content))
        # Nothing may be stored that decode cannot read back
        if self.registry.get(content.type_url) is not type(content):
            raise UnsupportedContentTypeError(kind_of(content))

        try:
            value = content.model_dump_json().encode("utf-8")
        except PydanticSerializationError as e:
            raise SerializationError(
                f"Failed to serialize proposal content: {e}",
                {"type_url": content.type_url}
            ) from e

        return ContentEnvelope(type_url=content.type_url, value=value)

    def encode_json(self, content: Any) -> Dict[str, str]:
        return self.encode(content).to_json()

    def decode(self, envelope: ContentEnvelope) -> ProposalContent:
        """
        Resolve the envelope's type url and rebuild the content value.

        Raises:
            UnknownContentTypeError: type url not in the registry
            ContentDecodeError: bytes are malformed for that kind
        """
        content_type = self.registry.resolve(envelope.type_url)
        try:
            return content_type.model_validate_json(envelope.value)
        except ValidationError as e:
            self.logger.warning(
                "Malformed proposal content",
                type_url=envelope.type_url,
                error=str(e)
            )
            raise ContentDecodeError(
                f"Malformed content for {envelope.type_url}",
                {"type_url": envelope.type_url, "errors": e.error_count()}
            ) from e

    def decode_json(self, raw: Union[Mapping[str, Any], str, bytes]) -> ProposalContent:
        return self.decode(ContentEnvelope.from_json(raw))
