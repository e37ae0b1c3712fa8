"""
Test the type-tagged proposal content codec and its registry.
"""

import base64
import json
from typing import ClassVar

import pytest

from govindexer.core.exceptions import (
    ContentDecodeError, UnknownContentTypeError, UnsupportedContentTypeError
)
from govindexer.services import (
    ContentCodec, ContentEnvelope, ContentRegistry, make_content_registry, make_encoding_config
)
from govindexer.types import (
    CancelSoftwareUpgradeProposal, ParamChange, ParameterChangeProposal, Plan,
    ProposalContent, SoftwareUpgradeProposal, TextProposal
)


class CommunityPoolSpendProposal(ProposalContent):
    type_url: ClassVar[str] = "/cosmos.distribution.v1beta1.CommunityPoolSpendProposal"

    recipient: str
    amount: str


class ImpostorTextProposal(ProposalContent):
    type_url: ClassVar[str] = TextProposal.type_url


CONTENTS = [
    TextProposal(title="Signal", description="Community signalling"),
    ParameterChangeProposal(
        title="Params",
        description="Change deposit",
        changes=[
            ParamChange(subspace="gov", key="depositparams", value='{"max_deposit_period":"86400s"}'),
            ParamChange(subspace="staking", key="MaxValidators", value="150"),
        ],
    ),
    SoftwareUpgradeProposal(
        title="v9",
        description="Upgrade to v9",
        plan=Plan(name="v9", height=9_000_000, info="https://example.org/v9.json"),
    ),
    CancelSoftwareUpgradeProposal(title="Cancel v9", description="Not ready"),
]


@pytest.fixture
def codec():
    return make_encoding_config().codec


@pytest.mark.parametrize("content", CONTENTS, ids=lambda content: type(content).__name__)
def test_round_trip_preserves_kind_and_fields(codec, content):
    decoded = codec.decode(codec.encode(content))

    assert type(decoded) is type(content)
    assert decoded == content
    assert decoded.get_title() == content.title


def test_envelope_shape(codec):
    content = TextProposal(title="Signal", description="Community signalling")

    raw = codec.encode_json(content)

    assert set(raw) == {"@type", "value"}
    assert raw["@type"] == "/cosmos.gov.v1beta1.TextProposal"
    assert json.loads(base64.b64decode(raw["value"])) == {
        "title": "Signal",
        "description": "Community signalling",
    }


def test_decode_json_accepts_text(codec):
    content = CONTENTS[2]

    assert codec.decode_json(json.dumps(codec.encode_json(content))) == content


@pytest.mark.parametrize("value", [{"title": "x"}, "just text", 42, None])
def test_encode_rejects_foreign_values(codec, value):
    with pytest.raises(UnsupportedContentTypeError) as exc_info:
        codec.encode(value)

    assert exc_info.value.kind == f"builtins.{type(value).__name__}"
    assert exc_info.value.code == "UNSUPPORTED_CONTENT_TYPE"


def test_unknown_type_url(codec):
    envelope = ContentEnvelope(type_url="/unknown.v1.Thing", value=b"{}")

    with pytest.raises(UnknownContentTypeError) as exc_info:
        codec.decode(envelope)

    assert exc_info.value.type_url == "/unknown.v1.Thing"


def test_malformed_bytes_for_known_kind(codec):
    envelope = ContentEnvelope(type_url=TextProposal.type_url, value=b'{"title": "no description"}')

    with pytest.raises(ContentDecodeError):
        codec.decode(envelope)


@pytest.mark.parametrize("raw", [
    "{not json",
    "[1, 2, 3]",
    {"@type": TextProposal.type_url},
    {"value": "e30="},
    {"@type": TextProposal.type_url, "value": "***"},
    {"@type": TextProposal.type_url, "value": "\u00e9"},
])
def test_malformed_envelopes(codec, raw):
    with pytest.raises(ContentDecodeError):
        codec.decode_json(raw)


def test_chain_specific_kind_needs_registration():
    content = CommunityPoolSpendProposal(
        title="Fund",
        description="Fund the docs team",
        recipient="cosmos1recipient",
        amount="1000uatom",
    )

    with pytest.raises(UnsupportedContentTypeError) as exc_info:
        make_encoding_config().codec.encode(content)
    assert exc_info.value.kind.endswith("CommunityPoolSpendProposal")

    extended = make_encoding_config(CommunityPoolSpendProposal)
    codec = extended.codec
    assert codec.decode(codec.encode(content)) == content
    assert CommunityPoolSpendProposal.type_url in extended.content_registry


def test_registry_with_types_leaves_original_untouched():
    base = make_content_registry()
    extended = base.with_types(CommunityPoolSpendProposal)

    assert len(base) == 4
    assert len(extended) == 5
    assert CommunityPoolSpendProposal.type_url not in base
    assert extended.resolve(CommunityPoolSpendProposal.type_url) is CommunityPoolSpendProposal


def test_registry_rejects_conflicting_type_url():
    with pytest.raises(ValueError):
        make_content_registry(ImpostorTextProposal)


def test_registry_rejects_non_content_classes():
    with pytest.raises(TypeError):
        ContentRegistry([dict])


def test_registering_same_class_twice_is_harmless():
    registry = make_content_registry(TextProposal)

    assert len(registry) == 4
    assert registry.type_urls() == sorted(content.type_url for content in CONTENTS)


def test_empty_registry_encodes_nothing():
    codec = ContentCodec(ContentRegistry())

    with pytest.raises(UnsupportedContentTypeError):
        codec.encode(TextProposal(title="Signal", description="x"))


def test_subclass_sharing_a_registered_type_url_is_refused(codec):
    # Would decode back as a plain TextProposal
    class AnnotatedTextProposal(TextProposal):
        note: str = ""

    with pytest.raises(UnsupportedContentTypeError):
        codec.encode(AnnotatedTextProposal(title="Signal", description="x", note="n"))
