"""
Governance proposal content kinds.

Content is an open set: any pydantic model deriving from ProposalContent and
declaring a unique ``type_url`` can be stored, as long as the class is added
to the content registry the persistence layer is built with.
"""

from typing import ClassVar, List

from pydantic import BaseModel, ConfigDict


class ProposalContent(BaseModel):
    """Base class for protocol-serializable proposal content."""

    model_config = ConfigDict(frozen=True)

    type_url: ClassVar[str]

    title: str
    description: str

    def get_title(self) -> str:
        return self.title

    def get_description(self) -> str:
        return self.description


class TextProposal(ProposalContent):
    """Signalling proposal without on-chain effects."""

    type_url: ClassVar[str] = "/cosmos.gov.v1beta1.TextProposal"


class ParamChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    subspace: str
    key: str
    value: str


class ParameterChangeProposal(ProposalContent):
    """Changes one or more module parameters."""

    type_url: ClassVar[str] = "/cosmos.params.v1beta1.ParameterChangeProposal"

    changes: List[ParamChange]


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    height: int
    info: str = ""


class SoftwareUpgradeProposal(ProposalContent):
    """Schedules a chain upgrade."""

    type_url: ClassVar[str] = "/cosmos.upgrade.v1beta1.SoftwareUpgradeProposal"

    plan: Plan


class CancelSoftwareUpgradeProposal(ProposalContent):
    """Cancels a pending chain upgrade."""

    type_url: ClassVar[str] = "/cosmos.upgrade.v1beta1.CancelSoftwareUpgradeProposal"
