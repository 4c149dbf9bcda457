"""Document domain models."""

from pydantic import BaseModel, ConfigDict, Field

PROPOSAL_SECTION = "Technical Proposal"


class VersionContent(BaseModel):
    """Content payload stored on a document version."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Original project name")
    sections: dict[str, str] = Field(default_factory=dict)
    proposal_review: str | None = Field(None, alias="proposalReview")


class VersionFileContent(BaseModel):
    """Inner body of the JSON artifact uploaded for a version."""

    model_config = ConfigDict(populate_by_name=True)

    technical_proposal: str = Field(..., alias="technicalProposal")
    sections: dict[str, str]


class VersionFile(BaseModel):
    """JSON artifact uploaded alongside each version's Word file."""

    content: VersionFileContent


def version_file_name(version_number: int) -> str:
    return f"version-{version_number}.json"


def version_docx_name(version_number: int) -> str:
    return f"version-{version_number}.docx"
