"""Display model produced by the result tree builder.

A read-only tree handed to presentation layers (Streamlit, CLI, HTTP). Every
model is frozen: a new evaluation produces a new tree, nothing is patched in
place.
"""

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class IssueCategory(_Frozen):
    """Messages reported under one category key (e.g. "doctype")."""
    key: str
    messages: List[str] = Field(default_factory=list)


class IssuesByCategory(_Frozen):
    """Issues keyed by category."""
    kind: Literal["by_category"] = "by_category"
    categories: List[IssueCategory] = Field(default_factory=list)


class AuthorityCandidateIssues(_Frozen):
    """Issues for one trusted authority candidate that did not match."""
    trusted_authority_index: Optional[int] = None
    categories: List[IssueCategory] = Field(default_factory=list)
    output: Any = None


class IssuesByAuthorityCandidate(_Frozen):
    """Issues grouped per trusted authority candidate."""
    kind: Literal["by_authority_candidate"] = "by_authority_candidate"
    candidates: List[AuthorityCandidateIssues] = Field(default_factory=list)


Issues = Annotated[
    Union[IssuesByCategory, IssuesByAuthorityCandidate],
    Field(discriminator="kind"),
]


class SectionView(_Frozen):
    """Meta or trusted authority section of one credential."""
    title: str
    success: bool
    output: Any = None
    issues: Optional[Issues] = None


class ClaimView(_Frozen):
    claim_index: int
    claim_id: Optional[str] = None
    output: Any = None
    issues: Optional[IssuesByCategory] = None


class ClaimSetView(_Frozen):
    claim_set_index: int
    valid_claim_indexes: List[int] = Field(default_factory=list)
    failed_claim_indexes: List[int] = Field(default_factory=list)
    output: Any = None
    issues: Optional[IssuesByCategory] = None


class ClaimsView(_Frozen):
    """Claims section of one credential, valid and failed side by side."""
    success: bool
    valid_claims: List[ClaimView] = Field(default_factory=list)
    failed_claims: List[ClaimView] = Field(default_factory=list)
    valid_claim_sets: List[ClaimSetView] = Field(default_factory=list)
    failed_claim_sets: List[ClaimSetView] = Field(default_factory=list)


class CredentialCheckView(_Frozen):
    """One record checked against one credential query."""
    input_credential_index: int
    label: str
    is_valid: bool
    meta: SectionView
    trusted_authorities: SectionView
    claims: ClaimsView


class MatchView(_Frozen):
    """Outcome of one credential query."""
    query_id: str
    success: bool
    valid_credentials: List[CredentialCheckView] = Field(default_factory=list)
    failed_credentials: List[CredentialCheckView] = Field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return len(self.valid_credentials)

    @property
    def failed_count(self) -> int:
        return len(self.failed_credentials)


class IdentifierBadge(_Frozen):
    """A credential query id inside an option, with its own match state."""
    credential_query_id: str
    satisfied: bool


class OptionView(_Frozen):
    """One declared option of a credential set."""
    option_index: int
    identifiers: List[IdentifierBadge] = Field(default_factory=list)
    is_matching: bool


class CredentialSetStatus(str, Enum):
    """Overall state of a credential set."""
    SATISFIED = "satisfied"
    REQUIRED_UNMATCHED = "required_unmatched"
    OPTIONAL_UNMATCHED = "optional_unmatched"


class CredentialSetView(_Frozen):
    """One credential set with per-option and per-id match state."""
    set_index: int
    required: bool
    status: CredentialSetStatus
    matching_count: int
    options: List[OptionView] = Field(default_factory=list)
    message: Optional[str] = None


class ResultTree(_Frozen):
    """Root of the display model."""
    can_be_satisfied: bool
    credential_sets: List[CredentialSetView] = Field(default_factory=list)
    matches: List[MatchView] = Field(default_factory=list)
