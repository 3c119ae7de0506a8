"""Pydantic schemas for the DCQL playground."""

from .query_document import CredentialSet, QueryDocument
from .evaluation_result import (
    CheckSection,
    TrustedAuthoritiesCheck,
    ClaimOutcome,
    ClaimSetOutcome,
    ClaimsCheck,
    CredentialCheck,
    Match,
    CredentialSetOutcome,
    EvaluationResult,
)
from .display_model import (
    IssueCategory,
    IssuesByCategory,
    AuthorityCandidateIssues,
    IssuesByAuthorityCandidate,
    SectionView,
    ClaimView,
    ClaimSetView,
    ClaimsView,
    CredentialCheckView,
    MatchView,
    IdentifierBadge,
    OptionView,
    CredentialSetStatus,
    CredentialSetView,
    ResultTree,
)

__all__ = [
    # Query document
    "CredentialSet",
    "QueryDocument",
    # Evaluation result
    "CheckSection",
    "TrustedAuthoritiesCheck",
    "ClaimOutcome",
    "ClaimSetOutcome",
    "ClaimsCheck",
    "CredentialCheck",
    "Match",
    "CredentialSetOutcome",
    "EvaluationResult",
    # Display model
    "IssueCategory",
    "IssuesByCategory",
    "AuthorityCandidateIssues",
    "IssuesByAuthorityCandidate",
    "SectionView",
    "ClaimView",
    "ClaimSetView",
    "ClaimsView",
    "CredentialCheckView",
    "MatchView",
    "IdentifierBadge",
    "OptionView",
    "CredentialSetStatus",
    "CredentialSetView",
    "ResultTree",
]
