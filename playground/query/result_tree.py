"""Result tree builder: EvaluationResult -> ResultTree display model.

Pure transformation; the input result is never mutated.

Option matching
---------------
A credential set declares options (lists of credential query ids). The
engine returns the satisfiable ones in `matching_options`, possibly with the
ids reordered. A declared option counts as matching when some matching
option holds the same ids once both are sorted. Each declared option is
checked on its own, so duplicated options all match or all fail together.

Identifier badges inside an option reflect `credential_matches[id].success`
regardless of whether the option as a whole matched.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from playground.catalog import FixtureCatalog, SAMPLE_CREDENTIALS
from playground.schemas import (
    CheckSection,
    ClaimsCheck,
    ClaimOutcome,
    ClaimSetOutcome,
    CredentialCheck,
    CredentialSetOutcome,
    EvaluationResult,
    Match,
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

RecordLabels = Union[FixtureCatalog, Sequence[str], Mapping[int, str]]

REQUIRED_UNMATCHED_MESSAGE = "This required credential set has no matching options"
OPTIONAL_UNMATCHED_MESSAGE = "This optional credential set has no matching options"


# =============================================================================
# Option matching
# =============================================================================

def canonical_option(option: Sequence[str]) -> List[str]:
    """Sorted copy of an option's ids."""
    return sorted(option)


def same_option(left: Sequence[str], right: Sequence[str]) -> bool:
    """Order-independent comparison of two options."""
    return canonical_option(left) == canonical_option(right)


def is_matching_option(option: Sequence[str], matching_options: Sequence[Sequence[str]]) -> bool:
    return any(same_option(option, candidate) for candidate in matching_options)


def build_credential_set_view(
    set_index: int,
    outcome: CredentialSetOutcome,
    credential_matches: Mapping[str, Match],
) -> CredentialSetView:
    """Render one credential set with per-option and per-id state."""
    matching_options = outcome.matching_options or []

    options = []
    for option_index, option in enumerate(outcome.options):
        badges = [
            IdentifierBadge(
                credential_query_id=credential_id,
                satisfied=_query_succeeded(credential_matches, credential_id),
            )
            for credential_id in option
        ]
        options.append(
            OptionView(
                option_index=option_index,
                identifiers=badges,
                is_matching=is_matching_option(option, matching_options),
            )
        )

    if matching_options:
        status = CredentialSetStatus.SATISFIED
        message = None
    elif outcome.required:
        status = CredentialSetStatus.REQUIRED_UNMATCHED
        message = REQUIRED_UNMATCHED_MESSAGE
    else:
        status = CredentialSetStatus.OPTIONAL_UNMATCHED
        message = OPTIONAL_UNMATCHED_MESSAGE

    return CredentialSetView(
        set_index=set_index,
        required=outcome.required,
        status=status,
        matching_count=len(matching_options),
        options=options,
        message=message,
    )


def _query_succeeded(credential_matches: Mapping[str, Match], credential_id: str) -> bool:
    match = credential_matches.get(credential_id)
    return bool(match and match.success)


# =============================================================================
# Issues
# =============================================================================

def _messages(value: Any) -> List[str]:
    """One message or many -> list of strings."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def build_categories(issues: Optional[Mapping[str, Any]]) -> List[IssueCategory]:
    if not issues:
        return []
    return [IssueCategory(key=key, messages=_messages(value)) for key, value in issues.items()]


def build_issues(
    issues: Any,
) -> Optional[Union[IssuesByCategory, IssuesByAuthorityCandidate]]:
    """Branch on the issues shape.

    - mapping: category -> message(s)
    - sequence: per trusted authority candidate groups
    """
    if issues is None:
        return None
    if isinstance(issues, Mapping):
        return IssuesByCategory(categories=build_categories(issues))

    candidates = []
    for group in issues:
        candidates.append(
            AuthorityCandidateIssues(
                trusted_authority_index=group.get("trusted_authority_index"),
                categories=build_categories(group.get("issues")),
                output=group.get("output"),
            )
        )
    return IssuesByAuthorityCandidate(candidates=candidates)


def _category_issues(issues: Optional[Mapping[str, Any]]) -> Optional[IssuesByCategory]:
    if issues is None:
        return None
    return IssuesByCategory(categories=build_categories(issues))


# =============================================================================
# Sections and claims
# =============================================================================

def build_section_view(title: str, section: Optional[CheckSection]) -> SectionView:
    if section is None:
        return SectionView(title=title, success=False)
    return SectionView(
        title=title,
        success=section.success,
        output=section.output,
        issues=build_issues(section.issues),
    )


def _claim_view(claim: ClaimOutcome) -> ClaimView:
    return ClaimView(
        claim_index=claim.claim_index,
        claim_id=claim.claim_id,
        output=claim.output,
        issues=_category_issues(claim.issues),
    )


def _claim_set_view(position: int, claim_set: ClaimSetOutcome) -> ClaimSetView:
    index = claim_set.claim_set_index if claim_set.claim_set_index is not None else position
    return ClaimSetView(
        claim_set_index=index,
        valid_claim_indexes=list(claim_set.valid_claim_indexes),
        failed_claim_indexes=list(claim_set.failed_claim_indexes),
        output=claim_set.output,
        issues=_category_issues(claim_set.issues),
    )


def build_claims_view(claims: Optional[ClaimsCheck]) -> ClaimsView:
    if claims is None:
        return ClaimsView(success=False)
    return ClaimsView(
        success=claims.success,
        valid_claims=[_claim_view(c) for c in claims.valid_claims],
        failed_claims=[_claim_view(c) for c in claims.failed_claims],
        valid_claim_sets=[_claim_set_view(i, s) for i, s in enumerate(claims.valid_claim_sets)],
        failed_claim_sets=[_claim_set_view(i, s) for i, s in enumerate(claims.failed_claim_sets)],
    )


# =============================================================================
# Credentials and matches
# =============================================================================

def record_label(index: int, labels: Optional[RecordLabels]) -> str:
    """Catalog name for a record index, or "Credential {index}"."""
    name = None
    if isinstance(labels, FixtureCatalog):
        name = labels.label_for(index)
    elif isinstance(labels, Mapping):
        name = labels.get(index)
    elif labels is not None and 0 <= index < len(labels):
        name = labels[index]
    return name or f"Credential {index}"


def build_credential_view(
    check: CredentialCheck,
    is_valid: bool,
    labels: Optional[RecordLabels],
) -> CredentialCheckView:
    return CredentialCheckView(
        input_credential_index=check.input_credential_index,
        label=record_label(check.input_credential_index, labels),
        is_valid=is_valid,
        meta=build_section_view("Meta", check.meta),
        trusted_authorities=build_section_view("Trusted Authorities", check.trusted_authorities),
        claims=build_claims_view(check.claims),
    )


def build_match_view(query_id: str, match: Match, labels: Optional[RecordLabels]) -> MatchView:
    return MatchView(
        query_id=query_id,
        success=match.success,
        valid_credentials=[build_credential_view(c, True, labels) for c in match.valid_credentials],
        failed_credentials=[build_credential_view(c, False, labels) for c in match.failed_credentials],
    )


def build_result_tree(
    result: EvaluationResult,
    record_labels: Optional[RecordLabels] = SAMPLE_CREDENTIALS,
) -> ResultTree:
    """Build the display model for an evaluation result.

    Args:
        result: Engine outcome (echoed records already removed)
        record_labels: Names for records by index; a catalog, a list or a
            mapping. Records without an entry get "Credential {index}".

    Returns:
        ResultTree with credential sets and matches in engine order
    """
    matches = result.credential_matches
    return ResultTree(
        can_be_satisfied=result.can_be_satisfied,
        credential_sets=[
            build_credential_set_view(i, outcome, matches)
            for i, outcome in enumerate(result.credential_sets or [])
        ],
        matches=[
            build_match_view(query_id, match, record_labels)
            for query_id, match in matches.items()
        ],
    )
