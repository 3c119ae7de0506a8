"""Plain-text rendering of the ResultTree display model.

Used by the CLI's visual view. Each nesting level indents by two spaces;
`✓` marks success and `✗` failure.
"""

import json
from typing import Any, List, Optional

from playground.schemas import (
    ClaimsView,
    CredentialCheckView,
    CredentialSetStatus,
    CredentialSetView,
    IssueCategory,
    IssuesByAuthorityCandidate,
    IssuesByCategory,
    MatchView,
    ResultTree,
    SectionView,
)

PASS = "✓"
FAIL = "✗"
WARN = "!"


def _mark(ok: bool) -> str:
    return PASS if ok else FAIL


def _indent(lines: List[str], depth: int) -> List[str]:
    pad = "  " * depth
    return [f"{pad}{line}" for line in lines]


def format_output(output: Any) -> List[str]:
    """Echoed engine output as indented JSON lines."""
    return json.dumps(output, indent=2, ensure_ascii=False, default=str).splitlines()


def format_categories(categories: List[IssueCategory]) -> List[str]:
    lines = []
    for category in categories:
        lines.append(f"{category.key}:")
        lines.extend(f"  • {message}" for message in category.messages)
    return lines


def format_issues(issues) -> List[str]:
    if isinstance(issues, IssuesByCategory):
        return format_categories(issues.categories)
    if isinstance(issues, IssuesByAuthorityCandidate):
        lines = []
        for candidate in issues.candidates:
            lines.append(f"Trusted Authority {candidate.trusted_authority_index}:")
            lines.extend(_indent(format_categories(candidate.categories), 1))
            if candidate.output:
                lines.append("  Received:")
                lines.extend(_indent(format_output(candidate.output), 2))
        return lines
    return []


def format_section(section: SectionView) -> List[str]:
    lines = [f"{_mark(section.success)} {section.title}: {'Valid' if section.success else 'Invalid'}"]
    if section.success and section.output:
        lines.append("  Output:")
        lines.extend(_indent(format_output(section.output), 2))
    if not section.success and section.issues is not None:
        lines.append("  Issues:")
        lines.extend(_indent(format_issues(section.issues), 2))
    return lines


def format_claims(claims: ClaimsView) -> List[str]:
    lines = [f"{_mark(claims.success)} Claims: {'Valid' if claims.success else 'Invalid'}"]
    for claim in claims.valid_claims:
        lines.append(f"  {PASS} Claim {claim.claim_index}: {claim.claim_id or ''}".rstrip())
    for claim in claims.failed_claims:
        lines.append(f"  {FAIL} Claim {claim.claim_index}: {claim.claim_id or ''}".rstrip())
        if claim.issues is not None:
            lines.extend(_indent(format_issues(claim.issues), 2))
    for claim_set in claims.valid_claim_sets:
        indexes = ", ".join(str(i) for i in claim_set.valid_claim_indexes)
        lines.append(f"  {PASS} Claim Set {claim_set.claim_set_index} (claims: {indexes})")
    for claim_set in claims.failed_claim_sets:
        valid = ", ".join(str(i) for i in claim_set.valid_claim_indexes) or "-"
        failed = ", ".join(str(i) for i in claim_set.failed_claim_indexes) or "-"
        lines.append(f"  {FAIL} Claim Set {claim_set.claim_set_index} (valid: {valid}; failed: {failed})")
        if claim_set.issues is not None:
            lines.extend(_indent(format_issues(claim_set.issues), 2))
    return lines


def format_credential(credential: CredentialCheckView) -> List[str]:
    lines = [f"{_mark(credential.is_valid)} Credential {credential.input_credential_index} [{credential.label}]"]
    lines.extend(_indent(format_section(credential.meta), 1))
    lines.extend(_indent(format_section(credential.trusted_authorities), 1))
    lines.extend(_indent(format_claims(credential.claims), 1))
    return lines


def format_match(match: MatchView) -> List[str]:
    lines = [
        f"{_mark(match.success)} {match.query_id}: {'Success' if match.success else 'Failed'} "
        f"({match.valid_count} valid, {match.failed_count} failed)"
    ]
    for credential in match.valid_credentials + match.failed_credentials:
        lines.extend(_indent(format_credential(credential), 1))
    return lines


def format_credential_set(view: CredentialSetView) -> List[str]:
    if view.status == CredentialSetStatus.SATISFIED:
        mark, summary = PASS, f"{view.matching_count} Matching"
    elif view.status == CredentialSetStatus.REQUIRED_UNMATCHED:
        mark, summary = FAIL, "No Matches"
    else:
        mark, summary = WARN, "No Matches"
    kind = "Required" if view.required else "Optional"
    lines = [f"{mark} Credential Set {view.set_index} [{kind}] {summary}"]
    for option in view.options:
        badges = " ".join(f"{_mark(b.satisfied)}{b.credential_query_id}" for b in option.identifiers)
        matching = " (Matching)" if option.is_matching else ""
        lines.append(f"  {_mark(option.is_matching)} Option {option.option_index + 1}{matching}: {badges}")
    if view.message:
        lines.append(f"  {view.message}")
    return lines


def format_result_tree(tree: Optional[ResultTree]) -> str:
    """Render the whole tree; `None` renders the empty placeholder."""
    if tree is None:
        return "No results to display"

    lines = [
        f"{_mark(tree.can_be_satisfied)} Overall Query Status: "
        f"{'Can be satisfied' if tree.can_be_satisfied else 'Cannot be satisfied'}"
    ]
    if tree.credential_sets:
        lines.append("")
        lines.append(f"Credential Sets ({len(tree.credential_sets)})")
        for view in tree.credential_sets:
            lines.extend(_indent(format_credential_set(view), 1))
    if tree.matches:
        lines.append("")
        lines.append("Credential Matches")
        for match in tree.matches:
            lines.extend(_indent(format_match(match), 1))
    return "\n".join(lines)
