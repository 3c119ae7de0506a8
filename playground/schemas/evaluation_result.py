"""EvaluationResult Pydantic models.

Mirrors the structured outcome returned by the query engine's evaluate step.
Every model allows extra fields: the engine may echo more than the
playground renders, and the raw JSON view must keep it.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Either {category: message | [messages]} or, for trusted authorities,
# [{trusted_authority_index, issues: {category: ...}, output}]
RawIssues = Union[Dict[str, Any], List[Dict[str, Any]]]


class CheckSection(BaseModel):
    """Outcome of one check (meta, trusted authorities) on one credential."""
    model_config = ConfigDict(extra='allow')

    success: bool = False
    issues: Optional[RawIssues] = None
    output: Any = None


class TrustedAuthoritiesCheck(CheckSection):
    """Trusted-authority outcome.

    The engine reports failures per authority candidate under
    `failed_trusted_authorities` and the winning candidate under
    `valid_trusted_authority`; both are folded onto `issues` / `output`.
    """

    @model_validator(mode='before')
    @classmethod
    def fold_authority_candidates(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("issues") is None and data.get("failed_trusted_authorities") is not None:
            data["issues"] = data["failed_trusted_authorities"]
        valid = data.get("valid_trusted_authority")
        if data.get("output") is None and isinstance(valid, dict):
            data["output"] = valid.get("output")
        return data


class ClaimOutcome(BaseModel):
    """One requested claim, valid or failed."""
    model_config = ConfigDict(extra='allow')

    claim_index: int
    claim_id: Optional[str] = None
    output: Any = None
    issues: Optional[Dict[str, Any]] = None


class ClaimSetOutcome(BaseModel):
    """One claim set alternative, valid or failed."""
    model_config = ConfigDict(extra='allow')

    claim_set_index: Optional[int] = None
    valid_claim_indexes: List[int] = Field(default_factory=list)
    failed_claim_indexes: List[int] = Field(default_factory=list)
    output: Any = None
    issues: Optional[Dict[str, Any]] = None


class ClaimsCheck(BaseModel):
    """Claims outcome for one credential."""
    model_config = ConfigDict(extra='allow')

    success: bool = False
    valid_claims: List[ClaimOutcome] = Field(default_factory=list)
    failed_claims: List[ClaimOutcome] = Field(default_factory=list)
    valid_claim_sets: List[ClaimSetOutcome] = Field(default_factory=list)
    failed_claim_sets: List[ClaimSetOutcome] = Field(default_factory=list)


class CredentialCheck(BaseModel):
    """Evaluation of one record (by its index in the records document)."""
    model_config = ConfigDict(extra='allow')

    input_credential_index: int
    meta: Optional[CheckSection] = None
    trusted_authorities: Optional[TrustedAuthoritiesCheck] = None
    claims: Optional[ClaimsCheck] = None


class Match(BaseModel):
    """Per credential query outcome over all candidate records."""
    model_config = ConfigDict(extra='allow')

    success: bool
    valid_credentials: List[CredentialCheck] = Field(default_factory=list)
    failed_credentials: List[CredentialCheck] = Field(default_factory=list)


class CredentialSetOutcome(BaseModel):
    """Engine verdict on one credential set.

    `matching_options` holds the declared options judged satisfiable; the
    engine may reorder ids inside an option.
    """
    model_config = ConfigDict(extra='allow')

    required: bool = True
    options: List[List[str]] = Field(default_factory=list)
    matching_options: List[List[str]] = Field(default_factory=list)

    @field_validator('matching_options', mode='before')
    @classmethod
    def none_means_no_match(cls, v):
        return [] if v is None else v


class EvaluationResult(BaseModel):
    """Complete evaluation outcome with the echoed records removed."""
    model_config = ConfigDict(extra='allow')

    can_be_satisfied: bool
    credential_matches: Dict[str, Match] = Field(default_factory=dict)
    credential_sets: Optional[List[CredentialSetOutcome]] = None
