"""DCQL Playground UI.

Pick sample credential queries and credentials, edit both JSON documents,
and inspect the evaluation as raw JSON or as a visual result tree.

Run with: streamlit run app/ui_playground/main.py
"""

import sys
import json
import pathlib
import uuid

# Ensure the root directory is on sys.path
ROOT = pathlib.Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

import streamlit as st
from pydantic import ValidationError

from app.ui_playground.config import (
    PAGE_TITLE,
    PAGE_ICON,
    QUERY_EDITOR_HEIGHT,
    RECORDS_EDITOR_HEIGHT,
    UI_QUIET_PERIOD,
    STORE_KEY,
    QUERY_EDITOR_KEY,
    RECORDS_EDITOR_KEY,
    SETS_EDITOR_KEY,
)
from playground.catalog import SAMPLE_QUERIES, SAMPLE_CREDENTIALS
from playground.query import EngineNotConfiguredError, resolve_engine
from playground.schemas import (
    CredentialSet,
    CredentialSetStatus,
    CredentialSetView,
    CredentialCheckView,
    IssuesByAuthorityCandidate,
    IssuesByCategory,
    MatchView,
    ResultTree,
    SectionView,
)
from playground.session import PlaygroundSnapshot, PlaygroundStore
from playground.utils.config_loader import load_config
from playground.utils.logger import LoggerManager
from playground.utils.logger_context import with_context
from playground.utils.task_paths import TaskPaths

st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout="wide",
)


# =============================================================================
# Session
# =============================================================================

def sync_editors(snapshot: PlaygroundSnapshot):
    """Mirror the store's buffers into the editor widgets."""
    st.session_state[QUERY_EDITOR_KEY] = snapshot.query_text
    st.session_state[RECORDS_EDITOR_KEY] = snapshot.records_text


def log_snapshot(log, snapshot: PlaygroundSnapshot):
    if snapshot.settlement is None:
        return
    log.debug(
        "ui.snapshot",
        extra={"extra_data": {
            "sequence": snapshot.settlement.sequence,
            "status": snapshot.settlement.status,
        }},
    )


def init_session_state():
    """Create the store once per browser session and run the first evaluation."""
    if STORE_KEY in st.session_state:
        return

    config = load_config()
    LoggerManager.configure(
        level=config.get("logging.level"),
        use_json=config.get("logging.use_json"),
        log_dir=config.get("logging.log_dir"),
    )
    try:
        engine = resolve_engine(config.get("engine.path"))
    except EngineNotConfiguredError as e:
        st.error(str(e))
        st.stop()

    session_id = uuid.uuid4().hex[:12]
    session_log = with_context(
        LoggerManager.get_logger(
            "playground.ui",
            task_paths=TaskPaths(config.get("logging.log_dir", "logs")),
            run_id=session_id,
        ),
        session_id=session_id,
    )
    session_log.info("ui.session_started")

    store = PlaygroundStore(engine, quiet_period=UI_QUIET_PERIOD)
    store.subscribe(sync_editors)
    store.subscribe(lambda snapshot: log_snapshot(session_log, snapshot))
    sync_editors(store.snapshot)
    store.mount()
    st.session_state[STORE_KEY] = store
    st.session_state[SETS_EDITOR_KEY] = "[]"


def get_store() -> PlaygroundStore:
    return st.session_state[STORE_KEY]


# =============================================================================
# Widget callbacks
# =============================================================================

def on_query_edit():
    get_store().edit_query_document(st.session_state[QUERY_EDITOR_KEY])


def on_records_edit():
    get_store().edit_records_document(st.session_state[RECORDS_EDITOR_KEY])


def on_reset_queries():
    get_store().reset_queries()
    st.session_state[SETS_EDITOR_KEY] = "[]"


def on_reset_records():
    get_store().reset_records()


def on_apply_credential_sets():
    """Parse the credential sets editor and hand the sets to the store."""
    text = st.session_state[SETS_EDITOR_KEY]
    try:
        raw = json.loads(text or "[]")
        if not isinstance(raw, list):
            raise ValueError("credential sets must be a JSON array")
        sets = [CredentialSet.model_validate(item) for item in raw]
    except (ValueError, ValidationError) as e:
        st.session_state["credential_sets_error"] = str(e)
        return
    st.session_state["credential_sets_error"] = None
    get_store().set_credential_sets(sets)


# =============================================================================
# Selection panel
# =============================================================================

def render_selection(snapshot: PlaygroundSnapshot):
    store = get_store()
    col_queries, col_records = st.columns(2)

    with col_queries:
        st.subheader("Sample queries")
        for index, entry in enumerate(SAMPLE_QUERIES):
            st.checkbox(
                entry.name,
                value=index in snapshot.selection.query_indices,
                key=f"query_sample_{index}_{snapshot.selection.query_indices}",
                on_change=store.toggle_query,
                args=(index,),
            )
        st.button("Reset queries", on_click=on_reset_queries)

    with col_records:
        st.subheader("Sample credentials")
        for index, entry in enumerate(SAMPLE_CREDENTIALS):
            st.checkbox(
                entry.name,
                value=index in snapshot.selection.record_indices,
                key=f"record_sample_{index}_{snapshot.selection.record_indices}",
                on_change=store.toggle_record,
                args=(index,),
            )
        st.button("Reset credentials", on_click=on_reset_records)

    with st.expander("Credential sets"):
        ids = store.available_credential_ids()
        st.caption(
            "Available credential query ids: " + (", ".join(ids) if ids else "(none selected)")
        )
        st.text_area(
            'JSON array of {"options": [[id, ...], ...], "required": true}',
            key=SETS_EDITOR_KEY,
            height=160,
        )
        st.button("Apply credential sets", on_click=on_apply_credential_sets)
        error = st.session_state.get("credential_sets_error")
        if error:
            st.error(error)


# =============================================================================
# Result tree
# =============================================================================

def _badge(ok: bool) -> str:
    return "✅" if ok else "❌"


def render_issues(issues):
    if isinstance(issues, IssuesByCategory):
        for category in issues.categories:
            st.markdown(f"**{category.key}**")
            for message in category.messages:
                st.markdown(f"- {message}")
    elif isinstance(issues, IssuesByAuthorityCandidate):
        for candidate in issues.candidates:
            st.markdown(f"**Trusted Authority {candidate.trusted_authority_index}**")
            render_issues(IssuesByCategory(categories=candidate.categories))
            if candidate.output:
                st.caption("Received")
                st.json(candidate.output)


def render_section(section: SectionView):
    st.markdown(f"{_badge(section.success)} **{section.title}**")
    if section.success and section.output:
        st.json(section.output, expanded=False)
    elif not section.success and section.issues is not None:
        render_issues(section.issues)


def render_credential(view: CredentialCheckView):
    status = "Valid" if view.is_valid else "Invalid"
    with st.expander(f"{_badge(view.is_valid)} {view.label} (#{view.input_credential_index}) - {status}"):
        render_section(view.meta)
        render_section(view.trusted_authorities)

        claims = view.claims
        st.markdown(f"{_badge(claims.success)} **Claims**")
        for claim in claims.valid_claims:
            st.markdown(f"✅ Claim {claim.claim_index} {claim.claim_id or ''}")
            if claim.output is not None:
                st.json(claim.output, expanded=False)
        for claim in claims.failed_claims:
            st.markdown(f"❌ Claim {claim.claim_index} {claim.claim_id or ''}")
            if claim.issues is not None:
                render_issues(claim.issues)
        for claim_set in claims.valid_claim_sets:
            st.markdown(
                f"✅ Claim set {claim_set.claim_set_index}: claims {claim_set.valid_claim_indexes}"
            )
        for claim_set in claims.failed_claim_sets:
            st.markdown(
                f"❌ Claim set {claim_set.claim_set_index}: failed claims {claim_set.failed_claim_indexes}"
            )
            if claim_set.issues is not None:
                render_issues(claim_set.issues)


def render_match(match: MatchView):
    st.markdown(
        f"### {_badge(match.success)} `{match.query_id}` "
        f"({match.valid_count} valid, {match.failed_count} failed)"
    )
    for view in match.valid_credentials:
        render_credential(view)
    for view in match.failed_credentials:
        render_credential(view)


def render_credential_set(view: CredentialSetView):
    kind = "Required" if view.required else "Optional"
    header = f"**Credential set {view.set_index}** ({kind}, {view.matching_count} matching)"
    if view.status == CredentialSetStatus.SATISFIED:
        st.success(header)
    elif view.status == CredentialSetStatus.REQUIRED_UNMATCHED:
        st.error(f"{header}\n\n{view.message}")
    else:
        st.warning(f"{header}\n\n{view.message}")

    for option in view.options:
        ids = " ".join(
            f"{_badge(badge.satisfied)} `{badge.credential_query_id}`"
            for badge in option.identifiers
        )
        marker = "🟢" if option.is_matching else "⚪"
        st.markdown(f"{marker} Option {option.option_index}: {ids}")


def render_tree(tree: ResultTree):
    if tree.can_be_satisfied:
        st.success("Query can be satisfied")
    else:
        st.error("Query cannot be satisfied")

    if tree.credential_sets:
        st.subheader("Credential sets")
        for view in tree.credential_sets:
            render_credential_set(view)

    st.subheader("Credential matches")
    for match in tree.matches:
        render_match(match)


def render_results(snapshot: PlaygroundSnapshot):
    st.header("Result")
    if snapshot.error:
        st.error(snapshot.error)

    tab_visual, tab_json = st.tabs(["Visual", "JSON"])
    with tab_visual:
        if snapshot.tree is None:
            st.info("No results to display")
        else:
            render_tree(snapshot.tree)
    with tab_json:
        st.code(snapshot.result_json, language="json")


# =============================================================================
# Page
# =============================================================================

def main():
    init_session_state()
    snapshot = get_store().snapshot

    st.title(f"{PAGE_ICON} {PAGE_TITLE}")
    render_selection(snapshot)

    col_query, col_records = st.columns(2)
    with col_query:
        st.text_area(
            "Query document",
            key=QUERY_EDITOR_KEY,
            height=QUERY_EDITOR_HEIGHT,
            on_change=on_query_edit,
        )
    with col_records:
        st.text_area(
            "Credentials document",
            key=RECORDS_EDITOR_KEY,
            height=RECORDS_EDITOR_HEIGHT,
            on_change=on_records_edit,
        )

    render_results(snapshot)


main()
