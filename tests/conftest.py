"""Shared fixtures: a deterministic query engine and a manual timer loop."""

import json

import pytest


class FakeEngine:
    """Deterministic stand-in for a DCQL engine.

    A record satisfies a credential query when its `credential_format`
    equals the query's `format`. Credential sets are checked option by
    option; matching options come back with their ids reversed, the way a
    real engine may reorder them.
    """

    def __init__(self, parse_error=None, validate_error=None, evaluate_error=None, result=None):
        self.parse_error = parse_error
        self.validate_error = validate_error
        self.evaluate_error = evaluate_error
        self.result = result
        self.evaluations = []

    def parse(self, document):
        if self.parse_error is not None:
            raise self.parse_error
        if not isinstance(document, dict) or not isinstance(document.get("credentials"), list):
            raise ValueError("Expected 'credentials' to be a list of credential queries")
        return document

    def validate(self, parsed):
        if self.validate_error is not None:
            raise self.validate_error
        ids = {query.get("id") for query in parsed["credentials"]}
        for credential_set in parsed.get("credential_sets", []):
            for option in credential_set["options"]:
                for credential_id in option:
                    if credential_id not in ids:
                        raise ValueError(
                            f"Credential set references unknown credential query id '{credential_id}'"
                        )
        return parsed

    def evaluate(self, parsed, records):
        self.evaluations.append((parsed, records))
        if self.evaluate_error is not None:
            raise self.evaluate_error
        if self.result is not None:
            return {**self.result, "credentials": records}

        matches = {}
        for query in parsed["credentials"]:
            valid, failed = [], []
            for index, record in enumerate(records):
                ok = record.get("credential_format") == query.get("format")
                check = {
                    "input_credential_index": index,
                    "meta": {
                        "success": ok,
                        "output": {"credential_format": record.get("credential_format")} if ok else None,
                        "issues": None if ok else {"credential_format": [f"Expected {query.get('format')}"]},
                    },
                    "claims": {"success": ok},
                }
                (valid if ok else failed).append(check)
            matches[query["id"]] = {
                "success": bool(valid),
                "valid_credentials": valid,
                "failed_credentials": failed,
            }

        credential_sets = None
        if parsed.get("credential_sets"):
            credential_sets = []
            for credential_set in parsed["credential_sets"]:
                matching = [
                    list(reversed(option))
                    for option in credential_set["options"]
                    if all(matches[cid]["success"] for cid in option)
                ]
                credential_sets.append({**credential_set, "matching_options": matching or None})
            can_be_satisfied = all(
                s["matching_options"] for s in credential_sets if s.get("required", True)
            )
        else:
            can_be_satisfied = all(m["success"] for m in matches.values())

        return {
            "can_be_satisfied": can_be_satisfied,
            "credential_matches": matches,
            "credential_sets": credential_sets,
            "credentials": records,
        }


class FakeTimer:
    def __init__(self, loop, when, callback, args):
        self.loop = loop
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Manual clock exposing `call_later`; `advance()` fires due timers."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback, *args):
        timer = FakeTimer(self, self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    def advance(self, seconds):
        self.now += seconds
        due = [t for t in self.timers if not t.cancelled and t.when <= self.now]
        self.timers = [t for t in self.timers if t not in due]
        for timer in sorted(due, key=lambda t: t.when):
            timer.callback(*timer.args)

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled]


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def engine_factory():
    """Build a FakeEngine with configured failures or a canned result."""
    return FakeEngine


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def query_text():
    """Query document with one mso_mdoc credential query."""
    return json.dumps({
        "credentials": [{"id": "mvrc_credential", "format": "mso_mdoc"}],
    })


@pytest.fixture
def records_text():
    return json.dumps([
        {"credential_format": "mso_mdoc", "doctype": "org.iso.7367.1.mVRC"},
        {"credential_format": "ldp_vc"},
    ])
