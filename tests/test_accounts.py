"""Tests for account identifier resolution.

Covers the override > body > client default precedence, the body scan over
typed request models, mappings and batch sequences, and the present/absent
rules for string and integer identifiers.
"""

import pytest

from scheduler0_client import accounts, types

# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


def test_override_wins_over_body_and_default():
    """A non-empty override beats both the body and the default."""
    body = {"accountId": "B"}
    assert accounts.resolve_account_id("A", body, "C") == "A"


def test_body_wins_over_default_when_no_override():
    """The body identifier is used when the override is empty."""
    body = {"accountId": "B"}
    assert accounts.resolve_account_id("", body, "C") == "B"


def test_none_override_behaves_like_empty():
    body = {"accountId": 42}
    assert accounts.resolve_account_id(None, body, "C") == "42"


def test_default_used_when_body_has_zero_account():
    """A zero account ID in the body counts as absent."""
    body = {"accountId": 0, "data": "x"}
    assert accounts.resolve_account_id("", body, "C") == "C"


def test_default_used_when_body_has_no_account():
    assert accounts.resolve_account_id("", {"data": "x"}, "C") == "C"


def test_all_empty_resolves_to_empty():
    """Nothing anywhere yields the empty identifier (no header)."""
    assert accounts.resolve_account_id("", {"accountId": 0}, "") == ""
    assert accounts.resolve_account_id(None, None, "") == ""


# ---------------------------------------------------------------------------
# Body scanning
# ---------------------------------------------------------------------------


def test_typed_request_account_id_is_found():
    """Request models expose their excluded account_id to the resolver."""
    body = types.JobDeleteRequest(deleted_by="user-1", account_id=77)
    assert accounts.account_id_from_body(body) == "77"


def test_typed_request_without_account_id():
    body = types.JobDeleteRequest(deleted_by="user-1")
    assert accounts.account_id_from_body(body) == ""


def test_typed_request_string_account_id():
    body = types.ProjectDeleteRequest(deleted_by="user-1", account_id="acc-9")
    assert accounts.account_id_from_body(body) == "acc-9"


def test_batch_scan_returns_first_non_empty():
    """Only the second of three elements has an account; its value wins."""
    body = [
        {"accountId": 0, "data": "a"},
        {"accountId": 555, "data": "b"},
        {"data": "c"},
    ]
    assert accounts.resolve_account_id(None, body, "") == "555"


def test_batch_scan_of_typed_requests():
    jobs = [
        types.JobCreateRequest(project_id=1, timezone="UTC", created_by="u"),
        types.JobCreateRequest(project_id=1, timezone="UTC", created_by="u", account_id=12),
        types.JobCreateRequest(project_id=1, timezone="UTC", created_by="u", account_id=13),
    ]
    assert accounts.account_id_from_body(jobs) == "12"


def test_tuple_bodies_are_scanned():
    assert accounts.account_id_from_body(({}, {"accountId": "x"})) == "x"


def test_account_id_key_is_case_sensitive():
    """Only the exact "accountId" key is recognized."""
    assert accounts.account_id_from_body({"accountID": 5, "AccountId": 6}) == ""


def test_null_account_id_is_absent():
    assert accounts.account_id_from_body({"accountId": None}) == ""


@pytest.mark.parametrize("body", ["accountId", 123, 4.5, b"bytes"])
def test_unsupported_body_shapes_have_no_account(body):
    assert accounts.account_id_from_body(body) == ""


# ---------------------------------------------------------------------------
# normalize_account_id
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("abc", "abc"),
        ("", ""),
        (7, "7"),
        (-3, "-3"),
        (0, ""),
        (None, ""),
        (True, ""),
        (1.5, ""),
    ],
)
def test_normalize_account_id(value, expected):
    assert accounts.normalize_account_id(value) == expected
