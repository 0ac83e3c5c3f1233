import pytest

from app.models.application import APPLICANT_FIELDS
from app.utils.validation import (
    clean_application,
    is_valid_email,
    is_valid_url,
    validate_application,
)
from conftest import valid_payload


def test_valid_payload_passes():
    result = validate_application(valid_payload())
    assert result.is_valid
    assert result.errors == []


def test_empty_payload_reports_every_field_in_schema_order():
    result = validate_application({})
    assert not result.is_valid
    assert [e["field"] for e in result.errors] == list(APPLICANT_FIELDS)


@pytest.mark.parametrize("field", ["phone", "motivation", "jobId", "duration"])
def test_whitespace_only_counts_as_missing(field):
    result = validate_application(valid_payload(**{field: "   "}))
    assert [e["field"] for e in result.errors] == [field]


def test_required_message_is_field_specific():
    result = validate_application(valid_payload(location=None))
    assert result.errors == [{"field": "location", "message": "Location is required"}]


def test_full_name_length_limit():
    ok = validate_application(valid_payload(fullName="a" * 100))
    too_long = validate_application(valid_payload(fullName="a" * 101))
    assert ok.is_valid
    assert too_long.errors == [
        {"field": "fullName", "message": "Full name cannot exceed 100 characters"}
    ]


def test_all_failures_are_collected_at_once():
    result = validate_application(
        valid_payload(email="not-an-email", portfolioUrl="not a url", linkedinProfile="")
    )
    assert result.errors == [
        {"field": "email", "message": "Please enter a valid email"},
        {"field": "portfolioUrl", "message": "Please enter a valid URL"},
        {"field": "linkedinProfile", "message": "LinkedIn Profile URL is required"},
    ]


def test_bad_linkedin_url_message():
    result = validate_application(valid_payload(linkedinProfile="gopher://linkedin.com/in/alice"))
    assert result.errors == [
        {"field": "linkedinProfile", "message": "Please enter a valid LinkedIn URL"}
    ]


@pytest.mark.parametrize(
    "value",
    ["alice@mail.com", "first.last@sub.domain.org", "ALICE@MAIL.COM"],
)
def test_email_accepts(value):
    assert is_valid_email(value)


@pytest.mark.parametrize("value", ["", "alice", "alice@", "@mail.com", "alice@mail", "a b@mail.com"])
def test_email_rejects(value):
    assert not is_valid_email(value)


@pytest.mark.parametrize(
    "value",
    [
        "https://github.com/alice",
        "http://alice.dev",
        "github.com/alice",
        "www.linkedin.com/in/alice-smith-123",
        "http://localhost:3000/portfolio",
        "http://192.168.1.10:8080/portfolio",
        "https://127.0.0.1/me",
        "ftp://files.example.com/cv",
        "192.168.1.10/portfolio",
    ],
)
def test_url_accepts(value):
    assert is_valid_url(value)


@pytest.mark.parametrize(
    "value",
    ["", "alice", "https://", "github .com/alice", "gopher://alice.dev", "file:///etc/passwd"],
)
def test_url_rejects(value):
    assert not is_valid_url(value)


def test_clean_application_trims_and_lowercases_email():
    cleaned = clean_application(valid_payload(status="accepted", appliedBy="someone-else"))
    assert cleaned["fullName"] == "Alice Smith"
    assert cleaned["email"] == "alice.smith@mail.com"
    assert set(cleaned) == set(APPLICANT_FIELDS)


def test_validation_does_not_mutate_input():
    payload = valid_payload()
    snapshot = dict(payload)
    validate_application(payload)
    clean_application(payload)
    assert payload == snapshot
