"""
Field-level checks applied to a submission before anything is written.

``validate_application`` never raises for bad input: it returns a
``ValidationResult`` listing every failing field, in schema order.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, TypeAdapter, ValidationError

from app.models.application import APPLICANT_FIELDS

FULL_NAME_MAX_LENGTH = 100

REQUIRED_MESSAGES = {
    "jobId": "Job ID is required",
    "fullName": "Full name is required",
    "email": "Please enter a valid email",
    "phone": "Phone number is required",
    "location": "Location is required",
    "portfolioUrl": "Portfolio/GitHub/Website URL is required",
    "linkedinProfile": "LinkedIn Profile URL is required",
    "educationStatus": "Current education status is required",
    "degreeDiscipline": "Degree/Discipline is required",
    "researchPapers": "Research papers information is required",
    "internshipExperience": "Internship experience information is required",
    "duration": "Duration in months is required",
    "aiMlProjects": "AI/ML projects information is required",
    "motivation": "Motivation to join is required",
}

URL_MESSAGES = {
    "portfolioUrl": "Please enter a valid URL",
    "linkedinProfile": "Please enter a valid LinkedIn URL",
}

URL_SCHEMES = ("http", "https", "ftp")

_url_adapter = TypeAdapter(AnyUrl)


@dataclass
class ValidationResult:
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str):
        self.errors.append({"field": field_name, "message": message})


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_url(value: str) -> bool:
    """Scheme optional (http assumed); http, https or ftp with a dotted host, IP or localhost."""
    if not value or any(ch.isspace() for ch in value):
        return False
    candidate = value if "://" in value else f"http://{value}"
    try:
        url = _url_adapter.validate_python(candidate)
    except ValidationError:
        return False
    if url.scheme not in URL_SCHEMES or not url.host:
        return False
    host = url.host
    return "." in host or host == "localhost" or host.startswith("[")


def validate_application(payload: Dict[str, Optional[str]]) -> ValidationResult:
    """Check a raw submission dict; at most one message is reported per field."""
    result = ValidationResult()

    for name in APPLICANT_FIELDS:
        value = _text(payload.get(name))

        if name == "email":
            if not is_valid_email(value):
                result.add(name, REQUIRED_MESSAGES[name])
            continue

        if not value:
            result.add(name, REQUIRED_MESSAGES[name])
        elif name == "fullName" and len(value) > FULL_NAME_MAX_LENGTH:
            result.add(name, "Full name cannot exceed 100 characters")
        elif name in URL_MESSAGES and not is_valid_url(value):
            result.add(name, URL_MESSAGES[name])

    return result


def clean_application(payload: Dict[str, Optional[str]]) -> Dict[str, str]:
    """Trimmed copy of the applicant fields, with the email lowercased."""
    cleaned = {name: _text(payload.get(name)) for name in APPLICANT_FIELDS}
    cleaned["email"] = cleaned["email"].lower()
    return cleaned
