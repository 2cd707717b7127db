"""Client-side mirror of the API's employee field rules.

Submissions that fail here never reach the network.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_REGEX = re.compile(r"^\+?[1-9]\d{1,14}$")
ZIP_CODE_REGEX = re.compile(r"^\d{5}(-\d{4})?$")

EMPLOYEE_STATUSES = ("ACTIVE", "INACTIVE", "ON_LEAVE", "TERMINATED")

FORM_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "phoneNumber",
    "department",
    "position",
    "salary",
    "hireDate",
    "status",
    "address",
    "city",
    "state",
    "zipCode",
    "emergencyContactName",
    "emergencyContactPhone",
)

_REQUIRED_TEXT = (
    ("firstName", "First name is required"),
    ("lastName", "Last name is required"),
)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and EMAIL_REGEX.match(email) is not None


def normalize_form(data: dict[str, Any]) -> dict[str, Any]:
    """Trim form values, turn blanks into None and parse the salary.

    Unknown keys are dropped. A salary that does not parse is kept as the
    trimmed text so validation can report it.
    """
    normalized: dict[str, Any] = {}
    for field in FORM_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            value = value.strip() or None
        normalized[field] = value

    salary = normalized["salary"]
    if salary is not None:
        parsed = _to_decimal(salary)
        if parsed is not None:
            normalized["salary"] = parsed
    return normalized


def validate_employee(data: dict[str, Any]) -> list[str]:
    """Return the list of violated rules, empty when the form is valid."""
    errors: list[str] = []

    for field, message in _REQUIRED_TEXT:
        if _blank(data.get(field)):
            errors.append(message)

    if not is_valid_email(data.get("email")):
        errors.append("Valid email is required")

    if _blank(data.get("department")):
        errors.append("Department is required")

    if _blank(data.get("position")):
        errors.append("Position is required")

    salary = _to_decimal(data.get("salary"))
    if salary is None or salary <= 0:
        errors.append("Valid salary is required")

    if _blank(data.get("hireDate")):
        errors.append("Hire date is required")

    if data.get("status") not in EMPLOYEE_STATUSES:
        errors.append("Valid status is required")

    phone = data.get("phoneNumber")
    if not _blank(phone) and not PHONE_REGEX.match(str(phone)):
        errors.append("Phone number must be a valid international number")

    zip_code = data.get("zipCode")
    if not _blank(zip_code) and not ZIP_CODE_REGEX.match(str(zip_code)):
        errors.append("ZIP code must be 12345 or 12345-6789")

    return errors
