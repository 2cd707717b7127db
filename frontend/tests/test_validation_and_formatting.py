"""Tests for form validation, formatting and the response cache."""

from datetime import date
from decimal import Decimal

import pytest

from employee_dashboard.cache import ResponseCache
from employee_dashboard.formatting import (
    csv_export_filename,
    employees_to_csv,
    format_currency,
    format_date,
    format_employee_for_display,
    format_month,
    status_badge_class,
)
from employee_dashboard.validation import normalize_form, validate_employee


class TestValidateEmployee:
    """Client-side rules mirror the API's required fields."""

    def test_valid_form(self, employee_form) -> None:
        assert validate_employee(normalize_form(employee_form())) == []

    def test_empty_form_lists_every_rule(self) -> None:
        assert validate_employee(normalize_form({})) == [
            "First name is required",
            "Last name is required",
            "Valid email is required",
            "Department is required",
            "Position is required",
            "Valid salary is required",
            "Hire date is required",
            "Valid status is required",
        ]

    @pytest.mark.parametrize("email", ["plain", "a@b", "a b@example.com", "@example.com"])
    def test_bad_email(self, employee_form, email: str) -> None:
        assert validate_employee(normalize_form(employee_form(email=email))) == ["Valid email is required"]

    @pytest.mark.parametrize("salary", ["0", "-5", "abc", None])
    def test_bad_salary(self, employee_form, salary) -> None:
        assert validate_employee(normalize_form(employee_form(salary=salary))) == ["Valid salary is required"]

    def test_unknown_status(self, employee_form) -> None:
        assert validate_employee(employee_form(status="RETIRED")) == ["Valid status is required"]

    def test_optional_patterns(self, employee_form) -> None:
        errors = validate_employee(normalize_form(employee_form(phoneNumber="12-34", zipCode="1234")))

        assert errors == [
            "Phone number must be a valid international number",
            "ZIP code must be 12345 or 12345-6789",
        ]

    def test_blank_optional_fields_pass(self, employee_form) -> None:
        assert validate_employee(normalize_form(employee_form(phoneNumber=" ", zipCode=""))) == []


class TestNormalizeForm:
    def test_trims_and_nulls_blanks(self, employee_form) -> None:
        data = normalize_form(employee_form(firstName="  Jane ", city="   ", unknown="x"))

        assert data["firstName"] == "Jane"
        assert data["city"] is None
        assert "unknown" not in data

    def test_salary_parsed_to_decimal(self, employee_form) -> None:
        assert normalize_form(employee_form(salary=" 1234.50 "))["salary"] == Decimal("1234.50")

    def test_unparseable_salary_kept(self, employee_form) -> None:
        assert normalize_form(employee_form(salary="12k"))["salary"] == "12k"


class TestFormatting:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (1234.56, "$1,234.56"),
            (Decimal("75000"), "$75,000.00"),
            (0, "$0.00"),
            ("1000000.5", "$1,000,000.50"),
            (-12.3, "-$12.30"),
            (None, ""),
        ],
    )
    def test_currency(self, amount, expected: str) -> None:
        assert format_currency(amount) == expected

    def test_date(self) -> None:
        assert format_date("2024-01-05") == "Jan 5, 2024"
        assert format_date(date(2023, 12, 25)) == "Dec 25, 2023"
        assert format_date(None) == ""

    def test_month(self) -> None:
        assert format_month("2024-03") == "March 2024"

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("ACTIVE", "status-active"),
            ("INACTIVE", "status-inactive"),
            ("ON_LEAVE", "status-on-leave"),
            ("TERMINATED", "status-terminated"),
            ("UNKNOWN", "status-inactive"),
            (None, "status-inactive"),
        ],
    )
    def test_badge_class(self, status, expected: str) -> None:
        assert status_badge_class(status) == expected

    def test_display_record(self) -> None:
        record = {"firstName": "Ann", "lastName": "Lee", "salary": 5000, "hireDate": "2024-02-29", "status": "ON_LEAVE"}

        display = format_employee_for_display(record)

        assert display["fullName"] == "Ann Lee"
        assert display["formattedSalary"] == "$5,000.00"
        assert display["formattedHireDate"] == "Feb 29, 2024"
        assert display["statusBadge"] == "status-on-leave"
        assert display["firstName"] == "Ann"


class TestCsvExport:
    def test_header_and_rows(self) -> None:
        employees = [
            {
                "id": 1,
                "firstName": "Ann",
                "lastName": "Lee",
                "email": "ann@example.com",
                "department": "Research, Europe",
                "position": "Lead",
                "salary": 90000.0,
                "hireDate": "2021-04-01",
                "status": "ACTIVE",
            }
        ]

        lines = employees_to_csv(employees).splitlines()

        assert lines[0] == "ID,First Name,Last Name,Email,Department,Position,Salary,Hire Date,Status"
        assert lines[1] == '1,Ann,Lee,ann@example.com,"Research, Europe",Lead,90000.0,2021-04-01,ACTIVE'

    def test_empty_export_has_header_only(self) -> None:
        assert employees_to_csv([]).splitlines() == [
            "ID,First Name,Last Name,Email,Department,Position,Salary,Hire Date,Status"
        ]

    def test_filename(self) -> None:
        assert csv_export_filename(date(2024, 7, 9)) == "employees_2024-07-09.csv"


class TestResponseCache:
    def test_entries_expire(self) -> None:
        now = [100.0]
        cache = ResponseCache(ttl_seconds=60, clock=lambda: now[0])
        cache.set("key", {"a": 1})

        now[0] = 159.9
        assert cache.get("key") == {"a": 1}

        now[0] = 160.0
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_missing_key(self) -> None:
        assert ResponseCache().get("absent") is None

    def test_clear(self) -> None:
        cache = ResponseCache()
        cache.set("a", 1)
        cache.set("b", 2)

        cache.clear()

        assert len(cache) == 0
