"""Employee DTOs."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from employee_api.constants.validation import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PHONE_REGEX,
    SALARY_FRACTION_DIGITS,
    SALARY_INTEGER_DIGITS,
    ZIP_CODE_REGEX,
)
from employee_api.models.domain.employee import EmployeeStatus

PersonName = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH,
    ),
]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)] | None

OPTIONAL_TEXT_FIELDS = (
    "phone_number",
    "address",
    "city",
    "state",
    "zip_code",
    "emergency_contact_name",
    "emergency_contact_phone",
)


class EmployeeRequest(BaseModel):
    """DTO for creating or replacing an employee.

    Used by both POST and PUT: every mutable field is sent on update.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: PersonName = Field(description="First name (2-50 characters)")
    last_name: PersonName = Field(description="Last name (2-50 characters)")
    email: RequiredText = Field(description="Unique email address, stored as submitted")
    phone_number: OptionalText = Field(default=None, description="E.164-like phone number")
    position: RequiredText = Field(description="Job position")
    department: RequiredText = Field(description="Department name")
    salary: Decimal = Field(
        gt=0,
        max_digits=SALARY_INTEGER_DIGITS + SALARY_FRACTION_DIGITS,
        decimal_places=SALARY_FRACTION_DIGITS,
        description="Salary, greater than 0 with at most 2 fraction digits",
    )
    hire_date: date = Field(description="Hire date (YYYY-MM-DD), not in the future")
    status: EmployeeStatus | None = Field(
        default=None, description="Employment status, ACTIVE when omitted on create"
    )
    address: OptionalText = None
    city: OptionalText = None
    state: OptionalText = None
    zip_code: OptionalText = Field(default=None, description="5 digit or 5+4 digit zip code")
    emergency_contact_name: OptionalText = None
    emergency_contact_phone: OptionalText = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """Treat empty form fields as absent."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        """Check the email format without rewriting the address."""
        # validate_email also accepts "Name <address>", which is not an address
        if "<" in value:
            raise ValueError("Email should be valid")
        try:
            validate_email(value)
        except PydanticCustomError as e:
            raise ValueError("Email should be valid") from e
        return value

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str | None) -> str | None:
        """Check the phone number format."""
        if value is not None and not PHONE_REGEX.match(value):
            raise ValueError("Phone number should be valid")
        return value

    @field_validator("zip_code")
    @classmethod
    def validate_zip_code(cls, value: str | None) -> str | None:
        """Check the zip code format."""
        if value is not None and not ZIP_CODE_REGEX.match(value):
            raise ValueError("Zip code format is invalid")
        return value

    @field_validator("hire_date")
    @classmethod
    def validate_hire_date(cls, value: date) -> date:
        """Reject hire dates in the future."""
        if value > date.today():
            raise ValueError("Hire date cannot be in the future")
        return value


class EmployeeResponse(BaseModel):
    """Employee response DTO."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: str | None = None
    position: str
    department: str
    salary: Decimal
    hire_date: date
    status: EmployeeStatus
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("salary", when_used="json")
    def serialize_salary(self, value: Decimal) -> float:
        """Emit salary as a JSON number."""
        return float(value)
