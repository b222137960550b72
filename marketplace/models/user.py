import re
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace.models.utils import camel_case_config

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_password(password: str) -> dict:
    """
    Check password strength rules.

    Returns:
        {"is_valid": bool, "errors": {"too_short", "no_upper_case", "no_lower_case", "no_numbers"}}
        where each error flag is True when the rule is violated.
    """
    errors = {
        "too_short": len(password) < MIN_PASSWORD_LENGTH,
        "no_upper_case": not re.search(r"[A-Z]", password),
        "no_lower_case": not re.search(r"[a-z]", password),
        "no_numbers": not re.search(r"\d", password),
    }
    return {"is_valid": not any(errors.values()), "errors": errors}


class SignUpRequest(BaseModel):
    model_config = camel_case_config()

    email: Annotated[str, Field(max_length=255)]
    password: Annotated[str, Field(max_length=72)]
    full_name: Annotated[str, Field(max_length=100, min_length=1)]

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("Invalid email address")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        result = validate_password(value)
        if not result["is_valid"]:
            failed = ", ".join(name for name, failed in result["errors"].items() if failed)
            raise ValueError(f"Password does not meet requirements: {failed}")
        return value


class SignInRequest(BaseModel):
    model_config = camel_case_config()

    email: Annotated[str, Field(max_length=255)]
    password: Annotated[str, Field(max_length=72)]


class ResetPasswordRequest(BaseModel):
    model_config = camel_case_config()

    email: Annotated[str, Field(max_length=255)]

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("Invalid email address")
        return value


class SessionUser(BaseModel):
    """The identity provider's user, as seen through the current session"""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("user_metadata", mode="before")
    @classmethod
    def default_metadata(cls, value: Any) -> dict:
        return value or {}
