"""Payload validation for the registration and login endpoints."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from ..domain.contracts import LoginInput, RegistrationInput
from ..errors import validation_error

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NOT_AN_OBJECT = "Expected an object"

# (field, pydantic error type) -> message; unlisted errors keep pydantic's text
_REGISTRATION_MESSAGES: dict[tuple[str, str], str] = {
    ("email", "missing"): "Email is required",
    ("email", "string_too_short"): "Email is required",
    ("email", "string_type"): "Email must be a string",
    ("password", "missing"): "Password is required",
    ("password", "string_type"): "Password must be a string",
    ("password", "string_too_short"): "Password must be at least 6 characters long",
    ("password", "string_too_long"): "Password must not exceed 100 characters",
}

_LOGIN_MESSAGES: dict[tuple[str, str], str] = {
    **_REGISTRATION_MESSAGES,
    ("password", "string_too_short"): "Password is required",
}


class RegistrationPayload(BaseModel):
    """Body accepted by ``POST /users/create``; unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", strict=True)

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, max_length=100)

    @field_validator("email")
    @classmethod
    def email_must_be_well_formed(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise PydanticCustomError("email_format", "Invalid email format")
        return value


class LoginPayload(BaseModel):
    """Body accepted by ``POST /users/authenticate``."""

    model_config = ConfigDict(extra="ignore", strict=True)

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


def _validate(model: type[BaseModel], raw: Any, messages: dict[tuple[str, str], str]) -> BaseModel:
    if not isinstance(raw, dict):
        raise validation_error([{"field": "body", "message": NOT_AN_OBJECT}])
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        details = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "body"
            details.append({"field": field, "message": messages.get((field, error["type"]), error["msg"])})
        raise validation_error(details) from exc


def validate_registration(raw: Any) -> RegistrationInput:
    """Validate a registration body, collecting every field violation.

    Raises
    ------
    AppError
        With kind ``VALIDATION`` and one detail per invalid field.
    """
    payload = _validate(RegistrationPayload, raw, _REGISTRATION_MESSAGES)
    return RegistrationInput(email=payload.email, password=payload.password)


def validate_login(raw: Any) -> LoginInput:
    """Validate a login body; only presence and type are checked."""
    payload = _validate(LoginPayload, raw, _LOGIN_MESSAGES)
    return LoginInput(email=payload.email, password=payload.password)
