"""Shared pydantic base: camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rately.core.security import password_policy_error


class CamelModel(BaseModel):
    """Base for all API schemas. Accepts both camelCase and snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str


def normalize_email(value: str) -> str:
    """Trim and lower-case an email for storage and lookup."""
    return value.strip().lower()


def check_password_policy(value: str) -> str:
    """Field validator body shared by every schema that accepts a new password."""
    reason = password_policy_error(value)
    if reason:
        raise ValueError(reason)
    return value
