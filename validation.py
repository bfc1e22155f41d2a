"""
Create-payload schemas.

Each schema accepts the camelCase keys the browser client sends (snake_case
names work too), drops anything it does not declare, and dumps to the
snake_case keyword arguments the stores take.
"""

from typing import Any, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from errors import ValidationError
from utils import MAX_INT


class CreatePayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class UserCreate(CreatePayload):
    username: str = Field(..., min_length=3, max_length=80)
    password: str = Field(..., min_length=6)
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")
    phone_number: Optional[str] = Field(None, max_length=32)


class EventCreate(CreatePayload):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10)
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=200)
    coordinates: Optional[Any] = None
    price: int = Field(0, ge=0, le=MAX_INT)
    image_url: Optional[str] = None
    created_by: int = Field(..., ge=1, le=MAX_INT)


class TicketCreate(CreatePayload):
    event_id: int = Field(..., ge=1, le=MAX_INT)
    user_id: int = Field(..., ge=1, le=MAX_INT)


class HarambeeCreate(CreatePayload):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10)
    goal_amount: int = Field(..., ge=1, le=MAX_INT)
    image_url: Optional[str] = None
    verified: bool = False
    created_by: int = Field(..., ge=1, le=MAX_INT)


class ContributionCreate(CreatePayload):
    harambee_id: int = Field(..., ge=1, le=MAX_INT)
    user_id: int = Field(..., ge=1, le=MAX_INT)
    amount: int = Field(..., ge=1, le=MAX_INT)


class RentalCreate(CreatePayload):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    category: str = Field(..., min_length=1, max_length=100)
    price: int = Field(..., ge=1, le=MAX_INT)
    is_rental: bool = True
    location: str = Field(..., min_length=1, max_length=200)
    image_url: Optional[str] = None
    contact_info: str = Field(..., min_length=10)
    created_by: int = Field(..., ge=1, le=MAX_INT)


class AlertCreate(CreatePayload):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10)
    type: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=200)
    image_url: Optional[str] = None
    created_by: int = Field(..., ge=1, le=MAX_INT)


class CommentCreate(CreatePayload):
    text: str = Field(..., min_length=1)
    alert_id: int = Field(..., ge=1, le=MAX_INT)
    user_id: int = Field(..., ge=1, le=MAX_INT)


def _describe(error):
    location = ".".join(str(part) for part in error.get("loc", ()))
    if location:
        return f'{error["msg"]} at "{location}"'
    return error["msg"]


def validate_data(schema, data):
    """Validate ``data`` against ``schema`` and return the normalized fields.

    Raises ``ValidationError`` with one message covering every violation.
    """
    if not isinstance(data, dict):
        raise ValidationError("Validation error: Expected a JSON object")
    try:
        payload = schema.model_validate(data)
    except pydantic.ValidationError as exc:
        details = "; ".join(_describe(error) for error in exc.errors())
        raise ValidationError(f"Validation error: {details}") from None
    return payload.model_dump()
