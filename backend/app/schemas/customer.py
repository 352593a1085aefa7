"""Customer schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _clean_name(value):
    if value is None:
        return value
    value = str(value).strip()
    if not value:
        raise ValueError("Enter customer name")
    return value


def _clean_contact(value):
    if value is None:
        return value
    return str(value).strip() or None


class CustomerCreate(BaseModel):
    name: str
    contact: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

    @field_validator("contact", mode="before")
    @classmethod
    def strip_contact(cls, v):
        return _clean_contact(v)


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    contact: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

    @field_validator("contact", mode="before")
    @classmethod
    def strip_contact(cls, v):
        return _clean_contact(v)


class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    name: str
    contact: Optional[str]
    created_at: datetime
    updated_at: datetime
