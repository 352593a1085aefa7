"""Business settings schemas, including the exported JSON settings file."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BusinessSettingsBase(BaseModel):
    rate_per_minute: Decimal
    business_name: str
    business_contact: str
    business_address: str


class BusinessSettingsRead(BusinessSettingsBase):
    model_config = ConfigDict(from_attributes=True)


class BusinessSettingsUpdate(BaseModel):
    rate_per_minute: Decimal | None = None
    business_name: str | None = None
    business_contact: str | None = None
    business_address: str | None = None


class SettingsFile(BaseModel):
    """The downloadable settings document; keys are camelCase and unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    rate_per_minute: Optional[Decimal] = Field(default=None, alias="ratePerMinute")
    business_name: Optional[str] = Field(default=None, alias="businessName")
    business_contact: Optional[str] = Field(default=None, alias="businessContact")
    business_address: Optional[str] = Field(default=None, alias="businessAddress")
