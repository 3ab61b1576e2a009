from datetime import datetime, timezone
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.vehicle import VehicleStatus

MONEY_DIGITS = 10
MONEY_PLACES = 2

_TEXT_FIELDS = ("make", "model", "vin", "fuel_type", "transmission", "description", "image_url")
_MONEY_FIELDS = ("purchase_price", "asking_price", "sold_price")
_REQUIRED_ON_UPDATE = ("make", "model", "year", "status")


def _money(alias: str | None = None, **kwargs):
    if alias is not None:
        kwargs["validation_alias"] = AliasChoices(alias, _camel(alias))
    return Field(ge=0, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES, **kwargs)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _blank_to_none(value):
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class _VehicleFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator(*_TEXT_FIELDS, *_MONEY_FIELDS, "mileage", mode="before", check_fields=False)
    @classmethod
    def normalize_blank(cls, value):
        return _blank_to_none(value)


class VehicleCreate(_VehicleFields):
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int
    vin: str | None = Field(default=None, max_length=17)
    mileage: int | None = Field(default=None, ge=0)
    fuel_type: str | None = Field(
        default=None, max_length=50, validation_alias=AliasChoices("fuel_type", "fuelType")
    )
    transmission: str | None = Field(default=None, max_length=50)
    purchase_price: Decimal | None = _money("purchase_price", default=None)
    asking_price: Decimal | None = _money("asking_price", default=None)
    sold_price: Decimal | None = _money("sold_price", default=None)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    description: str | None = None
    image_url: str | None = Field(
        default=None, max_length=500, validation_alias=AliasChoices("image_url", "imageUrl")
    )

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return VehicleStatus.AVAILABLE
        if isinstance(value, str):
            return value.strip().lower()
        return value


class VehicleUpdate(_VehicleFields):
    """Partial vehicle update; only fields present in the request are applied."""

    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = None
    vin: str | None = Field(default=None, max_length=17)
    mileage: int | None = Field(default=None, ge=0)
    fuel_type: str | None = Field(
        default=None, max_length=50, validation_alias=AliasChoices("fuel_type", "fuelType")
    )
    transmission: str | None = Field(default=None, max_length=50)
    purchase_price: Decimal | None = _money("purchase_price", default=None)
    asking_price: Decimal | None = _money("asking_price", default=None)
    sold_price: Decimal | None = _money("sold_price", default=None)
    status: VehicleStatus | None = None
    description: str | None = None
    image_url: str | None = Field(
        default=None, max_length=500, validation_alias=AliasChoices("image_url", "imageUrl")
    )

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in _REQUIRED_ON_UPDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class VehicleOut(BaseModel):
    id: int
    user_id: int
    make: str
    model: str
    year: int
    vin: str | None
    mileage: int | None
    fuel_type: str | None
    transmission: str | None
    purchase_price: Decimal | None
    asking_price: Decimal | None
    sold_price: Decimal | None
    status: VehicleStatus
    description: str | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime
    sold_at: datetime | None

    model_config = {"from_attributes": True}


class VehicleExpenseCreate(BaseModel):
    type: str = Field(min_length=1, max_length=100, description="repair, maintenance, inspection, ...")
    description: str | None = None
    amount: Decimal = Field(ge=0, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    date: datetime | None = None

    @field_validator("type", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _blank_to_none(value)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime | None) -> datetime | None:
        return _naive_utc(value)


class VehicleExpenseOut(BaseModel):
    id: int
    vehicle_id: int
    type: str
    description: str | None
    amount: Decimal
    date: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class VehicleStatsOut(BaseModel):
    total_vehicles: int
    available_vehicles: int
    sold_this_month: int
    total_revenue: Decimal
    average_profit: Decimal

    model_config = {"from_attributes": True}
