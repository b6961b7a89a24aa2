"""Request body schemas.

Each schema validates one JSON body; a failed parse surfaces as a 400 with
field-level details through the error handlers in ``errors.py``.
"""

from datetime import date
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from models.account import ACCOUNT_ROLES
from models.booking import BOOKING_STATUSES, RENTAL_TYPES
from models.notification import NOTIFICATION_TYPES


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


def _not_null(value):
    # PATCH bodies may omit a field but not clear a required column
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


#-------------------------------------------------------
# Auth / accounts
class LoginBody(_Body):
    email: EmailStr
    password: str = Field(min_length=1)


class AccountCreate(_Body):
    name: str = ""
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal[ACCOUNT_ROLES] = "EMPLOYEE"
    active: bool = True


class AccountUpdate(_Body):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Literal[ACCOUNT_ROLES]] = None



#-------------------------------------------------------
# Bookings
class BookingCreate(_Body):
    contract_id: str = Field(min_length=1, max_length=64)
    booking_reference: Optional[str] = Field(default=None, max_length=64)
    insurance_amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    rental_days: int = Field(gt=0)
    rental_type: Literal[RENTAL_TYPES]
    daily_rate: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class BookingUpdate(_Body):
    contract_id: Optional[str] = Field(default=None, min_length=1, max_length=64)
    booking_reference: Optional[str] = Field(default=None, max_length=64)
    insurance_amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    rental_days: Optional[int] = Field(default=None, gt=0)
    rental_type: Optional[Literal[RENTAL_TYPES]] = None
    daily_rate: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    status: Optional[Literal[BOOKING_STATUSES]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator(
        "contract_id", "insurance_amount", "rental_days", "rental_type", "daily_rate",
        "status", "start_date", "end_date", mode="before",
    )
    @classmethod
    def required_columns(cls, value):
        return _not_null(value)


#-------------------------------------------------------
# Excesses
class ExcessCreate(_Body):
    booking_id: int
    type: str = Field(min_length=1, max_length=50)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = None
    notes: Optional[str] = None


class ExcessUpdate(_Body):
    description: Optional[str] = None
    notes: Optional[str] = None


class ExcessStatusChange(_Body):
    status: str = Field(min_length=1)
    reason: Optional[str] = None


class DocumentDelete(_Body):
    document_type: str = Field(min_length=1)


#-------------------------------------------------------
# Bank cards
class _CardNumber(_Body):
    @field_validator("card_number", check_fields=False)
    @classmethod
    def digits_only(cls, value):
        if value is None:
            return value
        value = value.replace(" ", "")
        if not value.isdigit():
            raise ValueError("card_number must contain digits only")
        return value


class BankCardCreate(_CardNumber):
    card_number: str = Field(min_length=13, max_length=19)
    card_holder_name: str = Field(min_length=2, max_length=100)
    expiry_date: str = Field(pattern=r"^\d{2}/\d{2}$")
    cvv: Optional[str] = Field(default=None, max_length=4)
    balance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    account_id: Optional[int] = None


class BankCardUpdate(_CardNumber):
    card_number: Optional[str] = Field(default=None, min_length=13, max_length=19)
    card_holder_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    expiry_date: Optional[str] = Field(default=None, pattern=r"^\d{2}/\d{2}$")
    cvv: Optional[str] = Field(default=None, max_length=4)

    @field_validator("card_number", "card_holder_name", "expiry_date", mode="before")
    @classmethod
    def required_columns(cls, value):
        return _not_null(value)


class CardTransaction(_Body):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    description: str = Field(min_length=1, max_length=255)


#-------------------------------------------------------
# Notifications
class NotificationCreate(_Body):
    account_id: int
    type: Literal[NOTIFICATION_TYPES] = "GENERAL"
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    booking_id: Optional[int] = None
    excess_id: Optional[int] = None
