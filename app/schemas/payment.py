# app/schemas/payment.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator
from typing_extensions import Annotated

from app.models.payment import PaymentStatus, PaymentType
from app.schemas.common import CamelModel, UtcDatetime
from app.utils.dates import normalize_dt

PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
Amount = Annotated[float, Field(ge=0, strict=True, allow_inf_nan=False)]


class PaymentCreate(CamelModel):
    type: PaymentType
    person_name: PersonName
    amount: Amount
    due_date: datetime
    description: Optional[Description] = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, value):
        return normalize_dt(value)


class PaymentUpdate(CamelModel):
    type: Optional[PaymentType] = None
    person_name: Optional[PersonName] = None
    amount: Optional[Amount] = None
    due_date: Optional[datetime] = None
    description: Optional[Description] = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, value):
        return normalize_dt(value) if value is not None else None


class PaymentRead(CamelModel):
    id: UUID = Field(alias="_id")
    user_id: UUID
    type: PaymentType
    person_name: str
    amount: float
    due_date: UtcDatetime
    description: Optional[str] = None
    status: PaymentStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PaymentData(CamelModel):
    payment: Optional[PaymentRead] = None


class PaymentListData(CamelModel):
    payments: List[PaymentRead]


class ToggleData(CamelModel):
    payment: Optional[PaymentRead] = None
    deleted: bool = False


class PaymentStats(CamelModel):
    total_payments: int
    total_amount: float
    paid_payments: int
    unpaid_payments: int
    overdue_payments: int


class StatsData(CamelModel):
    stats: PaymentStats


class PreviousUsersData(CamelModel):
    previous_users: List[str]


class SummaryPayment(CamelModel):
    id: UUID = Field(alias="_id")
    type: PaymentType
    amount: float
    description: Optional[str] = None
    due_date: UtcDatetime
    status: PaymentStatus
    created_at: UtcDatetime


class PaymentSummary(CamelModel):
    person_name: str
    to_receive: float
    to_pay: float
    net_total: float
    payments: List[SummaryPayment]


class SummariesData(CamelModel):
    summaries: List[PaymentSummary]
