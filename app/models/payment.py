# app/models/payment.py

from enum import Enum
from sqlalchemy import Column, DateTime, Index
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from typing import Optional
from datetime import datetime

from app.utils.dates import utcnow


class PaymentType(str, Enum):
    to_pay = "to_pay"
    to_receive = "to_receive"


class PaymentStatus(str, Enum):
    paid = "paid"
    unpaid = "unpaid"
    received = "received"
    pending = "pending"


# Estados válidos por tipo: (sin resolver, resuelto)
STATUS_FAMILY = {
    PaymentType.to_pay: (PaymentStatus.unpaid, PaymentStatus.paid),
    PaymentType.to_receive: (PaymentStatus.pending, PaymentStatus.received),
}

UNRESOLVED_STATUSES = (PaymentStatus.unpaid, PaymentStatus.pending)
RESOLVED_STATUSES = (PaymentStatus.paid, PaymentStatus.received)


def default_status(payment_type: PaymentType) -> PaymentStatus:
    return STATUS_FAMILY[PaymentType(payment_type)][0]


class Payment(SQLModel, table=True):
    __table_args__ = (
        Index("ix_payment_user_type_status", "user_id", "type", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    type: PaymentType
    person_name: str
    amount: float
    due_date: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))  # UTC
    description: Optional[str] = None
    status: PaymentStatus
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
