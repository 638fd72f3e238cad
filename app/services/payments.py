"""
Payment service - CRUD, cambio de estado y estadísticas de los pagos.

Todas las consultas se filtran por (id, user_id): un pago de otro usuario
es indistinguible de uno inexistente.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import Session, select

from app.core.config import settings
from app.core.errors import NotFound
from app.models.payment import (
    RESOLVED_STATUSES,
    STATUS_FAMILY,
    UNRESOLVED_STATUSES,
    Payment,
    PaymentStatus,
    PaymentType,
    default_status,
)
from app.schemas.payment import PaymentCreate, PaymentStats, PaymentSummary, PaymentUpdate
from app.services.summary import build_summaries
from app.utils.dates import normalize_dt, utcnow

logger = logging.getLogger(__name__)

REMOVE_COMPLETED = "remove"


@dataclass
class ToggleResult:
    payment: Payment
    deleted: bool = False


def _owned_payment(session: Session, user_id: UUID, payment_id: UUID) -> Payment:
    payment = session.exec(
        select(Payment).where(Payment.id == payment_id, Payment.user_id == user_id)
    ).first()
    if not payment:
        raise NotFound("Payment not found")
    return payment


def next_status(payment_type: PaymentType, status: PaymentStatus) -> PaymentStatus:
    """unpaid ⇄ paid para to_pay, pending ⇄ received para to_receive."""
    unresolved, resolved = STATUS_FAMILY[PaymentType(payment_type)]
    return unresolved if status == resolved else resolved


def status_for_type(payment_type: PaymentType, status: PaymentStatus) -> PaymentStatus:
    """Traduce un estado al equivalente del otro tipo, conservando si está resuelto o no."""
    unresolved, resolved = STATUS_FAMILY[PaymentType(payment_type)]
    if status in (unresolved, resolved):
        return status
    return resolved if status in RESOLVED_STATUSES else unresolved


def create_payment(session: Session, user_id: UUID, data: PaymentCreate) -> Payment:
    payment = Payment(
        user_id=user_id,
        type=data.type,
        person_name=data.person_name,
        amount=data.amount,
        due_date=data.due_date,
        description=data.description or None,
        status=default_status(data.type),
    )
    session.add(payment)
    session.commit()
    session.refresh(payment)

    logger.info("Payment created payment_id=%s user_id=%s", payment.id, user_id)
    return payment


def list_payments(session: Session, user_id: UUID, payment_type: Optional[PaymentType] = None) -> List[Payment]:
    query = select(Payment).where(Payment.user_id == user_id)
    if payment_type is not None:
        query = query.where(Payment.type == payment_type)

    payments = session.exec(query.order_by(Payment.created_at.desc())).all()
    logger.debug("Payments retrieved count=%s user_id=%s", len(payments), user_id)
    return list(payments)


def get_payment(session: Session, user_id: UUID, payment_id: UUID) -> Payment:
    return _owned_payment(session, user_id, payment_id)


def update_payment(session: Session, user_id: UUID, payment_id: UUID, data: PaymentUpdate) -> Payment:
    payment = _owned_payment(session, user_id, payment_id)

    changes = data.model_dump(exclude_unset=True)
    for field_name, value in changes.items():
        # description puede borrarse con null o en blanco; el resto ignora null
        if field_name == "description":
            value = value or None
        elif value is None:
            continue
        setattr(payment, field_name, value)

    if "type" in changes and changes["type"] is not None:
        payment.status = status_for_type(payment.type, payment.status)

    payment.updated_at = utcnow()
    session.add(payment)
    session.commit()
    session.refresh(payment)

    logger.info("Payment updated payment_id=%s user_id=%s", payment_id, user_id)
    return payment


def toggle_status(session: Session, user_id: UUID, payment_id: UUID, policy: Optional[str] = None) -> ToggleResult:
    """
    Cambia el estado del pago a su opuesto.

    Con la política "remove", un pago que pasa a paid/received se elimina
    y se devuelve con deleted=True en lugar de guardarse.
    """
    policy = policy or settings.completed_payment_policy
    payment = _owned_payment(session, user_id, payment_id)

    payment.status = next_status(payment.type, payment.status)
    payment.updated_at = utcnow()

    if policy == REMOVE_COMPLETED and payment.status in RESOLVED_STATUSES:
        session.delete(payment)
        session.commit()
        logger.info("Payment completed and removed payment_id=%s user_id=%s", payment_id, user_id)
        return ToggleResult(payment=payment, deleted=True)

    session.add(payment)
    session.commit()
    session.refresh(payment)

    logger.info("Payment status toggled payment_id=%s user_id=%s new_status=%s",
                payment_id, user_id, payment.status.value)
    return ToggleResult(payment=payment)


def delete_payment(session: Session, user_id: UUID, payment_id: UUID) -> Payment:
    payment = _owned_payment(session, user_id, payment_id)
    session.delete(payment)
    session.commit()

    logger.info("Payment deleted payment_id=%s user_id=%s", payment_id, user_id)
    return payment


def is_overdue(payment: Payment, now: datetime) -> bool:
    return payment.status in UNRESOLVED_STATUSES and normalize_dt(payment.due_date) < normalize_dt(now)


def payment_stats(session: Session, user_id: UUID, now: Optional[datetime] = None) -> PaymentStats:
    now = now or utcnow()
    payments = session.exec(select(Payment).where(Payment.user_id == user_id)).all()

    return PaymentStats(
        total_payments=len(payments),
        total_amount=sum(p.amount for p in payments),
        paid_payments=sum(1 for p in payments if p.status in RESOLVED_STATUSES),
        unpaid_payments=sum(1 for p in payments if p.status in UNRESOLVED_STATUSES),
        overdue_payments=sum(1 for p in payments if is_overdue(p, now)),
    )


def previous_person_names(session: Session, user_id: UUID) -> List[str]:
    names = session.exec(
        select(Payment.person_name).where(Payment.user_id == user_id).distinct()
    ).all()
    return sorted(names)


def payment_summaries(session: Session, user_id: UUID) -> List[PaymentSummary]:
    return build_summaries(list_payments(session, user_id))
