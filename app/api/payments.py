from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.deps import get_current_user, get_settings
from app.core.config import Settings
from app.core.errors import BadRequest, NotFound
from app.core.rate_limit import api_rate_limit
from app.database import get_session
from app.models.payment import PaymentType
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.payment import (
    PaymentCreate,
    PaymentData,
    PaymentListData,
    PaymentRead,
    PaymentUpdate,
    PreviousUsersData,
    StatsData,
    SummariesData,
    ToggleData,
)
from app.services import payments as payment_service

# Primero se autentica y luego se cuenta la petición
router = APIRouter(
    prefix="/payments",
    tags=["payments"],
    dependencies=[Depends(get_current_user), Depends(api_rate_limit)],
)


def _payment_id(payment_id: str) -> UUID:
    # Un id mal formado se trata igual que uno inexistente
    try:
        return UUID(payment_id)
    except ValueError:
        raise NotFound("Payment not found")


def _list_data(payments) -> PaymentListData:
    return PaymentListData(payments=[PaymentRead.model_validate(p) for p in payments])


@router.get("", response_model=ApiResponse[PaymentListData])
def get_payments(user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    payments = payment_service.list_payments(session, user.id)
    return ApiResponse(message="Payments retrieved successfully", data=_list_data(payments))


@router.get("/type/{payment_type}", response_model=ApiResponse[PaymentListData])
def get_payments_by_type(
    payment_type: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        type_ = PaymentType(payment_type)
    except ValueError:
        raise BadRequest("Invalid payment type", error="Type must be to_pay or to_receive")

    payments = payment_service.list_payments(session, user.id, type_)
    return ApiResponse(message="Payments retrieved successfully", data=_list_data(payments))


@router.get("/stats", response_model=ApiResponse[StatsData])
def get_stats(user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    stats = payment_service.payment_stats(session, user.id)
    return ApiResponse(message="Payment statistics retrieved successfully", data=StatsData(stats=stats))


@router.get("/previous-users", response_model=ApiResponse[PreviousUsersData])
def get_previous_users(user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    names = payment_service.previous_person_names(session, user.id)
    return ApiResponse(message="Previous users retrieved successfully", data=PreviousUsersData(previous_users=names))


@router.get("/summaries", response_model=ApiResponse[SummariesData])
def get_summaries(user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    summaries = payment_service.payment_summaries(session, user.id)
    return ApiResponse(message="Payment summaries retrieved successfully", data=SummariesData(summaries=summaries))


@router.get("/{payment_id}", response_model=ApiResponse[PaymentData])
def get_payment(payment_id: str, user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    payment = payment_service.get_payment(session, user.id, _payment_id(payment_id))
    return ApiResponse(message="Payment retrieved successfully",
                       data=PaymentData(payment=PaymentRead.model_validate(payment)))


@router.post("", response_model=ApiResponse[PaymentData], status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_data: PaymentCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    payment = payment_service.create_payment(session, user.id, payment_data)
    return ApiResponse(message="Payment created successfully",
                       data=PaymentData(payment=PaymentRead.model_validate(payment)))


@router.put("/{payment_id}", response_model=ApiResponse[PaymentData])
def update_payment(
    payment_id: str,
    payment_data: PaymentUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    payment = payment_service.update_payment(session, user.id, _payment_id(payment_id), payment_data)
    return ApiResponse(message="Payment updated successfully",
                       data=PaymentData(payment=PaymentRead.model_validate(payment)))


@router.patch("/{payment_id}/toggle", response_model=ApiResponse[ToggleData])
def toggle_payment(
    payment_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    result = payment_service.toggle_status(
        session, user.id, _payment_id(payment_id), policy=settings.completed_payment_policy
    )
    if result.deleted:
        return ApiResponse(message="Payment completed and removed from list",
                           data=ToggleData(payment=None, deleted=True))
    return ApiResponse(message="Payment status updated successfully",
                       data=ToggleData(payment=PaymentRead.model_validate(result.payment), deleted=False))


@router.delete("/{payment_id}", response_model=ApiResponse[PaymentData])
def delete_payment(payment_id: str, user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    payment = payment_service.delete_payment(session, user.id, _payment_id(payment_id))
    return ApiResponse(message="Payment deleted successfully",
                       data=PaymentData(payment=PaymentRead.model_validate(payment)))
