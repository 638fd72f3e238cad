"""
Summary service - agrupa los pagos por persona y calcula el saldo neto.

Positivo = nos deben dinero, negativo = le debemos a esa persona.
"""

from typing import Iterable, List

from app.models.payment import Payment, PaymentType
from app.schemas.payment import PaymentSummary, SummaryPayment


def build_summaries(payments: Iterable[Payment]) -> List[PaymentSummary]:
    """
    Agrupa por person_name (coincidencia exacta, sin normalizar mayúsculas).

    Los pagos de cada grupo conservan el orden de entrada; los grupos se
    ordenan por |net_total| descendente y los empates mantienen el orden
    en que apareció cada persona.
    """
    groups = {}

    for payment in payments:
        summary = groups.get(payment.person_name)
        if summary is None:
            summary = PaymentSummary(
                person_name=payment.person_name,
                to_receive=0.0,
                to_pay=0.0,
                net_total=0.0,
                payments=[],
            )
            groups[payment.person_name] = summary

        if payment.type == PaymentType.to_receive:
            summary.to_receive += payment.amount
        else:
            summary.to_pay += payment.amount

        summary.payments.append(SummaryPayment.model_validate(payment))

    summaries = list(groups.values())
    for summary in summaries:
        summary.net_total = summary.to_receive - summary.to_pay

    summaries.sort(key=lambda s: abs(s.net_total), reverse=True)
    return summaries
