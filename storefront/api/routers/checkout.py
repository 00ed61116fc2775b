# storefront/api/routers/checkout.py
import json
from typing import Any

from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from storefront.api.deps import current_profile, get_session_factory
from storefront.data.models import ProfileModel
from storefront.domain.schemas import (
    CheckoutCreateIn,
    CheckoutOut,
    DataEnvelope,
    WebhookIn,
    WebhookOut,
    parse_payload,
)
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_status_service import OrderStatusService, verify_webhook_secret
from storefront.utils import settings

router = APIRouter(prefix="/checkout", tags=["checkout"])


async def read_json_body(request: Request) -> Any:
    """
    Surowe body jako JSON albo None gdy puste / niepoprawne.
    Body czytamy dopiero w zaleznosciach, czyli po sprawdzeniu tokenu i sekretu.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def requested_provider(body: Any = Depends(read_json_body)) -> str | None:
    #niepoprawne body = brak wybranego dostawcy
    if not isinstance(body, dict):
        return None
    try:
        return CheckoutCreateIn.model_validate(body).payment_provider or None
    except ValidationError:
        return None


@router.post("/create", response_model=DataEnvelope[CheckoutOut])
def create_checkout(
    profile: ProfileModel = Depends(current_profile),
    payment_provider: str | None = Depends(requested_provider),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Zamienia aktualny koszyk usera na zamowienie `pending`.
    404 cart_not_found, 400 cart_empty / insufficient_stock.
    """
    svc = CheckoutService(session_factory)
    result = svc.checkout(profile.id, payment_provider)
    return {
        "data": {
            "order_id": result.order_id,
            "payment_intent": result.payment_intent,
            "total_in_cents": result.total_in_cents,
            "payment_provider": result.payment_provider,
        }
    }


def check_webhook_secret(x_webhook_secret: str | None = Header(None)) -> None:
    #przed jakakolwiek praca na bazie i przed parsowaniem body
    verify_webhook_secret(settings.CHECKOUT_WEBHOOK_SECRET, x_webhook_secret)


def webhook_payload(body: Any = Depends(read_json_body)) -> WebhookIn:
    return parse_payload(WebhookIn, body, missing="Webhook body must be a JSON object.")


@router.post(
    "/webhook",
    response_model=DataEnvelope[WebhookOut],
    dependencies=[Depends(check_webhook_secret)],
)
def payment_webhook(
    payload: WebhookIn = Depends(webhook_payload),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    svc = OrderStatusService(session_factory)
    status = svc.apply_payment_outcome(
        payload.order_id,
        payload.status,
        payload.payment_reference or payload.provider_event,
    )
    return {"data": {"order_id": payload.order_id, "status": status}}
