import uuid

import pytest

from storefront.data.models import OrderItemModel, OrderModel
from storefront.domain.errors import OrderNotFound, Unauthorized
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_status_service import OrderStatusService, verify_webhook_secret
from storefront.utils import settings


@pytest.fixture
def pending_order(session_factory, store):
    profile = store.profile()
    game = store.game(price_in_cents=1000, stock=5)
    store.cart(profile, [(game, 2)])
    return CheckoutService(session_factory).checkout(profile.id)


def load_order(session_factory, order_id):
    with session_factory() as s:
        return s.get(OrderModel, order_id)


class TestOrderStatusService:
    def test_marks_order_paid_with_reference(self, session_factory, pending_order):
        svc = OrderStatusService(session_factory)

        status = svc.apply_payment_outcome(pending_order.order_id, "paid", "pi_123")

        assert status == "paid"
        order = load_order(session_factory, pending_order.order_id)
        assert order.status == "paid"
        assert order.payment_ref == "pi_123"

    def test_keeps_previous_reference_when_none_given(self, session_factory, pending_order):
        OrderStatusService(session_factory).apply_payment_outcome(pending_order.order_id, "failed")

        order = load_order(session_factory, pending_order.order_id)
        assert order.status == "failed"
        assert order.payment_ref == pending_order.payment_intent

    def test_same_notification_twice_is_idempotent(self, session_factory, pending_order):
        svc = OrderStatusService(session_factory)

        assert svc.apply_payment_outcome(pending_order.order_id, "paid", "pi_123") == "paid"
        first = load_order(session_factory, pending_order.order_id)
        assert svc.apply_payment_outcome(pending_order.order_id, "paid", "pi_123") == "paid"
        second = load_order(session_factory, pending_order.order_id)

        assert (first.status, first.payment_ref) == (second.status, second.payment_ref) == ("paid", "pi_123")

    def test_items_and_total_never_change(self, session_factory, store, pending_order):
        OrderStatusService(session_factory).apply_payment_outcome(pending_order.order_id, "paid", "pi_1")

        order = load_order(session_factory, pending_order.order_id)
        assert order.total_in_cents == 2000
        assert store.count(OrderItemModel, OrderItemModel.order_id == pending_order.order_id) == 1

    def test_conflicting_terminal_status_is_still_applied(self, session_factory, pending_order):
        svc = OrderStatusService(session_factory)
        svc.apply_payment_outcome(pending_order.order_id, "paid")

        assert svc.apply_payment_outcome(pending_order.order_id, "failed") == "failed"

    def test_unknown_order(self, session_factory):
        with pytest.raises(OrderNotFound):
            OrderStatusService(session_factory).apply_payment_outcome(uuid.uuid4(), "paid")

    def test_rejects_unsupported_outcome(self, session_factory, pending_order):
        with pytest.raises(ValueError):
            OrderStatusService(session_factory).apply_payment_outcome(pending_order.order_id, "fulfilled")


class TestVerifyWebhookSecret:
    def test_no_secret_configured_accepts_anything(self):
        verify_webhook_secret("", None)
        verify_webhook_secret(None, "whatever")

    def test_matching_secret(self):
        verify_webhook_secret("s3cret", "s3cret")

    @pytest.mark.parametrize("provided", [None, "", "wrong"])
    def test_mismatch(self, provided):
        with pytest.raises(Unauthorized):
            verify_webhook_secret("s3cret", provided)


class TestWebhookEndpoint:
    def test_applies_status(self, client, session_factory, pending_order):
        response = client.post(
            "/checkout/webhook",
            json={"order_id": str(pending_order.order_id), "status": "paid", "payment_reference": "pi_9"},
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"order_id": str(pending_order.order_id), "status": "paid"}}
        assert load_order(session_factory, pending_order.order_id).payment_ref == "pi_9"

    def test_provider_event_used_as_reference_fallback(self, client, session_factory, pending_order):
        response = client.post(
            "/checkout/webhook",
            json={"order_id": str(pending_order.order_id), "status": "paid", "provider_event": "evt_42"},
        )

        assert response.status_code == 200
        assert load_order(session_factory, pending_order.order_id).payment_ref == "evt_42"

    def test_repeated_delivery_succeeds_both_times(self, client, pending_order):
        body = {"order_id": str(pending_order.order_id), "status": "paid"}

        assert client.post("/checkout/webhook", json=body).status_code == 200
        assert client.post("/checkout/webhook", json=body).status_code == 200

    def test_unknown_order_is_404(self, client):
        response = client.post("/checkout/webhook", json={"order_id": str(uuid.uuid4()), "status": "paid"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "order_not_found"

    @pytest.mark.parametrize(
        "body",
        [
            {"order_id": "not-a-uuid", "status": "paid"},
            {"order_id": str(uuid.uuid4()), "status": "refunded"},
            {"status": "paid"},
        ],
    )
    def test_schema_violation_is_400(self, client, body):
        response = client.post("/checkout/webhook", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    def test_secret_header_checked_before_database(self, client, monkeypatch, pending_order):
        monkeypatch.setattr(settings, "CHECKOUT_WEBHOOK_SECRET", "s3cret")
        body = {"order_id": str(pending_order.order_id), "status": "paid"}

        denied = client.post("/checkout/webhook", json=body, headers={"x-webhook-secret": "nope"})
        allowed = client.post("/checkout/webhook", json=body, headers={"x-webhook-secret": "s3cret"})

        assert denied.status_code == 401
        assert denied.json()["error"]["code"] == "unauthorized"
        assert allowed.status_code == 200

    def test_wrong_secret_wins_over_malformed_body(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CHECKOUT_WEBHOOK_SECRET", "s3cret")

        response = client.post(
            "/checkout/webhook",
            content="{oops",
            headers={"x-webhook-secret": "nope", "Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthorized"

    @pytest.mark.parametrize("content", ["{oops", "", "[1, 2]"])
    def test_unusable_body_is_400(self, client, content):
        response = client.post("/checkout/webhook", content=content, headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"
