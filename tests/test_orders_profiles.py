from storefront.services.checkout_service import CheckoutService
from storefront.services.order_status_service import OrderStatusService

from tests.conftest import auth


class TestOrdersEndpoints:
    def test_list_newest_first_with_items(self, client, store, session_factory):
        profile = store.profile("user-1")
        game = store.game(title="Hades", price_in_cents=2499, stock=10)
        svc = CheckoutService(session_factory)
        store.cart(profile, [(game, 1)])
        first = svc.checkout(profile.id)
        store.cart(profile, [(game, 2)])
        second = svc.checkout(profile.id)

        response = client.get("/orders", headers=auth("user-1"))

        assert response.status_code == 200
        orders = response.json()["data"]
        assert [o["id"] for o in orders] == [str(second.order_id), str(first.order_id)]
        assert orders[0]["items"][0]["title"] == "Hades"
        assert orders[0]["items"][0]["qty"] == 2
        assert orders[0]["total_in_cents"] == 4998

    def test_get_order_reflects_webhook_status(self, client, store, session_factory):
        profile = store.profile("user-1")
        store.cart(profile, [(store.game(stock=1), 1)])
        result = CheckoutService(session_factory).checkout(profile.id)
        OrderStatusService(session_factory).apply_payment_outcome(result.order_id, "paid", "pi_1")

        response = client.get(f"/orders/{result.order_id}", headers=auth("user-1"))

        data = response.json()["data"]
        assert data["status"] == "paid"
        assert data["payment_ref"] == "pi_1"

    def test_other_users_order_is_not_found(self, client, store, session_factory):
        owner = store.profile("owner")
        store.profile("intruder")
        store.cart(owner, [(store.game(stock=1), 1)])
        result = CheckoutService(session_factory).checkout(owner.id)

        response = client.get(f"/orders/{result.order_id}", headers=auth("intruder"))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "order_not_found"


class TestProfilesEndpoints:
    def test_provision_is_idempotent(self, client):
        headers = auth("ext-42")

        first = client.post("/profiles", json={"email": "a@example.com"}, headers=headers)
        second = client.post("/profiles", json={"email": "other@example.com"}, headers=headers)

        assert first.status_code == 200
        assert first.json()["data"]["id"] == second.json()["data"]["id"]
        assert second.json()["data"]["email"] == "a@example.com"
        assert second.json()["data"]["role"] == "user"

    def test_me_requires_profile(self, client):
        response = client.get("/profiles/me", headers=auth("ext-42"))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "profile_not_found"

    def test_update_me(self, client, store):
        store.profile("ext-42")

        response = client.patch("/profiles/me", json={"display_name": "Tarnished"}, headers=auth("ext-42"))

        assert response.status_code == 200
        assert response.json()["data"]["display_name"] == "Tarnished"
        assert client.get("/profiles/me", headers=auth("ext-42")).json()["data"]["display_name"] == "Tarnished"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"data": {"status": "ok"}}
