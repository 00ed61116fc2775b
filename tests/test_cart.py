import uuid

from storefront.data.models import CartItemModel, CartModel, OrderItemModel

from tests.conftest import auth


class TestCartEndpoints:
    def test_no_cart_yet(self, client, store):
        store.profile("user-1")

        response = client.get("/cart", headers=auth("user-1"))

        assert response.status_code == 200
        assert response.json() == {"data": None}

    def test_ensure_cart_is_idempotent(self, client, store):
        store.profile("user-1")

        first = client.post("/cart", headers=auth("user-1")).json()["data"]
        second = client.post("/cart", headers=auth("user-1")).json()["data"]

        assert first["id"] == second["id"]
        assert store.count(CartModel) == 1

    def test_add_item_captures_current_price(self, client, store):
        store.profile("user-1")
        game = store.game(title="Hades", price_in_cents=2499)

        response = client.post("/cart/items", json={"game_id": str(game.id), "qty": 2}, headers=auth("user-1"))

        assert response.status_code == 200
        cart = response.json()["data"]
        assert cart["total_in_cents"] == 4998
        assert cart["items"] == [
            {
                "id": cart["items"][0]["id"],
                "game_id": str(game.id),
                "title": "Hades",
                "qty": 2,
                "unit_price_in_cents": 2499,
            }
        ]

    def test_setting_qty_again_replaces_line(self, client, store):
        store.profile("user-1")
        game = store.game()
        headers = auth("user-1")

        client.post("/cart/items", json={"game_id": str(game.id), "qty": 1}, headers=headers)
        response = client.post("/cart/items", json={"game_id": str(game.id), "qty": 3}, headers=headers)

        assert [i["qty"] for i in response.json()["data"]["items"]] == [3]
        assert store.count(CartItemModel) == 1

    def test_zero_qty_removes_line(self, client, store):
        store.profile("user-1")
        game = store.game()
        headers = auth("user-1")
        client.post("/cart/items", json={"game_id": str(game.id), "qty": 1}, headers=headers)

        response = client.post("/cart/items", json={"game_id": str(game.id), "qty": 0}, headers=headers)

        assert response.json()["data"]["items"] == []

    def test_remove_item(self, client, store):
        profile = store.profile("user-1")
        a, b = store.game(title="A"), store.game(title="B")
        store.cart(profile, [(a, 1), (b, 1)])

        response = client.delete(f"/cart/items/{a.id}", headers=auth("user-1"))

        assert [i["title"] for i in response.json()["data"]["items"]] == ["B"]

    def test_clear_cart(self, client, store):
        profile = store.profile("user-1")
        cart = store.cart(profile, [(store.game(), 1)])

        response = client.delete("/cart/items", headers=auth("user-1"))

        assert response.status_code == 204
        assert store.count(CartItemModel, CartItemModel.cart_id == cart.id) == 0

    def test_unknown_game(self, client, store):
        store.profile("user-1")

        response = client.post("/cart/items", json={"game_id": str(uuid.uuid4()), "qty": 1}, headers=auth("user-1"))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "game_not_found"

    def test_inactive_game_cannot_be_added(self, client, store):
        store.profile("user-1")
        game = store.game(is_active=False)

        response = client.post("/cart/items", json={"game_id": str(game.id), "qty": 1}, headers=auth("user-1"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "game_inactive"

    def test_added_then_checked_out_keeps_cart_price(self, client, store, session_factory):
        store.profile("user-1")
        game = store.game(price_in_cents=1000, stock=5)
        headers = auth("user-1")
        client.post("/cart/items", json={"game_id": str(game.id), "qty": 1}, headers=headers)
        store.set_price(game, 1500)

        response = client.post("/checkout/create", json={}, headers=headers)

        assert response.json()["data"]["total_in_cents"] == 1000
        with session_factory() as s:
            [item] = s.query(OrderItemModel).all()
        assert item.unit_price_in_cents == 1000

    def test_remove_without_cart_does_not_create_one(self, client, store):
        store.profile("user-1")
        game = store.game()

        response = client.delete(f"/cart/items/{game.id}", headers=auth("user-1"))

        assert response.status_code == 200
        assert response.json() == {"data": None}
        assert store.count(CartModel) == 0

    def test_zero_qty_without_cart_does_not_create_one(self, client, store):
        store.profile("user-1")
        game = store.game()

        response = client.post("/cart/items", json={"game_id": str(game.id), "qty": 0}, headers=auth("user-1"))

        assert response.json() == {"data": None}
        assert store.count(CartModel) == 0
