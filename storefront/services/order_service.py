# storefront/services/order_service.py
import uuid

from sqlalchemy.orm import Session

from storefront.data.models import OrderModel
from storefront.domain.errors import OrderNotFound
from storefront.repos.order_repo import OrderRepo


def order_to_dict(order: OrderModel) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "status": order.status,
        "total_in_cents": order.total_in_cents,
        "payment_ref": order.payment_ref,
        "created_at": order.created_at,
        "items": [
            {
                "id": item.id,
                "game_id": item.game_id,
                "title": item.game.title if item.game else None,
                "qty": item.qty,
                "unit_price_in_cents": item.unit_price_in_cents,
            }
            for item in order.items
        ],
    }


class OrderService:
    """Odczyt zamowien usera (query)."""

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def list_orders(self, user_id: uuid.UUID) -> list[dict]:
        return [order_to_dict(order) for order in self.repo.list_orders(user_id)]

    def get_order(self, user_id: uuid.UUID, order_id: uuid.UUID) -> dict:
        order = self.repo.get_order_with_items(order_id)

        #cudze zamowienie = tak jakby nie istnialo
        if not order or order.user_id != user_id:
            raise OrderNotFound()

        return order_to_dict(order)
