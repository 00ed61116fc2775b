# storefront/repos/order_repo.py
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models import OrderModel, OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        self.db.add(order)
        self.db.flush()

        for item in items:
            item.order_id = order.id
            self.db.add(item)
        self.db.flush()
        return order

    def get_order(self, order_id: uuid.UUID, for_update: bool = False) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.id == order_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_order_with_items(self, order_id: uuid.UUID) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.game))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, user_id: uuid.UUID) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items).selectinload(OrderItemModel.game))
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc())
            ).scalars()
        )

    def update_order_status(self, order: OrderModel, status: str, payment_ref: str | None) -> OrderModel:
        order.status = status
        #brak nowej referencji = zostaje poprzednia (coalesce)
        if payment_ref is not None:
            order.payment_ref = payment_ref
        self.db.flush()
        return order
