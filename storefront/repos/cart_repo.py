# storefront/repos/cart_repo.py
import uuid
from typing import NamedTuple

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models import CartModel, CartItemModel, InventoryModel, GameModel


class LockedCartLine(NamedTuple):
    """Pozycja koszyka razem z aktualnym stanem magazynu (wiersze zablokowane)."""

    game_id: uuid.UUID
    qty: int
    unit_price_in_cents: int
    stock: int
    title: str


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_current_cart(self, user_id: uuid.UUID, for_update: bool = False) -> CartModel | None:
        #"aktualny" koszyk = najnowszy dla usera
        stmt = (
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .order_by(CartModel.created_at.desc())
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_items(self, cart_id: uuid.UUID) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.created_at)
            ).scalars()
        )

    def get_cart_item(self, cart_id: uuid.UUID, game_id: uuid.UUID) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.game_id == game_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def lock_lines_with_stock(self, cart_id: uuid.UUID) -> list[LockedCartLine]:
        # FOR UPDATE OF cart_items, inventory - blokujemy pozycje i liczniki stanu
        rows = self.db.execute(
            select(
                CartItemModel.game_id,
                CartItemModel.qty,
                CartItemModel.unit_price_in_cents,
                InventoryModel.stock,
                GameModel.title,
            )
            .join(InventoryModel, InventoryModel.game_id == CartItemModel.game_id)
            .join(GameModel, GameModel.id == CartItemModel.game_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.game_id)
            .with_for_update(of=[CartItemModel, InventoryModel])
        ).all()
        return [LockedCartLine(*row) for row in rows]

    def titles_without_inventory(self, cart_id: uuid.UUID) -> list[str]:
        #pozycje bez wiersza inventory (inner join w lock_lines_with_stock je pomija)
        return list(
            self.db.execute(
                select(GameModel.title)
                .select_from(CartItemModel)
                .join(GameModel, GameModel.id == CartItemModel.game_id)
                .outerjoin(InventoryModel, InventoryModel.game_id == CartItemModel.game_id)
                .where(CartItemModel.cart_id == cart_id, InventoryModel.game_id.is_(None))
                .order_by(GameModel.title)
            ).scalars()
        )

    def delete_cart_item(self, cart_id: uuid.UUID, game_id: uuid.UUID) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.game_id == game_id,
            )
        )
        return result.rowcount

    def clear_cart_items(self, cart_id: uuid.UUID) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        return result.rowcount
