#storefront/data/models/cart_item.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    cart_id = Column(Uuid, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    game_id = Column(Uuid, ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    qty = Column(Integer, nullable=False)
    #cena zamrozona w momencie dodania do koszyka
    unit_price_in_cents = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("cart_id", "game_id", name="u_cart_game"),
        CheckConstraint("qty >= 1", name="ck_cart_items_qty_positive"),
    )

    cart = relationship("CartModel", back_populates="items")
    game = relationship("GameModel")
