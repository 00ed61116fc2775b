#storefront/data/models/order_item.py
import uuid

from sqlalchemy import Column, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id"), nullable=False, index=True)
    game_id = Column(Uuid, ForeignKey("games.id"), nullable=False)
    qty = Column(Integer, nullable=False)
    unit_price_in_cents = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")
    game = relationship("GameModel")
