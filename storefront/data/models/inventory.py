#storefront/data/models/inventory.py
from sqlalchemy import Column, Integer, Boolean, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class InventoryModel(Base):
    __tablename__ = "inventory"

    #1:1 z grą
    game_id = Column(Uuid, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    # stan nigdy ponizej zera, ostatnia linia obrony pod checkoutem
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),)

    game = relationship("GameModel", back_populates="inventory")
