#storefront/data/models/catalog.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Table, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base

#tabele laczace n:m, zbior linkow = dokladnie ostatnio zapisany zbior
game_platforms = Table(
    "game_platforms",
    Base.metadata,
    Column("game_id", Uuid, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    Column("platform_id", Uuid, ForeignKey("platforms.id", ondelete="CASCADE"), primary_key=True),
)

game_categories = Table(
    "game_categories",
    Base.metadata,
    Column("game_id", Uuid, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class PublisherModel(Base):
    __tablename__ = "publishers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class PlatformModel(Base):
    __tablename__ = "platforms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class GameModel(Base):
    __tablename__ = "games"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    price_in_cents = Column(Integer, nullable=False)
    release_date = Column(Date, nullable=True)
    publisher_id = Column(Uuid, ForeignKey("publishers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (CheckConstraint("price_in_cents >= 0", name="ck_games_price_non_negative"),)

    inventory = relationship(
        "InventoryModel",
        uselist=False,
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
