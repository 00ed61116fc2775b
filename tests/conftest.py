import base64
import json
import os

# przed importem storefront - nie chcemy laczyc sie z postgresem z .env
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CHECKOUT_WEBHOOK_SECRET"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from storefront.api import create_app
from storefront.api.deps import get_session_factory
from storefront.data.database import Base, build_engine, get_db
from storefront.data.models import (
    CartItemModel,
    CartModel,
    GameModel,
    InventoryModel,
    ProfileModel,
)
from storefront.data.models.profile import ROLE_ADMIN, ROLE_USER


def make_token(subject: str, **claims) -> str:
    def _b64(obj) -> str:
        raw = json.dumps(obj).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    payload = {"sub": subject, **claims} if subject else claims
    return f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64(payload)}.signature"


def auth(subject: str) -> dict:
    return {"Authorization": f"Bearer {make_token(subject)}"}


class StoreFactory:
    """Zapis danych testowych bezposrednio do bazy, z pominieciem serwisow."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def profile(self, external_id: str = "user-1", role: str = ROLE_USER) -> ProfileModel:
        with self.session_factory() as s:
            profile = ProfileModel(external_id=external_id, role=role)
            s.add(profile)
            s.commit()
            return profile

    def admin(self, external_id: str = "admin-1") -> ProfileModel:
        return self.profile(external_id, role=ROLE_ADMIN)

    def game(
        self,
        title: str = "Elden Ring",
        price_in_cents: int = 1000,
        stock: int | None = 5,
        is_active: bool = True,
        slug: str | None = None,
    ) -> GameModel:
        with self.session_factory() as s:
            game = GameModel(
                title=title,
                slug=slug or title.lower().replace(" ", "-"),
                price_in_cents=price_in_cents,
            )
            s.add(game)
            s.flush()
            if stock is not None:
                s.add(InventoryModel(game_id=game.id, stock=stock, is_active=is_active))
            s.commit()
            return game

    def cart(self, profile: ProfileModel, lines=()) -> CartModel:
        """lines: (game, qty) albo (game, qty, unit_price_in_cents)"""
        with self.session_factory() as s:
            cart = CartModel(user_id=profile.id)
            s.add(cart)
            s.flush()
            for line in lines:
                game, qty = line[0], line[1]
                price = line[2] if len(line) > 2 else game.price_in_cents
                s.add(CartItemModel(cart_id=cart.id, game_id=game.id, qty=qty, unit_price_in_cents=price))
            s.commit()
            return cart

    def set_price(self, game: GameModel, price_in_cents: int) -> None:
        with self.session_factory() as s:
            s.get(GameModel, game.id).price_in_cents = price_in_cents
            s.commit()

    def stock_of(self, game: GameModel) -> int:
        with self.session_factory() as s:
            return s.get(InventoryModel, game.id).stock

    def count(self, model, *where) -> int:
        with self.session_factory() as s:
            stmt = select(func.count()).select_from(model)
            if where:
                stmt = stmt.where(*where)
            return s.execute(stmt).scalar_one()


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return StoreFactory(session_factory)


@pytest.fixture
def app(session_factory):
    app = create_app()

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
