# storefront/services/cart_service.py
import uuid
from typing import Dict, Any

from sqlalchemy.orm import Session, sessionmaker

from storefront.data.models import CartModel, CartItemModel
from storefront.data.transaction import run_in_transaction
from storefront.domain.errors import GameNotFound, GameInactive
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def cart_to_dict(cart: CartModel, items: list[CartItemModel]) -> Dict[str, Any]:
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "created_at": cart.created_at,
        "items": [
            {
                "id": i.id,
                "game_id": i.game_id,
                "title": i.game.title if i.game else None,
                "qty": i.qty,
                "unit_price_in_cents": i.unit_price_in_cents,
            }
            for i in items
        ],
        "total_in_cents": sum(i.unit_price_in_cents * i.qty for i in items),
    }


class CartService:
    """
    Koszyk po stronie serwera.
    query (get) tylko odczyt, commands (set / remove / clear) w transakcji.
    "Aktualny" koszyk usera to zawsze najnowszy wiersz carts.
    """

    def __init__(self, db: Session, session_factory: sessionmaker | None = None):
        self.db = db
        self.repo = CartRepo(db)
        self.session_factory = session_factory

    #query
    def get_cart(self, user_id: uuid.UUID) -> Dict[str, Any] | None:
        cart = self.repo.get_current_cart(user_id)
        if not cart:
            return None
        return cart_to_dict(cart, self.repo.get_cart_items(cart.id))

    #commands
    def ensure_cart(self, user_id: uuid.UUID) -> Dict[str, Any]:
        def work(session: Session) -> Dict[str, Any]:
            repo = CartRepo(session)
            cart = self._current_or_new(repo, user_id)
            return cart_to_dict(cart, repo.get_cart_items(cart.id))

        return run_in_transaction(work, session_factory=self.session_factory)

    def set_item(self, user_id: uuid.UUID, game_id: uuid.UUID, qty: int) -> Dict[str, Any] | None:
        if qty <= 0:
            return self.remove_item(user_id, game_id)

        def work(session: Session) -> Dict[str, Any]:
            repo = CartRepo(session)
            catalog = CatalogRepo(session)

            game = catalog.get_game(game_id)
            if not game:
                raise GameNotFound()

            inventory = catalog.get_inventory(game_id)
            if inventory is not None and not inventory.is_active:
                raise GameInactive()

            cart = self._current_or_new(repo, user_id)

            #cena lapana teraz i zamrozona do checkoutu
            existing = repo.get_cart_item(cart.id, game_id)
            if existing:
                logger.info(
                    f"Game {game_id} already in cart {cart.id}, qty {existing.qty} -> {qty}"
                )
                existing.qty = qty
                existing.unit_price_in_cents = game.price_in_cents
                session.flush()
            else:
                logger.info(f"Adding game {game_id} x{qty} to cart {cart.id} at {game.price_in_cents}")
                repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        game_id=game_id,
                        qty=qty,
                        unit_price_in_cents=game.price_in_cents,
                    )
                )

            return cart_to_dict(cart, repo.get_cart_items(cart.id))

        return run_in_transaction(work, session_factory=self.session_factory)

    def remove_item(self, user_id: uuid.UUID, game_id: uuid.UUID) -> Dict[str, Any] | None:
        def work(session: Session) -> Dict[str, Any] | None:
            repo = CartRepo(session)
            #bez koszyka nie ma czego usuwac, nie zakladamy nowego
            cart = repo.get_current_cart(user_id, for_update=True)
            if not cart:
                return None
            if repo.delete_cart_item(cart.id, game_id):
                logger.info(f"Game {game_id} removed from cart {cart.id}")
            session.expire_all()
            return cart_to_dict(cart, repo.get_cart_items(cart.id))

        return run_in_transaction(work, session_factory=self.session_factory)

    def clear_cart(self, user_id: uuid.UUID) -> None:
        def work(session: Session) -> int:
            repo = CartRepo(session)
            cart = repo.get_current_cart(user_id, for_update=True)
            if not cart:
                return 0
            return repo.clear_cart_items(cart.id)

        removed = run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"Cleared {removed} items from current cart of user {user_id}")

    def _current_or_new(self, repo: CartRepo, user_id: uuid.UUID) -> CartModel:
        cart = repo.get_current_cart(user_id, for_update=True)
        if cart:
            return cart

        created = repo.create_cart(CartModel(user_id=user_id))
        logger.info(f"Created new cart {created.id} for user {user_id}")
        return created
