# storefront/services/checkout_service.py
import secrets
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from storefront.data.models import OrderModel, OrderItemModel, OrderStatus
from storefront.data.transaction import run_in_transaction
from storefront.domain.errors import CartNotFound, CartEmpty, InsufficientStock
from storefront.repos.cart_repo import CartRepo, LockedCartLine
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import DEFAULT_PAYMENT_PROVIDER, PAYMENT_INTENT_PREFIX
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_id: uuid.UUID
    payment_intent: str
    total_in_cents: int
    payment_provider: str


def new_payment_intent() -> str:
    # dostawca platnosci jest zewnetrzny, wystarczy unikalny losowy token
    return f"{PAYMENT_INTENT_PREFIX}{secrets.token_hex(16)}"


def order_total(lines: list[LockedCartLine]) -> int:
    #ceny z koszyka, nie z katalogu - zamrozone przy dodaniu
    return sum(line.unit_price_in_cents * line.qty for line in lines)


class CheckoutService:
    """
    Zamiana aktualnego koszyka usera na zamowienie.

    Wszystko w jednej transakcji SERIALIZABLE:
    lock koszyka -> lock pozycji + inventory -> walidacja stanu (wszystko albo nic)
    -> order + order_items -> dekrementacja stanu -> czyszczenie koszyka.

    Dwa rownolegle checkouty na tych samych wierszach inventory sa
    uszeregowane przez row locki; drugi widzi juz zmniejszony stan.
    """

    def __init__(self, session_factory: sessionmaker | None = None):
        self.session_factory = session_factory

    def checkout(self, user_id: uuid.UUID, payment_provider: str | None = None) -> CheckoutResult:
        provider = payment_provider or DEFAULT_PAYMENT_PROVIDER

        def work(session: Session) -> CheckoutResult:
            return self._checkout(session, user_id, provider)

        result = run_in_transaction(work, session_factory=self.session_factory)

        logger.info(
            f"Checkout done for user {user_id}: order {result.order_id}, "
            f"total {result.total_in_cents}, intent {result.payment_intent}"
        )
        return result

    def _checkout(self, session: Session, user_id: uuid.UUID, provider: str) -> CheckoutResult:
        carts = CartRepo(session)
        catalog = CatalogRepo(session)
        orders = OrderRepo(session)

        # 1. najnowszy koszyk usera, FOR UPDATE
        cart = carts.get_current_cart(user_id, for_update=True)
        if not cart:
            raise CartNotFound()

        # 2. pozycje + stan magazynu, FOR UPDATE OF cart_items, inventory
        lines = carts.lock_lines_with_stock(cart.id)
        missing_inventory = carts.titles_without_inventory(cart.id)
        if not lines and not missing_inventory:
            raise CartEmpty()

        # 3. wszystko albo nic
        insufficient = [line.title for line in lines if line.stock < line.qty]
        insufficient.extend(missing_inventory)
        if insufficient:
            logger.warning(f"Checkout rejected for cart {cart.id}: insufficient stock for {insufficient}")
            raise InsufficientStock(insufficient)

        # 4-5.
        total = order_total(lines)
        payment_intent = new_payment_intent()

        # 6-7.
        order = orders.create_order(
            OrderModel(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_in_cents=total,
                payment_ref=payment_intent,
            ),
            [
                OrderItemModel(
                    game_id=line.game_id,
                    qty=line.qty,
                    unit_price_in_cents=line.unit_price_in_cents,
                )
                for line in lines
            ],
        )

        # 8. UPDATE z warunkiem stock >= qty; 0 wierszy = stan zmienil sie od kroku 2
        for line in lines:
            if catalog.decrement_stock(line.game_id, line.qty) == 0:
                logger.warning(f"Stock of game {line.game_id} dropped below {line.qty} after lock")
                raise InsufficientStock([line.title])
            logger.info(f"Stock of game {line.game_id} decremented by {line.qty} (was {line.stock})")

        # 9. koszyk zostaje, pozycje znikaja
        removed = carts.clear_cart_items(cart.id)
        logger.info(f"Cart {cart.id} emptied ({removed} items) by order {order.id}")

        return CheckoutResult(
            order_id=order.id,
            payment_intent=payment_intent,
            total_in_cents=total,
            payment_provider=provider,
        )
