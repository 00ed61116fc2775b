# storefront/services/order_status_service.py
import hmac
import uuid

from sqlalchemy.orm import Session, sessionmaker

from storefront.data.models.order import OrderStatus, TERMINAL_PAYMENT_STATUSES
from storefront.data.transaction import run_in_transaction
from storefront.domain.errors import OrderNotFound, Unauthorized
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENT_OUTCOMES = frozenset({OrderStatus.PAID.value, OrderStatus.FAILED.value})


def verify_webhook_secret(expected: str | None, provided: str | None) -> None:
    """Brak skonfigurowanego sekretu = brak sprawdzania."""
    if not expected:
        return
    if provided is None or not hmac.compare_digest(provided.encode(), expected.encode()):
        raise Unauthorized("Webhook secret mismatch.")


class OrderStatusService:
    """
    pending -> paid | failed, sterowane powiadomieniem od dostawcy platnosci.

    Status jest nadpisywany bezwarunkowo, wiec powtorzone powiadomienie daje
    ten sam stan koncowy. Pozycje i suma zamowienia nigdy sie nie zmieniaja.
    """

    def __init__(self, session_factory: sessionmaker | None = None):
        self.session_factory = session_factory

    def apply_payment_outcome(
        self,
        order_id: uuid.UUID,
        status: str,
        payment_reference: str | None = None,
    ) -> str:
        if status not in PAYMENT_OUTCOMES:
            raise ValueError(f"Unsupported payment outcome: {status}")

        def work(session: Session) -> str:
            repo = OrderRepo(session)
            order = repo.get_order(order_id, for_update=True)
            if not order:
                raise OrderNotFound()

            previous = order.status
            # TODO: odrzucac przejscie z paid/failed na inny stan koncowy albo wymagac numeru sekwencyjnego zdarzenia
            if previous in TERMINAL_PAYMENT_STATUSES and previous != status:
                logger.warning(f"Order {order_id} moves from terminal status {previous} to {status}")

            repo.update_order_status(order, status, payment_reference)
            logger.info(f"Order {order_id}: {previous} -> {status} (payment_ref={order.payment_ref})")
            return order.status

        return run_in_transaction(work, session_factory=self.session_factory)
