# storefront/domain/errors.py
from typing import Iterable


class ServiceError(Exception):
    """
    Typowany blad biznesowy z gotowym kodem / komunikatem / statusem HTTP.

    Rzucany z wnetrza transakcji przerywa ja (rollback), a handler w api
    zamienia go na `{"error": {"code", "message"}}`.
    """

    code = "service_error"
    status_code = 400

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status={self.status_code}, message={self.message!r})"


#walidacja
class ValidationFailed(ServiceError):
    code = "validation_error"
    status_code = 400


#autoryzacja
class Unauthorized(ServiceError):
    code = "unauthorized"
    status_code = 401


class ProfileNotFound(ServiceError):
    code = "profile_not_found"
    status_code = 403

    def __init__(self, message: str = "Provision a profile before calling this endpoint."):
        super().__init__(message)


class Forbidden(ServiceError):
    code = "forbidden"
    status_code = 403

    def __init__(self, message: str = "Admin privileges required."):
        super().__init__(message)


#reguly biznesowe
class CartNotFound(ServiceError):
    code = "cart_not_found"
    status_code = 404

    def __init__(self, message: str = "Cart not found for user."):
        super().__init__(message)


class CartEmpty(ServiceError):
    code = "cart_empty"
    status_code = 400

    def __init__(self, message: str = "Cart has no items."):
        super().__init__(message)


class InsufficientStock(ServiceError):
    code = "insufficient_stock"
    status_code = 400

    def __init__(self, titles: Iterable[str]):
        #tytuly tylko jako atrybut, w odpowiedzi jest sam komunikat
        self.titles = list(titles)
        super().__init__(f"Insufficient stock for {', '.join(self.titles)}.")


class OrderNotFound(ServiceError):
    code = "order_not_found"
    status_code = 404

    def __init__(self, message: str = "Order does not exist."):
        super().__init__(message)


class GameNotFound(ServiceError):
    code = "game_not_found"
    status_code = 404

    def __init__(self, message: str = "Game does not exist."):
        super().__init__(message)


class GameInactive(ServiceError):
    code = "game_inactive"
    status_code = 400

    def __init__(self, message: str = "Game is not available for purchase."):
        super().__init__(message)


class EntityNotFound(ServiceError):
    code = "entity_not_found"
    status_code = 404
