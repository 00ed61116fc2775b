# storefront/domain/schemas.py
from datetime import date, datetime
from typing import Any, Generic, List, Literal, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from storefront.domain.errors import ValidationFailed

T = TypeVar("T")


class DataEnvelope(BaseModel, Generic[T]):
    """Kazda odpowiedz sukcesu to `{"data": ...}`."""

    data: T


def parse_payload(schema: type[BaseModel], data: Any, missing: str = "data payload required") -> BaseModel:
    """Walidacja surowego dict-a; bledy pydantic -> 400 validation_error."""
    if data is None:
        raise ValidationFailed(missing)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'data'}: {err['msg']}" for err in e.errors()
        )
        raise ValidationFailed(details)


#checkout
class CheckoutCreateIn(BaseModel):
    payment_provider: str | None = None


class CheckoutOut(BaseModel):
    order_id: UUID
    payment_intent: str
    total_in_cents: int
    payment_provider: str


class WebhookIn(BaseModel):
    """Powiadomienie od dostawcy platnosci."""

    order_id: UUID
    status: Literal["paid", "failed"]
    payment_reference: str | None = None
    provider_event: str | None = None


class WebhookOut(BaseModel):
    order_id: UUID
    status: str


#katalog
EntityKind = Literal["game", "publisher", "platform", "category"]
Operation = Literal["list", "create", "update", "delete"]


class CatalogAdminIn(BaseModel):
    entity: EntityKind
    operation: Operation
    id: UUID | None = None
    data: dict[str, Any] | None = None


class GameIn(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: str | None = None
    price_in_cents: int = Field(..., ge=0)
    release_date: date | None = None
    publisher_id: UUID | None = None
    platform_ids: List[UUID] | None = None
    category_ids: List[UUID] | None = None
    stock: int | None = Field(None, ge=0)
    is_active: bool | None = None

    def game_fields(self) -> dict[str, Any]:
        return self.model_dump(
            include={"title", "slug", "description", "price_in_cents", "release_date", "publisher_id"}
        )


class SimpleEntityIn(BaseModel):
    name: str = Field(..., min_length=1)


#koszyk
class CartItemIn(BaseModel):
    game_id: UUID
    #0 albo mniej = usun pozycje
    qty: int


class CartItemOut(BaseModel):
    id: UUID
    game_id: UUID
    title: str | None = None
    qty: int
    unit_price_in_cents: int


class CartOut(BaseModel):
    id: UUID
    user_id: UUID | None = None
    created_at: datetime
    items: List[CartItemOut]
    total_in_cents: int


#zamowienia
class OrderItemOut(BaseModel):
    id: UUID
    game_id: UUID
    title: str | None = None
    qty: int
    unit_price_in_cents: int


class OrderOut(BaseModel):
    id: UUID
    user_id: UUID
    status: str
    total_in_cents: int
    payment_ref: str | None = None
    created_at: datetime
    items: List[OrderItemOut]


#profile
class ProfileCreate(BaseModel):
    email: str | None = None
    display_name: str | None = Field(None, max_length=100)


class ProfileUpdate(BaseModel):
    email: str | None = None
    display_name: str | None = Field(None, max_length=100)


class ProfileOut(BaseModel):
    id: UUID
    external_id: str
    role: str
    display_name: str | None = None
    email: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
