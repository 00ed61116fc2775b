# storefront/api/routers/carts.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, sessionmaker

from storefront.api.deps import current_profile, get_session_factory
from storefront.data.database import get_db
from storefront.data.models import ProfileModel
from storefront.domain.schemas import CartItemIn, CartOut, DataEnvelope
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> CartService:
    return CartService(db, session_factory)


@router.get("", response_model=DataEnvelope[CartOut | None])
def get_cart(
    profile: ProfileModel = Depends(current_profile),
    svc: CartService = Depends(get_service),
):
    return {"data": svc.get_cart(profile.id)}


@router.post("", response_model=DataEnvelope[CartOut])
def ensure_cart(
    profile: ProfileModel = Depends(current_profile),
    svc: CartService = Depends(get_service),
):
    return {"data": svc.ensure_cart(profile.id)}


@router.post("/items", response_model=DataEnvelope[CartOut | None])
def set_item(
    payload: CartItemIn,
    profile: ProfileModel = Depends(current_profile),
    svc: CartService = Depends(get_service),
):
    return {"data": svc.set_item(profile.id, payload.game_id, payload.qty)}


@router.delete("/items/{game_id}", response_model=DataEnvelope[CartOut | None])
def remove_item(
    game_id: UUID,
    profile: ProfileModel = Depends(current_profile),
    svc: CartService = Depends(get_service),
):
    return {"data": svc.remove_item(profile.id, game_id)}


@router.delete("/items", status_code=204)
def clear_cart(
    profile: ProfileModel = Depends(current_profile),
    svc: CartService = Depends(get_service),
):
    svc.clear_cart(profile.id)
