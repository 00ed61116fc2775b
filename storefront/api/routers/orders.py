# storefront/api/routers/orders.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import current_profile
from storefront.data.database import get_db
from storefront.data.models import ProfileModel
from storefront.domain.schemas import DataEnvelope, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=DataEnvelope[List[OrderOut]])
def list_orders(
    profile: ProfileModel = Depends(current_profile),
    db: Session = Depends(get_db),
):
    """Zamowienia usera, najnowsze pierwsze."""
    return {"data": OrderService(db).list_orders(profile.id)}


@router.get("/{order_id}", response_model=DataEnvelope[OrderOut])
def get_order(
    order_id: UUID,
    profile: ProfileModel = Depends(current_profile),
    db: Session = Depends(get_db),
):
    return {"data": OrderService(db).get_order(profile.id, order_id)}
