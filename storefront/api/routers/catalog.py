# storefront/api/routers/catalog.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, sessionmaker

from storefront.api.deps import current_admin, get_session_factory
from storefront.data.database import get_db
from storefront.domain.schemas import CatalogAdminIn
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.post("/admin", dependencies=[Depends(current_admin)])
def catalog_admin(
    payload: CatalogAdminIn,
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Jeden endpoint na list/create/update/delete gier i slownikow.
    Tylko admin; rola sprawdzana zanim ruszy transakcja.
    """
    svc = CatalogService(db, session_factory)
    return {"data": svc.handle(payload)}
