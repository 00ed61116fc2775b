# storefront/services/profile_service.py
from sqlalchemy.orm import Session, sessionmaker

from storefront.data.models import ProfileModel
from storefront.data.models.profile import ROLE_USER
from storefront.data.transaction import run_in_transaction
from storefront.domain.errors import ProfileNotFound, Forbidden
from storefront.domain.schemas import ProfileCreate, ProfileUpdate
from storefront.repos.profile_repo import ProfileRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProfileService:
    """
    Mapowanie subject z tokenu -> wewnetrzny profil + sprawdzanie roli.
    Sprawdzenia robimy zanim otworzy sie jakakolwiek transakcja zapisu.
    """

    def __init__(self, db: Session, session_factory: sessionmaker | None = None):
        self.db = db
        self.repo = ProfileRepo(db)
        self.session_factory = session_factory

    def find_profile(self, external_id: str) -> ProfileModel | None:
        return self.repo.get_by_external_id(external_id)

    def require_profile(self, external_id: str) -> ProfileModel:
        profile = self.find_profile(external_id)
        if not profile:
            logger.warning(f"No profile provisioned for subject {external_id}")
            raise ProfileNotFound()
        return profile

    def require_admin(self, external_id: str) -> ProfileModel:
        profile = self.require_profile(external_id)
        if not profile.is_admin:
            logger.warning(f"Profile {profile.id} tried an admin operation with role {profile.role}")
            raise Forbidden()
        return profile

    def provision(self, external_id: str, payload: ProfileCreate) -> ProfileModel:
        #idempotentne - istniejacy profil zwracamy bez zmian
        existing = self.find_profile(external_id)
        if existing:
            return existing

        def work(session: Session) -> ProfileModel:
            repo = ProfileRepo(session)
            found = repo.get_by_external_id(external_id)
            if found:
                return found
            return repo.create_profile(
                ProfileModel(
                    external_id=external_id,
                    role=ROLE_USER,
                    email=payload.email,
                    display_name=payload.display_name,
                )
            )

        profile = run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"Provisioned profile {profile.id} for subject {external_id}")
        return profile

    def update_profile(self, external_id: str, payload: ProfileUpdate) -> ProfileModel:
        profile_id = self.require_profile(external_id).id
        changes = payload.model_dump(exclude_unset=True)

        def work(session: Session) -> ProfileModel:
            profile = ProfileRepo(session).get_profile(profile_id)
            if profile is None:
                raise ProfileNotFound()
            for field, value in changes.items():
                setattr(profile, field, value)
            session.flush()
            return profile

        return run_in_transaction(work, session_factory=self.session_factory)
