# storefront/repos/profile_repo.py
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models import ProfileModel


class ProfileRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, profile_id: uuid.UUID) -> ProfileModel | None:
        return self.db.get(ProfileModel, profile_id)

    def get_by_external_id(self, external_id: str) -> ProfileModel | None:
        return self.db.execute(
            select(ProfileModel).where(ProfileModel.external_id == external_id)
        ).scalar_one_or_none()

    def create_profile(self, profile: ProfileModel) -> ProfileModel:
        self.db.add(profile)
        self.db.flush()
        return profile
