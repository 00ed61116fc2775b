# storefront/api/deps.py
from fastapi import Depends, Header
from sqlalchemy.orm import Session, sessionmaker

from storefront.data import database
from storefront.data.database import get_db
from storefront.data.models import ProfileModel
from storefront.services.profile_service import ProfileService
from storefront.utils.jwt import subject_from_header


def get_session_factory() -> sessionmaker:
    return database.SessionLocal


def get_subject(authorization: str | None = Header(None)) -> str:
    return subject_from_header(authorization)


def get_profile_service(
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> ProfileService:
    return ProfileService(db, session_factory)


def current_profile(
    subject: str = Depends(get_subject),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileModel:
    return profiles.require_profile(subject)


def current_admin(
    subject: str = Depends(get_subject),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileModel:
    return profiles.require_admin(subject)
