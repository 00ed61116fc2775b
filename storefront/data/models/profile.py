#storefront/data/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Uuid

from storefront.data.database import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    #subject z tokenu (zewnetrzny dostawca tozsamosci)
    external_id = Column(String, nullable=False, unique=True, index=True)
    role = Column(String(16), nullable=False, default=ROLE_USER)
    display_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
