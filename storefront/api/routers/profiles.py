# storefront/api/routers/profiles.py
from fastapi import APIRouter, Depends

from storefront.api.deps import current_profile, get_profile_service, get_subject
from storefront.data.models import ProfileModel
from storefront.domain.schemas import DataEnvelope, ProfileCreate, ProfileOut, ProfileUpdate
from storefront.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("", response_model=DataEnvelope[ProfileOut])
def provision_profile(
    payload: ProfileCreate,
    subject: str = Depends(get_subject),
    profiles: ProfileService = Depends(get_profile_service),
):
    return {"data": ProfileOut.model_validate(profiles.provision(subject, payload))}


@router.get("/me", response_model=DataEnvelope[ProfileOut])
def get_my_profile(profile: ProfileModel = Depends(current_profile)):
    return {"data": ProfileOut.model_validate(profile)}


@router.patch("/me", response_model=DataEnvelope[ProfileOut])
def update_my_profile(
    payload: ProfileUpdate,
    subject: str = Depends(get_subject),
    profiles: ProfileService = Depends(get_profile_service),
):
    return {"data": ProfileOut.model_validate(profiles.update_profile(subject, payload))}
