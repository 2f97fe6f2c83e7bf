"""
Profile schemas for request/response validation.

Creation payloads form a discriminated union on `kind`, so a payload is
validated against exactly one variant and the variant never has to be
guessed from its fields.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, HttpUrl

from fitsocial.models.user import UserKind

# Individual


class PersonalRecord(BaseModel):
    exercise_name: str = Field(..., max_length=100)
    subtitle: str = Field("", max_length=200)
    achieved_on: Optional[date] = None


class IndividualStats(BaseModel):
    height: float = Field(..., gt=0, description="Height in cm")
    weight: float = Field(..., gt=0, description="Weight in kg")
    body_fat: Optional[float] = Field(None, ge=0, le=100)
    personal_records: List[PersonalRecord] = Field(default_factory=list)


class Experience(BaseModel):
    title: str = Field(..., max_length=200)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[HttpUrl] = None
    start_date: date
    end_date: Optional[date] = None
    is_current: bool = False


class Certification(BaseModel):
    title: str = Field(..., max_length=200)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[HttpUrl] = None
    issue_date: date
    expiry_date: Optional[date] = None
    credential_id: Optional[str] = None
    is_active: bool = True


class SocialLinks(BaseModel):
    instagram: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None


class IndividualProfileCreate(BaseModel):
    kind: Literal["individual"] = "individual"
    stats: Optional[IndividualStats] = None
    experiences: Optional[List[Experience]] = None
    certifications: Optional[List[Certification]] = None
    affiliation: Optional[str] = Field(None, max_length=255)
    social_links: Optional[SocialLinks] = None
    is_training_enabled: bool = False
    training_price: Optional[float] = Field(None, ge=0, description="None means free")


# Gym


class GymBusinessInfo(BaseModel):
    address: Optional[Dict[str, Any]] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    operating_hours: Optional[Dict[str, Any]] = None


class MembershipPlan(BaseModel):
    name: str
    price: float = Field(..., ge=0)
    duration: str = Field(..., description="e.g. monthly, yearly")
    features: List[str] = Field(default_factory=list)


class GymProfileCreate(BaseModel):
    kind: Literal["gym"] = "gym"
    business_info: Optional[GymBusinessInfo] = None
    amenities: Optional[List[str]] = None
    membership_plans: Optional[List[MembershipPlan]] = None
    stats: Optional[Dict[str, Any]] = None
    verification: Optional[Dict[str, Any]] = None


# Brand


class BrandBusinessInfo(BaseModel):
    industry: Optional[str] = None
    website: Optional[str] = None
    headquarters: Optional[str] = None
    contact_info: Optional[Dict[str, Any]] = None


class BrandProfileCreate(BaseModel):
    kind: Literal["brand"] = "brand"
    business_info: Optional[BrandBusinessInfo] = None
    partnerships: Optional[List[Dict[str, Any]]] = None
    campaigns: Optional[List[Dict[str, Any]]] = None
    verification: Optional[Dict[str, Any]] = None


ProfileCreateRequest = Annotated[
    Union[IndividualProfileCreate, GymProfileCreate, BrandProfileCreate],
    Field(discriminator="kind"),
]


def profile_payload(request: BaseModel) -> Dict[str, Any]:
    """Profile fields of a creation request as JSON-ready values."""
    return request.model_dump(mode="json", exclude={"kind"}, exclude_none=True)


class ProfileCreatedResponse(BaseModel):
    profile_id: int
    kind: str


# Responses


class ProfileBase(BaseModel):
    id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IndividualProfileResponse(ProfileBase):
    kind: Literal["individual"] = "individual"
    stats: Optional[Dict[str, Any]] = None
    experiences: Optional[List[Dict[str, Any]]] = None
    certifications: Optional[List[Dict[str, Any]]] = None
    affiliation: Optional[str] = None
    social_links: Optional[Dict[str, Any]] = None
    is_training_enabled: bool = False
    training_price: Optional[float] = None
    activity_score: int = 0
    last_activity_update: Optional[datetime] = None


class GymProfileResponse(ProfileBase):
    kind: Literal["gym"] = "gym"
    business_info: Optional[Dict[str, Any]] = None
    amenities: Optional[List[str]] = None
    membership_plans: Optional[List[Dict[str, Any]]] = None
    stats: Optional[Dict[str, Any]] = None
    verification: Optional[Dict[str, Any]] = None


class BrandProfileResponse(ProfileBase):
    kind: Literal["brand"] = "brand"
    business_info: Optional[Dict[str, Any]] = None
    partnerships: Optional[List[Dict[str, Any]]] = None
    campaigns: Optional[List[Dict[str, Any]]] = None
    verification: Optional[Dict[str, Any]] = None


ProfileResponse = Union[IndividualProfileResponse, GymProfileResponse, BrandProfileResponse]

PROFILE_RESPONSES = {
    "individual": IndividualProfileResponse,
    "gym": GymProfileResponse,
    "brand": BrandProfileResponse,
}


def serialize_profile(kind: Optional[str], profile: Any) -> Optional[BaseModel]:
    """Render a profile row with the response model its owner's kind names."""
    if profile is None or kind is None:
        return None
    return PROFILE_RESPONSES[UserKind(kind).value].model_validate(profile)


class TrainerResponse(BaseModel):
    user: Dict[str, Any]
    profile: IndividualProfileResponse
