"""
Request/response shapes for the verification flows.

Every flow validates its input against one of these models before doing
anything else; model replies are validated against the output models.
"""

from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field


def _require_data_uri(value: str) -> str:
    if not value.startswith("data:") or ";base64," not in value:
        raise ValueError("must be a data URI ('data:<mimetype>;base64,<encoded_data>')")
    return value


# base64 data URI, as posted by the capture widgets
DataUri = Annotated[str, AfterValidator(_require_data_uri)]


class BeneficiaryPhoto(BaseModel):
    id: str = Field(..., min_length=1, description="Identifier of the beneficiary")
    photo_url: str = Field(..., min_length=1, description="Photo reference of the beneficiary")


# ----------------------------
# Duplicate check (registration)
# ----------------------------
class VerifyFaceInput(BaseModel):
    photo_data_uri: DataUri = Field(..., description="Photo of the person being registered")
    existing_photos: List[str] = Field(default_factory=list, description="Photos already registered")


class VerifyFaceOutput(BaseModel):
    is_duplicate: bool
    reason: str


# ----------------------------
# 1:1 face verification (vendor, by id)
# ----------------------------
class VerifyBeneficiaryFaceInput(BaseModel):
    live_photo_data_uri: DataUri
    registered_photo_url: str = Field(..., min_length=1)


class VerifyBeneficiaryFaceOutput(BaseModel):
    is_match: bool
    reason: str


# ----------------------------
# 1:N face search (vendor, no id)
# ----------------------------
class FindBeneficiaryByFaceInput(BaseModel):
    live_photo_data_uri: DataUri
    approved_beneficiaries: List[BeneficiaryPhoto] = Field(default_factory=list)


class FindBeneficiaryByFaceOutput(BaseModel):
    is_match: bool
    beneficiary_id: Optional[str] = None
    reason: str


# ----------------------------
# Description generation
# ----------------------------
class GenerateDescriptionInput(BaseModel):
    photo_data_uri: DataUri
    location: str
    age_range: str
    gender: str


class GenerateDescriptionOutput(BaseModel):
    description: str


# ----------------------------
# Voice (mocked)
# ----------------------------
class CreateVoiceProfileInput(BaseModel):
    audio_data_uri: DataUri


class CreateVoiceProfileOutput(BaseModel):
    voice_profile_id: str
    reason: str


class IdentifySpeakerInput(BaseModel):
    audio_data_uri: DataUri
    candidate_profile_ids: List[str] = Field(default_factory=list)


class IdentifySpeakerOutput(BaseModel):
    is_match: bool
    voice_profile_id: Optional[str] = None
    reason: str
