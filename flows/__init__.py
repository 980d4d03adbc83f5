# flows/__init__.py

from .face import verify_face, verify_beneficiary_face, find_beneficiary_by_face
from .description import generate_beneficiary_description
from .voice import create_voice_profile, identify_speaker

__all__ = [
    "verify_face",
    "verify_beneficiary_face",
    "find_beneficiary_by_face",
    "generate_beneficiary_description",
    "create_voice_profile",
    "identify_speaker"
]
