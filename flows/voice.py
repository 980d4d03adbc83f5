"""
Voice flows. Both are mocks: enrollment hands out a random profile id and
identification picks the first candidate. A real speaker-recognition
service would replace the bodies, not the signatures.
"""

import logging
import secrets
import string

from flows.schemas import (
    CreateVoiceProfileInput,
    CreateVoiceProfileOutput,
    IdentifySpeakerInput,
    IdentifySpeakerOutput,
)

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "vp_"
PROFILE_ALPHABET = string.digits + string.ascii_lowercase


def create_voice_profile(payload):
    CreateVoiceProfileInput.model_validate(payload)
    profile_id = PROFILE_PREFIX + "".join(secrets.choice(PROFILE_ALPHABET) for _ in range(9))
    logger.info("Mock voice profile created: %s", profile_id)
    return CreateVoiceProfileOutput(
        voice_profile_id=profile_id,
        reason="Mock voice profile created successfully.",
    )


def identify_speaker(payload):
    data = IdentifySpeakerInput.model_validate(payload)

    if not data.candidate_profile_ids:
        return IdentifySpeakerOutput(
            is_match=False,
            reason="No candidate profiles were provided to compare against.",
        )

    matched = data.candidate_profile_ids[0]
    logger.info("Mock speaker identification picked %s of %d candidates",
                matched, len(data.candidate_profile_ids))
    return IdentifySpeakerOutput(
        is_match=True,
        voice_profile_id=matched,
        reason=f"Mock identification: Confident match found for profile {matched}.",
    )
