"""
Face flows. Matching is delegated entirely to the external model; an
empty comparison set short-circuits to "no match" without calling it.
Candidate photos that cannot be resolved (a stored file gone missing)
are left out of the comparison.
"""

import logging

from flows import client
from flows.schemas import (
    FindBeneficiaryByFaceInput,
    FindBeneficiaryByFaceOutput,
    VerifyBeneficiaryFaceInput,
    VerifyBeneficiaryFaceOutput,
    VerifyFaceInput,
    VerifyFaceOutput,
)
from utils.media import photo_available

logger = logging.getLogger(__name__)

DUPLICATE_PROMPT = """You are a facial recognition system checking a registration for duplicates.

Decide whether the person in the "Verification Photo" also appears in any of the "Existing Photos" above.
Rules:
1. Use only the images in this request. Do not rely on anything from earlier requests.
2. Compare the verification face against each existing photo.
3. If there is a strong match, set "is_duplicate" to true and say which photo matched.
4. If the person does not appear in the existing photos, set "is_duplicate" to false.
5. If there are no existing photos, set "is_duplicate" to false."""

VERIFY_PROMPT = """You are a facial recognition system for identity verification.

Decide whether the "Live Photo" shows the same person as the "Registered Photo".
- If you are confident it is the same person, set "is_match" to true.
- If it is clearly a different person, set "is_match" to false.
- Allow for differences in lighting, angle and expression; what matters is identity."""

SEARCH_PROMPT = """You are a facial recognition system for a benefits distribution program.

Decide whether the person in the "Live Photo" is one of the approved beneficiaries shown above.
- Compare the live face against every approved beneficiary photo.
- On a clear match, set "is_match" to true and "beneficiary_id" to the ID of the single best match.
- Without a confident match, set "is_match" to false and leave "beneficiary_id" null.
- Be precise: failing a verification is better than approving the wrong person."""


def _usable(photo_ref, owner=None):
    if photo_available(photo_ref):
        return True
    logger.warning("Skipping unavailable photo %r (%s)", photo_ref, owner or "existing photo")
    return False


def verify_face(payload):
    """Check a new registration photo against existing photos for duplicates."""
    data = VerifyFaceInput.model_validate(payload)
    existing_photos = [ref for ref in data.existing_photos if _usable(ref)]

    if not existing_photos:
        logger.info("Duplicate check skipped: no existing photos")
        return VerifyFaceOutput(
            is_duplicate=False,
            reason="No existing photos to compare against. This is a new individual.",
        )

    images = [("Verification Photo:", data.photo_data_uri)]
    images += [(f"Existing Photo {i}:", ref) for i, ref in enumerate(existing_photos, start=1)]
    return client.run_prompt(DUPLICATE_PROMPT, images, VerifyFaceOutput, label="verify_face")


def verify_beneficiary_face(payload):
    """1:1 comparison of a live photo with one registered photo."""
    data = VerifyBeneficiaryFaceInput.model_validate(payload)
    images = [
        ("Live Photo:", data.live_photo_data_uri),
        ("Registered Photo:", data.registered_photo_url),
    ]
    return client.run_prompt(VERIFY_PROMPT, images, VerifyBeneficiaryFaceOutput,
                             label="verify_beneficiary_face")


def find_beneficiary_by_face(payload):
    """1:N search of a live photo across approved beneficiaries."""
    data = FindBeneficiaryByFaceInput.model_validate(payload)
    candidates = [b for b in data.approved_beneficiaries if _usable(b.photo_url, b.id)]

    if not candidates:
        logger.info("Face search skipped: no approved beneficiaries")
        return FindBeneficiaryByFaceOutput(
            is_match=False,
            reason="No approved beneficiaries were provided to compare against.",
        )

    images = [("Live Photo:", data.live_photo_data_uri)]
    images += [(f"Approved Beneficiary ID: {b.id}", b.photo_url) for b in candidates]
    result = client.run_prompt(SEARCH_PROMPT, images, FindBeneficiaryByFaceOutput,
                               label="find_beneficiary_by_face")

    candidate_ids = {b.id for b in candidates}
    if not result.is_match:
        return result.model_copy(update={"beneficiary_id": None})
    if result.beneficiary_id not in candidate_ids:
        logger.warning("Face search returned unknown id %r", result.beneficiary_id)
        return FindBeneficiaryByFaceOutput(
            is_match=False,
            reason="The verification service did not identify a listed beneficiary.",
        )
    return result
