from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from pydantic import ValidationError

from flows import verify_beneficiary_face, find_beneficiary_by_face, identify_speaker
from models.beneficiary import Beneficiary, APPROVED
from utils.auth import role_required
from utils.errors import JanSetuError, VerificationError, describe_error
from utils.media import read_media, normalize_photo, to_data_uri

vendor_bp = Blueprint("vendor", __name__, url_prefix="/vendor")


def _render_scan(status="idle", message="", mode="idle", beneficiary_id=""):
    return render_template("vendor/scan.html",
                           verification={"status": status, "message": message, "mode": mode},
                           beneficiary_id=beneficiary_id)


def _redirect_to_beneficiary(beneficiary, how):
    flash(f"{how} Verification Successful! Showing beneficiary {beneficiary['jansetu_id']}.", "success")
    return redirect(url_for("public.beneficiary",
                            beneficiary_id=str(beneficiary["_id"]),
                            ngoId=str(beneficiary["ngo_id"])))


def _live_photo():
    raw = read_media(request.form.get("photo_data_uri"), request.files.get("photo"))
    if not raw:
        raise VerificationError("Please capture a photo.")
    # Re-encode so the declared media type always matches the bytes
    return to_data_uri(normalize_photo(raw))


def find_approved_beneficiary(jansetu_id):
    """Approved beneficiary by human-readable id, searched across every NGO."""
    beneficiary = Beneficiary.find_by_jansetu_id(jansetu_id)
    if not beneficiary:
        raise VerificationError("Beneficiary not found or is not approved.")
    if beneficiary["status"] != APPROVED:
        raise VerificationError("Beneficiary found but is not approved.")
    return beneficiary


@vendor_bp.route("/scan")
@role_required("vendor")
def scan():
    return _render_scan()


# -------------------------------------------------------------
# FACE: ID + live photo (1:1)
# -------------------------------------------------------------
@vendor_bp.route("/verify/face", methods=["POST"])
@role_required("vendor")
def verify_face_by_id():
    jansetu_id = (request.form.get("beneficiary_id") or "").strip()
    try:
        if not jansetu_id:
            raise VerificationError("Please capture a photo and enter a Beneficiary ID.")
        live_photo = _live_photo()

        beneficiary = find_approved_beneficiary(jansetu_id)
        result = verify_beneficiary_face({
            "live_photo_data_uri": live_photo,
            "registered_photo_url": beneficiary.get("photo_url") or "",
        })
        if not result.is_match:
            raise VerificationError(result.reason or "Live photo does not match the registered beneficiary.")

    except (JanSetuError, ValidationError) as e:
        current_app.logger.info("Face verification for %s failed: %s", jansetu_id or "-", e)
        return _render_scan("error", describe_error(e), "face", jansetu_id)

    return _redirect_to_beneficiary(beneficiary, "Face")


# -------------------------------------------------------------
# FACE: live photo only (1:N across approved beneficiaries)
# -------------------------------------------------------------
@vendor_bp.route("/verify/search", methods=["POST"])
@role_required("vendor")
def verify_face_search():
    try:
        live_photo = _live_photo()
        approved = {b["jansetu_id"]: b for b in Beneficiary.approved() if b.get("photo_url")}

        result = find_beneficiary_by_face({
            "live_photo_data_uri": live_photo,
            "approved_beneficiaries": [
                {"id": jansetu_id, "photo_url": b["photo_url"]} for jansetu_id, b in approved.items()
            ],
        })
        if not result.is_match:
            raise VerificationError(result.reason or "No matching beneficiary found.")

    except (JanSetuError, ValidationError) as e:
        current_app.logger.info("Face search failed: %s", e)
        return _render_scan("error", describe_error(e), "face")

    return _redirect_to_beneficiary(approved[result.beneficiary_id], "Face")


# -------------------------------------------------------------
# VOICE (mock speaker identification)
# -------------------------------------------------------------
@vendor_bp.route("/verify/voice", methods=["POST"])
@role_required("vendor")
def verify_voice():
    try:
        raw = read_media(request.form.get("audio_data_uri"), request.files.get("audio"))
        if not raw:
            raise VerificationError("Please record a voice sample.")

        approved = [b for b in Beneficiary.approved() if b.get("voice_profile_id")]
        if not approved:
            raise VerificationError("No enrolled voice profiles found in the system.")

        result = identify_speaker({
            "audio_data_uri": to_data_uri(raw, request.form.get("audio_mime_type") or "audio/wav"),
            "candidate_profile_ids": [b["voice_profile_id"] for b in approved],
        })
        if not (result.is_match and result.voice_profile_id):
            raise VerificationError(result.reason or "Could not identify speaker from voice.")

        matched = next((b for b in approved if b["voice_profile_id"] == result.voice_profile_id), None)
        if not matched:
            raise VerificationError("Match found but could not link to a beneficiary.")

    except (JanSetuError, ValidationError) as e:
        current_app.logger.info("Voice verification failed: %s", e)
        return _render_scan("error", describe_error(e), "voice")

    return _redirect_to_beneficiary(matched, "Voice")
