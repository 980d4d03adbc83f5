from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, current_app
from pydantic import ValidationError

from flows import verify_face, create_voice_profile, generate_beneficiary_description
from models.beneficiary import Beneficiary, AGE_RANGES, GENDERS
from models.ngo import NGO
from utils.auth import role_required, current_user
from utils.errors import JanSetuError, DuplicateBeneficiaryError, describe_error
from utils.media import read_media, normalize_photo, to_data_uri, save_photo, delete_photo

ngo_bp = Blueprint("ngo", __name__, url_prefix="/ngo")

MIN_DESCRIPTION_LENGTH = 10


# -------------------------------------------------------------
# DASHBOARD
# -------------------------------------------------------------
@ngo_bp.route("/dashboard")
@role_required("ngo")
def dashboard():
    user = current_user()
    stats = {"my_registrations": 0, "pending_approval": 0, "total_approved": 0}
    if user.get("ngo_id"):
        stats = Beneficiary.worker_stats(user["ngo_id"], user["_id"])
    else:
        flash("You are not assigned to any NGO.", "warning")

    return render_template("ngo/index.html", user=user, stats=stats)


# -------------------------------------------------------------
# MY REGISTRATIONS
# -------------------------------------------------------------
@ngo_bp.route("/my-registrations")
@role_required("ngo")
def my_registrations():
    user = current_user()
    if not user.get("ngo_id"):
        flash("You are not assigned to any NGO.", "warning")
        return render_template("ngo/viewRegistrations.html", beneficiaries=[])

    beneficiaries = Beneficiary.for_worker(user["ngo_id"], user["_id"])
    return render_template("ngo/viewRegistrations.html", beneficiaries=beneficiaries)


# -------------------------------------------------------------
# REGISTER BENEFICIARY
# -------------------------------------------------------------
def _render_register_form(form=None):
    return render_template("ngo/registerBeneficiary.html", form=form or {},
                           age_ranges=AGE_RANGES, genders=GENDERS)


def _validate_registration(form, photo_raw):
    if not form.get("name"):
        return "Beneficiary name is required."
    if len((form.get("description") or "").strip()) < MIN_DESCRIPTION_LENGTH:
        return f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters long."
    if form.get("age_range") not in AGE_RANGES:
        return "Please select an age range."
    if form.get("gender") not in GENDERS:
        return "You need to select a gender."
    if not form.get("location"):
        return "Please capture the GPS location."
    if not photo_raw:
        return "A photo of the beneficiary is required."
    return None


def _rollback(saved, stored_photo):
    delete_photo(stored_photo)
    if saved:
        Beneficiary.discard(saved["_id"])


@ngo_bp.route("/register", methods=["GET", "POST"])
@role_required("ngo")
def register():
    user = current_user()
    if not user.get("ngo_id") or not NGO.find_by_id(user["ngo_id"]):
        flash("You are not assigned to any NGO.", "danger")
        return redirect(url_for("ngo.dashboard"))

    if request.method == "GET":
        return _render_register_form()

    form = request.form
    saved = stored_photo = None
    try:
        photo_raw = read_media(form.get("photo_data_uri"), request.files.get("photo"))
        problem = _validate_registration(form, photo_raw)
        if problem:
            flash(problem, "warning")
            return _render_register_form(form)

        photo_jpeg = normalize_photo(photo_raw)

        # Duplicate check against every photo already registered in this NGO
        duplicate = verify_face({
            "photo_data_uri": to_data_uri(photo_jpeg),
            "existing_photos": Beneficiary.photos_for_ngo(user["ngo_id"]),
        })
        if duplicate.is_duplicate:
            raise DuplicateBeneficiaryError(f"Possible duplicate registration: {duplicate.reason}")

        voice_profile_id = None
        if form.get("voice_data_uri"):
            voice_profile_id = create_voice_profile({"audio_data_uri": form["voice_data_uri"]}).voice_profile_id

        # Insert first so the JanSetu id is reserved before its photo file is named
        saved = Beneficiary(
            ngo_id=user["ngo_id"],
            name=form["name"].strip(),
            description=form["description"].strip(),
            photo_url=None,
            location=form["location"].strip(),
            age_range=form["age_range"],
            gender=form["gender"],
            registered_by=user["name"],
            registration_worker_id=user["_id"],
            voice_profile_id=voice_profile_id,
        ).save()
        jansetu_id = saved["jansetu_id"]
        stored_photo = save_photo(photo_jpeg, jansetu_id)
        Beneficiary.attach_photo(saved["_id"], stored_photo)

    except (JanSetuError, ValidationError) as e:
        _rollback(saved, stored_photo)
        current_app.logger.warning("Registration by %s failed: %s", user["email"], e)
        flash(describe_error(e), "danger")
        return _render_register_form(form)
    except Exception as e:
        _rollback(saved, stored_photo)
        current_app.logger.exception("Registration by %s failed", user["email"])
        flash(f"Error registering beneficiary: {e}", "danger")
        return _render_register_form(form)

    flash(f"Registration {jansetu_id} submitted! It is now pending supervisor approval.", "success")
    return redirect(url_for("ngo.my_registrations"))


# -------------------------------------------------------------
# AI DESCRIPTION (called from the register form)
# -------------------------------------------------------------
@ngo_bp.route("/register/describe", methods=["POST"])
@role_required("ngo")
def generate_description():
    try:
        photo_raw = read_media(request.form.get("photo_data_uri"), request.files.get("photo"))
        if not photo_raw:
            raise JanSetuError("Photo is required to generate a description.")

        result = generate_beneficiary_description({
            "photo_data_uri": to_data_uri(normalize_photo(photo_raw)),
            "location": request.form.get("location") or "Unknown",
            "age_range": request.form.get("age_range") or "Unknown",
            "gender": request.form.get("gender") or "Unknown",
        })
        return jsonify({"success": True, "description": result.description})

    except (JanSetuError, ValidationError) as e:
        current_app.logger.warning("Description generation failed: %s", e)
        return jsonify({"success": False,
                        "error": f"Failed to generate description: {describe_error(e)}"}), 400
