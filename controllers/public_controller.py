from flask import Blueprint, render_template, request, abort, current_app, send_from_directory, redirect, url_for
from models.beneficiary import Beneficiary, APPROVED
from models.ngo import NGO
from utils.auth import current_user, home_endpoint

public_bp = Blueprint("public", __name__)

# Role selection cards on the landing page
ROLE_CARDS = [
    {"role": "ngo", "name": "NGO Worker",
     "description": "Register new beneficiaries in the field."},
    {"role": "supervisor", "name": "Supervisor",
     "description": "Review and approve pending registrations."},
    {"role": "vendor", "name": "Vendor",
     "description": "Verify beneficiaries before distributing benefits."},
]


@public_bp.route("/")
def index():
    user = current_user()
    if user:
        return redirect(url_for(home_endpoint(user)))
    return render_template("public/index.html", roles=ROLE_CARDS)


# Beneficiary status card, reached from a vendor verification
@public_bp.route("/beneficiary/<beneficiary_id>")
def beneficiary(beneficiary_id):
    ngo_id = request.args.get("ngoId")
    if not ngo_id:
        abort(404)

    record = Beneficiary.find(ngo_id, beneficiary_id)
    if not record:
        abort(404)

    return render_template(
        "public/beneficiary.html",
        beneficiary=record,
        ngo=NGO.find_by_id(ngo_id),
        is_approved=record["status"] == APPROVED,
    )


@public_bp.route("/media/beneficiaries/<path:filename>")
def photo(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
