from flask import Blueprint, render_template, redirect, url_for, flash, current_app
from models.beneficiary import Beneficiary, APPROVED, REJECTED
from utils.auth import role_required, current_user
from utils.errors import JanSetuError, describe_error

supervisor_bp = Blueprint("supervisor", __name__, url_prefix="/supervisor")


# -------------------------------------------------------------
# PENDING APPROVALS
# -------------------------------------------------------------
@supervisor_bp.route("/dashboard")
@role_required("supervisor")
def dashboard():
    user = current_user()
    if not user.get("ngo_id"):
        flash("You are not assigned to any NGO.", "danger")
        return render_template("supervisor/index.html", pending=[])

    pending = Beneficiary.pending_for_ngo(user["ngo_id"])
    return render_template("supervisor/index.html", pending=pending)


def _decide(beneficiary_id, status):
    user = current_user()
    Beneficiary.set_status(user.get("ngo_id"), beneficiary_id, status, reviewed_by=user["_id"])
    current_app.logger.info("Supervisor %s set %s to %s", user["email"], beneficiary_id, status)


@supervisor_bp.route("/approve/<beneficiary_id>", methods=["POST"])
@role_required("supervisor")
def approve(beneficiary_id):
    try:
        _decide(beneficiary_id, APPROVED)
        flash("Beneficiary Approved. The beneficiary is now active.", "success")
    except JanSetuError as e:
        flash(f"Failed to approve beneficiary: {describe_error(e)}", "danger")
    return redirect(url_for("supervisor.dashboard"))


@supervisor_bp.route("/reject/<beneficiary_id>", methods=["POST"])
@role_required("supervisor")
def reject(beneficiary_id):
    try:
        _decide(beneficiary_id, REJECTED)
        flash("Beneficiary Rejected.", "success")
    except JanSetuError as e:
        flash(f"Failed to reject beneficiary: {describe_error(e)}", "danger")
    return redirect(url_for("supervisor.dashboard"))
