from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from models.users import User, ROLES
from models.ngo import NGO
from utils.auth import login_user, logout_user, login_required, current_user, home_endpoint

auth_bp = Blueprint("auth", __name__)


# Login
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    role = request.args.get("role")

    if request.method == "POST":
        email = request.form.get("email")
        password = request.form.get("password")

        user = User.verify_password(email, password)
        if user:
            login_user(user)
            current_app.logger.info("User %s logged in as %s", user["email"], user["role"])
            flash(f"Welcome {user['name']}!", "success")
            return redirect(url_for(home_endpoint(user)))

        flash("Invalid email or password", "danger")
        return redirect(url_for("auth.login", role=role))

    return render_template("auth-login.html", role=role)


# Signup
@auth_bp.route("/signup", methods=["GET", "POST"])
def signup():
    ngos = NGO.all()

    if request.method == "POST":
        name = request.form.get("name")
        email = request.form.get("email")
        password = request.form.get("password")
        role = request.form.get("role")
        ngo_id = request.form.get("ngo_id") or None

        if not all([name, email, password, role]):
            flash("Name, email, password and role are required.", "warning")
            return render_template("auth-register.html", ngos=ngos, roles=ROLES, form=request.form)

        if role not in ROLES:
            flash("Please choose a valid role.", "warning")
            return render_template("auth-register.html", ngos=ngos, roles=ROLES, form=request.form)

        # NGO workers and supervisors always act inside one NGO
        if role != "vendor":
            if not ngo_id or not NGO.find_by_id(ngo_id):
                flash("Please select your NGO.", "warning")
                return render_template("auth-register.html", ngos=ngos, roles=ROLES, form=request.form)
        else:
            ngo_id = None

        if User.find_by_email(email):
            flash("Email already registered!", "warning")
            return render_template("auth-register.html", ngos=ngos, roles=ROLES, form=request.form)

        User(name, email, password, role, ngo_id=ngo_id).save()
        current_app.logger.info("New %s account: %s", role, email)
        flash("Account created. Please log in.", "success")
        return redirect(url_for("auth.login", role=role))

    return render_template("auth-register.html", ngos=ngos, roles=ROLES, form={})


# Logout
@auth_bp.route("/logout")
def logout():
    return logout_user()


# View Profile
@auth_bp.route("/profile")
@login_required
def view_profile():
    user = current_user()
    if not user:
        flash("User not found!", "danger")
        return logout_user()

    ngo = NGO.find_by_id(user["ngo_id"]) if user.get("ngo_id") else None
    return render_template("auth-profile.html", user=user, ngo=ngo)
