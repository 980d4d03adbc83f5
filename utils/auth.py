from functools import wraps
from flask import session, redirect, url_for, flash, abort, g
from models.users import User

# Landing page for each role after login
ROLE_HOME = {
    "ngo": "ngo.dashboard",
    "supervisor": "supervisor.dashboard",
    "vendor": "vendor.scan",
}


# This decorator makes sure that only logged-in users can access protected pages
def login_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        if "user_id" not in session:
            flash("Please log in to access this page.", "warning")
            return redirect(url_for("auth.login"))
        return view_function(*args, **kwargs)
    return decorated_function


# Restrict a view to one or more roles; loads the profile into g.current_user
def role_required(*roles):
    def decorator(view_function):
        @wraps(view_function)
        def decorated_function(*args, **kwargs):
            user = current_user()
            if not user:
                session.clear()
                flash("Please log in to access this page.", "warning")
                return redirect(url_for("auth.login"))
            if user.get("role") not in roles:
                abort(403)
            return view_function(*args, **kwargs)
        return decorated_function
    return decorator


def current_user():
    """Profile of the logged-in user, read once per request."""
    user_id = session.get("user_id")
    if not user_id:
        return None
    cached = g.get("current_user")
    if cached is None or str(cached["_id"]) != user_id:
        g.current_user = User.find_by_id(user_id)
    return g.current_user


def is_logged_in():
    return "user_id" in session


def login_user(user):
    session.clear()
    session["user_id"] = str(user["_id"])
    session["user_name"] = user["name"]
    session["user_role"] = user["role"]


def home_endpoint(user):
    return ROLE_HOME.get(user.get("role"), "public.index")


def logout_user():
    session.clear()
    flash("You have been logged out successfully.", "success")
    return redirect(url_for("auth.login"))
