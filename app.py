import logging

from flask import Flask, redirect, url_for, render_template, session, request

from config import Config
from utils.db import init_db_connection
from utils.media import is_data_uri, is_remote_url
from utils.seed import seed_command

# Import controllers
from controllers.auth_controller import auth_bp
from controllers.public_controller import public_bp
from controllers.ngo_controller import ngo_bp
from controllers.supervisor_controller import supervisor_bp
from controllers.supervisor_report_controller import supervisor_report_bp
from controllers.vendor_controller import vendor_bp

# Endpoints reachable without a session
PUBLIC_ENDPOINTS = ["auth.login", "auth.signup", "auth.logout",
                    "public.index", "public.beneficiary", "public.photo", "static"]


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)


def create_app(config_class=Config):
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config_class)
    configure_logging(app)
    init_db_connection(app)             # Initialize MongoDB connection

    # Register Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(ngo_bp)
    app.register_blueprint(supervisor_bp)
    app.register_blueprint(supervisor_report_bp)
    app.register_blueprint(vendor_bp)

    app.cli.add_command(seed_command)

    # Globally injects the session user into all templates
    @app.context_processor
    def inject_user():
        return dict(user_name=session.get("user_name"), user_role=session.get("user_role"))

    # Photo reference -> <img src>
    @app.template_filter("photo_src")
    def photo_src(photo_ref):
        if not photo_ref or is_data_uri(photo_ref) or is_remote_url(photo_ref):
            return photo_ref or ""
        return url_for("public.photo", filename=photo_ref)

    # Global before_request: block everything except public pages if not logged in
    @app.before_request
    def require_login():
        if "user_id" not in session and request.endpoint not in PUBLIC_ENDPOINTS:
            return redirect(url_for("auth.login"))
        return None

    @app.errorhandler(403)
    def forbidden(e):
        return render_template("error.html", code=403, title="Access Denied",
                               message="You do not have permission to view this page."), 403

    @app.errorhandler(404)
    def not_found(e):
        return render_template("error.html", code=404, title="Not Found",
                               message="The page or beneficiary you are looking for does not exist."), 404

    return app


# Run the app
if __name__ == "__main__":
    create_app().run(debug=True)
