"""Initialize the Flask app and its extensions."""

import os
import uuid

import firebase_admin
from firebase_admin import credentials
from flask import Flask, g, jsonify, session
from flask_wtf.csrf import generate_csrf
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.routing import BaseConverter, ValidationError

from .core.constants import DEFAULT_MAX_VOTES, DEFAULT_ROUND_VOTES_REQUIRED
from .core.types import api_response
from .extensions import csrf


class UUIDConverter(BaseConverter):
    """URL converter for document ids, kept as canonical strings."""

    def to_python(self, value):
        """Reject anything that is not a UUID."""
        try:
            return str(uuid.UUID(value))
        except ValueError as e:
            raise ValidationError() from e

    def to_url(self, value):
        """Convert a UUID to a string."""
        return str(value)


def _int_env(name, default):
    return int(os.environ.get(name) or default)


def _init_firebase(app):
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        import json

        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            import json

            try:
                with open(cred_path, "r") as f:
                    project_id = json.load(f).get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        options = {"projectId": project_id} if project_id else None
        try:
            firebase_admin.initialize_app(cred, options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)
    app.url_map.converters["uuid"] = UUIDConverter

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        ROUND_VOTES_REQUIRED=_int_env(
            "ROUND_VOTES_REQUIRED", DEFAULT_ROUND_VOTES_REQUIRED
        ),
        DEFAULT_MAX_VOTES=_int_env("DEFAULT_MAX_VOTES", DEFAULT_MAX_VOTES),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    csrf.init_app(app)

    # Register blueprints
    from . import survey as survey_bp

    app.register_blueprint(survey_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import engagement as engagement_bp

    app.register_blueprint(engagement_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_anonymous_user():
        """Give every browser a stable anonymous user id in its session."""
        user_id = session.get("user_id")
        if user_id is None:
            user_id = f"user-{uuid.uuid4()}"
            session["user_id"] = user_id
            session.permanent = True
        g.user_id = user_id

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    @app.route("/csrf-token")
    def csrf_token():
        """Hand out a CSRF token for the X-CSRFToken header of later POSTs."""
        return jsonify(api_response(data={"csrfToken": generate_csrf()}))

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
