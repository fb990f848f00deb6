from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .core.types import api_response
from .errors import AppError, NotFoundError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error(message, status_code):
    return jsonify(api_response(message, success=False)), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors with a 400 JSON body."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(PermissionError)
def handle_permission_error(error):
    """Handles creator and author checks failing."""
    current_app.logger.warning(f"Permission Error: {error}")
    return _error(str(error) or "You don't have permission to do that.", 403)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error("Not found.", 404)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error("Something went wrong. Please try again later.", 500)


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or a missing token.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error("Your session may have expired. Please try your action again.", 400)
