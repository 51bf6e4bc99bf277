"""Flask application entry point."""

import logging
from flask import Flask, jsonify
from flask_cors import CORS

from .config import settings
from .db import init_db
from .exceptions import AccountsError, ResourceNotFound, ValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create Flask app
app = Flask(__name__)
app.secret_key = settings.secret_key

# CORS configuration
CORS(app, origins=settings.cors_origins, supports_credentials=True)


# Database initialization (runs once on app startup)
def initialize_database():
    """Initialize database on app startup."""
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


# Initialize database with app context
with app.app_context():
    initialize_database()


# Google sign-in client (registered only when configured)
from .auth.oauth2 import init_oauth

init_oauth(app)


def _error_response(error_type: str, error: AccountsError):
    response = {
        "error": {
            "type": error_type,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return jsonify(response)


# Error handlers
@app.errorhandler(ResourceNotFound)
def handle_not_found(error):
    """Handle ResourceNotFound exceptions."""
    return _error_response("ResourceNotFound", error), 404


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    """Handle ValidationError exceptions."""
    return _error_response("ValidationError", error), 400


@app.errorhandler(AccountsError)
def handle_accounts_error(error):
    """Handle every other AccountsError with its own status code."""
    if error.status_code >= 500:
        logger.error(f"{error.__class__.__name__}: {error.message}")
    return _error_response(error.__class__.__name__, error), error.status_code


@app.errorhandler(500)
def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


# Health check endpoint
@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


# Register API blueprints
from .auth.api import auth_bp
from .users.api import users_bp

app.register_blueprint(auth_bp, url_prefix=f"{settings.api_prefix}/auth")
app.register_blueprint(users_bp, url_prefix=f"{settings.api_prefix}/users")


if __name__ == "__main__":
    app.run(debug=True)
