"""Authentication API endpoints for accounts-core.

These endpoints handle account authentication and return JSON responses:
- Email/password registration and login
- Caller profile retrieval
- Google sign-in (redirect to consent screen and callback)

The Google callback ends with a redirect to settings.oauth2_success_redirect
carrying the issued token as the ``token`` query parameter; every other
endpoint returns JSON.
"""

import logging
from urllib.parse import urlencode

from authlib.integrations.base_client import OAuthError
from flask import Blueprint, jsonify, redirect, url_for
from pydantic import ValidationError as PydanticValidationError

from ..api.failures import unwrap
from ..api.validation import validate_request
from ..config import settings
from ..db import get_core
from ..exceptions import AuthenticationError, ConfigurationError, ResourceNotFound
from . import oauth2, passwords, service
from .context import CallerContext, auth_required
from .schemas import AuthResponse, GoogleIdentity, LoginRequest, ProfileResponse, RegisterRequest

logger = logging.getLogger(__name__)


# Create blueprint
auth_bp = Blueprint("auth", __name__)


# ============================================================================
# Email/password
# ============================================================================


@auth_bp.post("/register")
@validate_request
def register(data: RegisterRequest):
    """
    Create a LOCAL account and return a token for it.

    Example request:
    ```json
    {
        "email": "ada@example.com",
        "password": "secret1",
        "fullName": "Ada Lovelace"
    }
    ```

    Example response (201):
    ```json
    {
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "type": "Bearer",
        "userId": "550e8400-e29b-41d4-a716-446655440000",
        "email": "ada@example.com",
        "fullName": "Ada Lovelace"
    }
    ```

    Raises:
        DuplicateAccount: If the email is already registered
        ValidationError: If the body is invalid
    """
    # bcrypt must run before the write lock is taken
    password_hash = passwords.hash_password(data.password)

    with get_core(atomic=True) as core:
        result = unwrap(service.register(core, data, password_hash))

    return jsonify(AuthResponse.for_account(result.account, result.token).to_json()), 201


@auth_bp.post("/login")
@validate_request
def login(data: LoginRequest):
    """
    Authenticate with email and password and return a token.

    Accepts both JSON and form data. The response has the same shape as
    /register.

    Raises:
        InvalidCredentials: For an unknown email, a Google-linked account or
            a wrong password, all with the same message
    """
    core = get_core()
    try:
        result = unwrap(service.login(core, data.email, data.password))
    finally:
        core.close()

    return jsonify(AuthResponse.for_account(result.account, result.token).to_json()), 200


@auth_bp.get("/me")
@auth_required
def me(caller: CallerContext):
    """
    Get the caller's profile.

    Example response:
    ```json
    {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "email": "ada@example.com",
        "fullName": "Ada Lovelace",
        "authProvider": "LOCAL",
        "createdAt": "2026-10-19T10:30:00Z",
        "updatedAt": "2026-10-19T10:30:00Z"
    }
    ```
    """
    core = get_core()
    try:
        account = core.account.get_by_id(caller.account_id)
    finally:
        core.close()

    if account is None:
        raise ResourceNotFound("User not found", {"user_id": caller.account_id})

    return jsonify(ProfileResponse.from_account(account).to_json()), 200


# ============================================================================
# Google sign-in
# ============================================================================


def _google_client():
    client = oauth2.get_google_client()
    if client is None:
        raise ConfigurationError(
            "Google sign-in is not configured",
            {"missing": ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"]}
        )
    return client


@auth_bp.get("/oauth2/google")
def google_login():
    """Redirect the browser to Google's consent screen."""
    client = _google_client()
    callback_url = url_for("auth.google_callback", _external=True)
    return client.authorize_redirect(callback_url)


@auth_bp.get("/oauth2/callback/google")
def google_callback():
    """
    Finish Google sign-in.

    Exchanges the authorization code, links the asserted identity to a local
    account and redirects to the success URL with ``?token=<jwt>``.

    Raises:
        AuthenticationError: If the exchange fails or the identity is unusable
        AccountConflict: If the account cannot be linked under the relink policy
    """
    client = _google_client()

    try:
        token = client.authorize_access_token()
    except OAuthError as e:
        logger.warning(f"Google authorization failed: {e.error}")
        raise AuthenticationError("Google authorization failed", {"error": e.error})

    claims = token.get("userinfo") or client.userinfo(token=token)

    if claims.get("email_verified") is False:
        logger.warning("Google sign-in rejected: email not verified")
        raise AuthenticationError("Google account email is not verified")

    try:
        identity = GoogleIdentity.from_claims(claims)
    except PydanticValidationError:
        logger.warning("Google sign-in rejected: incomplete identity claims")
        raise AuthenticationError("Google did not provide a usable identity")

    with get_core(atomic=True) as core:
        result = unwrap(oauth2.link_google_account(core, identity))

    logger.info(
        f"Google sign-in for account {result.account.id} "
        f"(created={result.created}, changed={result.changed})"
    )
    return redirect(f"{settings.oauth2_success_redirect}?{urlencode({'token': result.token})}")
