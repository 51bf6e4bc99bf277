"""Profile endpoints for the authenticated caller.

All endpoints require ``Authorization: Bearer <token>``. The caller is
resolved by @auth_required and the view only ever touches the caller's own
account.
"""

from flask import Blueprint, jsonify

from ..api.failures import unwrap
from ..api.validation import validate_request
from ..auth.context import CallerContext, auth_required
from ..auth.schemas import ProfileResponse, ProfileUpdateRequest
from ..db import get_core
from . import service

# Create Blueprint
users_bp = Blueprint("users", __name__)


@users_bp.get("/profile")
@auth_required
def get_profile(caller: CallerContext):
    """
    Get the caller's profile.

    Returns:
        200: ProfileResponse
        401: Missing or invalid token
        404: Account deleted after the caller was resolved
    """
    core = get_core()
    try:
        account = unwrap(service.get_profile(core, caller.account_id))
    finally:
        core.close()

    return jsonify(ProfileResponse.from_account(account).to_json()), 200


@users_bp.put("/profile")
@auth_required
@validate_request
def update_profile(data: ProfileUpdateRequest, caller: CallerContext):
    """
    Update the caller's full name and/or password.

    Request Body (ProfileUpdateRequest):
        - fullName: str | None (blank leaves it unchanged)
        - password: str | None (blank leaves it unchanged)

    Returns:
        200: ProfileResponse with the updated account
        400: Validation error, or a password change on a Google account
        401: Missing or invalid token
        404: Account deleted after the caller was resolved
    """
    changes = service.prepare_update(data)

    with get_core(atomic=True) as core:
        account = unwrap(service.update_profile(core, caller.account_id, changes))

    return jsonify(ProfileResponse.from_account(account).to_json()), 200


@users_bp.delete("/profile")
@auth_required
def delete_profile(caller: CallerContext):
    """
    Delete the caller's account.

    Tokens already issued for it stop working, since every request
    re-checks that the account exists.

    Returns:
        200: {"message": "User account deleted successfully"}
        401: Missing or invalid token
        404: Account deleted after the caller was resolved
    """
    with get_core(atomic=True) as core:
        unwrap(service.delete_account(core, caller.account_id))

    return jsonify({"message": "User account deleted successfully"}), 200
