"""Authentication module for accounts-core.

This module provides authentication functionality:
- Schema validation for auth requests and responses
- JWT token issuance and validation
- Password hashing and verification
- Email/password registration and login
- Google sign-in and account linking
- Per-request caller resolution for protected endpoints

Auth endpoints (under {api_prefix}/auth):
- POST /register - Create a LOCAL account and return a token
- POST /login - Authenticate with email/password and return a token
- GET /me - Get the caller's profile
- GET /oauth2/google - Start Google sign-in
- GET /oauth2/callback/google - Finish Google sign-in and redirect with a token
"""

from . import schemas, token

__all__ = ["schemas", "token"]
