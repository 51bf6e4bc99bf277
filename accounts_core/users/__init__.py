"""Profile management for authenticated callers.

Endpoints (under {api_prefix}/users):
- GET /profile - Get the caller's profile
- PUT /profile - Update full name and/or password
- DELETE /profile - Delete the caller's account
"""
