"""HTTP plumbing shared by the blueprints: body validation and outcome translation."""

from .failures import unwrap
from .validation import validate_request

__all__ = ["unwrap", "validate_request"]
