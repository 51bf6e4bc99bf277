"""Request validation decorator.

@validate_request parses the JSON (or form) body of a request into the
Pydantic model named by the view's type annotation and passes it in as an
argument. Path parameters (anything present in request.view_args) are passed
through untouched.

    @auth_bp.post("/register")
    @validate_request
    def register(data: RegisterRequest):
        ...

Invalid bodies raise ValidationError (400) with details:
- model:    name of the Pydantic model
- received: the body as received, with passwords masked
- errors:   list of {field, message, expected_type}; a model may override
            messages through its error_messages table
- fields:   {field: message}, first message per field
"""

import inspect
from functools import wraps

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

SECRET_FIELDS = {"password"}


def _request_body() -> dict:
    if request.is_json:
        body = request.get_json(silent=True)
        return body if isinstance(body, dict) else {}
    if request.form:
        return request.form.to_dict()
    return {}


def _redact(body: dict) -> dict:
    """Copy of the body safe to echo back (secrets masked)."""
    return {
        key: "********" if key in SECRET_FIELDS else value
        for key, value in body.items()
    }


def _format_errors(exc: PydanticValidationError, model: type[BaseModel]) -> list[dict]:
    messages = getattr(model, "error_messages", {})
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        errors.append({
            "field": field,
            "message": messages.get((field, err["type"]), err["msg"]),
            "expected_type": err["type"],
        })
    return errors


def validate_request(f):
    """Validate the request body against the view's annotated Pydantic model."""
    signature = inspect.signature(f)
    params = list(signature.parameters.values())

    if not params:
        raise TypeError(f"{f.__name__} has no parameters to validate")

    if params[0].annotation is inspect.Parameter.empty:
        raise TypeError(
            f"First parameter '{params[0].name}' of {f.__name__} lacks a type annotation"
        )

    @wraps(f)
    def wrapper(*args, **kwargs):
        view_args = request.view_args or {}

        for param in params:
            if param.name in view_args or param.name in kwargs:
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            model = param.annotation
            if not (inspect.isclass(model) and issubclass(model, BaseModel)):
                raise TypeError(
                    f"Parameter '{param.name}' of {f.__name__} must be annotated "
                    f"with a Pydantic BaseModel subclass to be read from the body"
                )

            body = _request_body()
            try:
                kwargs[param.name] = model(**body)
            except PydanticValidationError as e:
                errors = _format_errors(e, model)
                fields = {}
                for error in errors:
                    fields.setdefault(error["field"] or "body", error["message"])
                raise ValidationError(
                    "Request validation failed",
                    {
                        "model": model.__name__,
                        "received": _redact(body),
                        "errors": errors,
                        "fields": fields,
                    }
                )
            break

        return f(*args, **kwargs)

    return wrapper
