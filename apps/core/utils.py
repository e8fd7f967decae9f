# apps/core/utils.py

import json
import re
from typing import Any, Dict, Iterable, Optional

from .exceptions import RequestValidationError


def actor_id(actor) -> Any:
    """
    Returns the user id behind an actor

    Accepts a user instance or a raw id (int or numeric string)
    """
    if actor is None:
        return None
    pk = getattr(actor, 'pk', actor)
    try:
        return int(pk)
    except (TypeError, ValueError):
        return pk


def find_entry(entries: Iterable, user) -> Optional[Any]:
    """
    Linear scan of membership/assignment rows for a user

    Iterates whatever the caller passes, so a prefetched
    ``resource.memberships.all()`` costs no query.
    """
    uid = actor_id(user)
    for entry in entries:
        if entry.user_id == uid:
            return entry
    return None


def isoformat(value) -> Optional[str]:
    """Datetime/date to ISO string, None stays None"""
    return value.isoformat() if value else None


_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def snake_case(key: str) -> str:
    """camelCase -> snake_case (``dueDate`` -> ``due_date``)"""
    return _CAMEL_BOUNDARY.sub('_', key).lower()


def snake_case_keys(data: Dict) -> Dict:
    return {snake_case(key): value for key, value in data.items()}


def parse_json_body(request) -> Dict:
    """
    Decodes the JSON object sent in the request body

    Clients speak camelCase; keys come back in snake_case so they line up
    with form and model fields. An empty body is an empty payload.
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise RequestValidationError('Request body is not valid JSON')
    if not isinstance(data, dict):
        raise RequestValidationError('Request body must be a JSON object')
    return snake_case_keys(data)


def form_errors(form) -> list:
    """Flattens Django form errors into the ``details`` list of an error body"""
    details = []
    for field, errors in form.errors.get_json_data().items():
        for error in errors:
            details.append({'field': field, 'message': error['message']})
    return details


def validate_form(form_class, data: Dict, **kwargs) -> Dict:
    """
    Binds and validates a form, raising on invalid input

    Returns the cleaned data restricted to the keys actually sent, so
    partial updates never overwrite fields the client left out.
    """
    form = form_class(data=data, **kwargs)
    if not form.is_valid():
        raise RequestValidationError(details=form_errors(form))
    return {key: value for key, value in form.cleaned_data.items() if key in data}
