"""Input validation for libro payloads.

Runs before any storage call, so an invalid request never reaches the database.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from libros_api.core.errors import ValidationFailure
from libros_api.entities.libro.entity import LibroData

REQUIRED_FIELDS = tuple(LibroData.model_fields)


def body_id_conflicts(payload: Mapping[str, Any], libro_id: int) -> bool:
    """Whether a body ``id`` contradicts the id addressed in the path."""
    body_id = payload.get("id")
    if body_id is None:
        return False
    return isinstance(body_id, bool) or str(body_id).strip() != str(libro_id)


def validate_libro_payload(payload: Any, libro_id: int | None = None) -> LibroData:
    """Return the normalized record for ``payload`` or raise ``ValidationFailure``.

    ``titulo`` and ``autor`` must be non-blank strings (trimmed on the way
    through); ``anio`` must be an integer or a string of decimal digits. When
    ``libro_id`` is given, a body ``id`` must match it. Every offending field
    is reported in one failure, ``id`` first and the rest in declaration order.
    """
    if not isinstance(payload, Mapping):
        raise ValidationFailure(["body"], "Request body must be a JSON object")

    fields: list[str] = []
    if libro_id is not None and body_id_conflicts(payload, libro_id):
        fields.append("id")

    try:
        data = LibroData.model_validate(dict(payload))
    except ValidationError as exc:
        invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        fields.extend(name for name in REQUIRED_FIELDS if name in invalid)
        raise ValidationFailure(fields) from None

    if fields:
        raise ValidationFailure(
            fields, f"Body id {payload['id']!r} does not match path id {libro_id}"
        )
    return data
