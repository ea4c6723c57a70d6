from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from app.core.exceptions import SchemaValidationError


def _format_loc(loc: Sequence[int | str]) -> str:
    return ".".join(str(part) for part in loc) or "(root)"


def validate_with_schema[T: BaseModel](data: Any, schema: type[T]) -> T:
    """Validate untyped JSON data against a pydantic model.

    Unknown fields are dropped. Every violation is reported as
    ``<dotted.path>: <reason>`` in a single SchemaValidationError.
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = [f"{_format_loc(err['loc'])}: {err['msg']}" for err in e.errors()]
        raise SchemaValidationError(errors) from None
