"""
Common schema helpers
"""

from typing import Any, Annotated, Dict, Mapping, Tuple, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ValidationError

from eventbooking.core.exceptions import RecordValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def to_object_id(value: Any) -> Any:
    """Accept an ObjectId or its 24-char hex form"""
    if isinstance(value, ObjectId) or value is None:
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"{value!r} is not a valid ObjectId")


PyObjectId = Annotated[ObjectId, BeforeValidator(to_object_id)]


def validate_payload(
    schema: Type[SchemaT],
    data: Mapping[str, Any],
    messages: Dict[Tuple[str, str], str],
) -> SchemaT:
    """Validate `data` against `schema`, reporting failures per field.

    `messages` maps (field, pydantic error type) to the text reported for it.
    """
    try:
        return schema.model_validate(dict(data))
    except ValidationError as exc:
        errors = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            kind = error["type"]
            if error.get("input", ...) is None:
                kind = "missing"
            message = messages.get((field, kind)) or f"{field}: {error['msg']}"
            errors.append({"field": field, "message": message})
        first = errors[0]
        raise RecordValidationError(first["field"], first["message"], errors) from exc
