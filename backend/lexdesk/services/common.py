"""Shared service helpers - whitelisted updates and paging envelopes"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple, TypeVar
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from ..domain.models import FieldChange
from ..domain.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def apply_updates(
    entity: ModelT,
    updates: Dict[str, Any],
    allowed: Iterable[str]
) -> Tuple[ModelT, List[FieldChange]]:
    """
    Apply a partial update restricted to whitelisted fields.

    Returns the re-validated entity and the list of fields whose value
    actually changed. Unknown or protected fields are rejected outright.
    """
    allowed = set(allowed)
    rejected = sorted(set(updates) - allowed)
    if rejected:
        raise ValidationError(
            "Some fields cannot be updated",
            details={"fields": rejected}
        )

    try:
        updated = entity.model_validate({**entity.model_dump(), **updates})
    except SchemaValidationError as e:
        raise ValidationError(
            "Invalid update values",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)}
        )

    changes = []
    for field in updates:
        old_value = _plain(getattr(entity, field))
        new_value = _plain(getattr(updated, field))
        if old_value != new_value:
            changes.append(FieldChange(field=field, old_value=old_value, new_value=new_value))
    return updated, changes


def page_envelope(items: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    """Standard paged listing payload"""
    return {
        "items": items,
        "total": total,
        "page": page,
        "limit": limit,
        "pages": (total + limit - 1) // limit if limit else 1,
    }
