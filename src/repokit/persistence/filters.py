"""
Attribute Filters

Turns a structured filter value (pydantic model, dataclass or mapping)
into equality conditions on entity attributes, matched in memory.
"""

import dataclasses
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from .exceptions import InvalidArgumentError


def _mapped_attribute_names(model: Type) -> Optional[set]:
    mapper = sa_inspect(model, raiseerr=False)
    if mapper is None:
        return None
    return set(mapper.attrs.keys())


def filter_values(params: Any, model: Optional[Type] = None) -> Dict[str, Any]:
    """
    Collect the present fields of a filter value.

    Fields set to ``None`` are absent and produce no condition. When
    ``model`` is given, every remaining field name must be a mapped
    attribute of it (exact, case-sensitive).

    Args:
        params: Pydantic model, dataclass instance, mapping or None
        model: Entity class the filter will be matched against

    Returns:
        Field name to expected value, ordered by field name

    Raises:
        InvalidArgumentError: For unsupported filter values or unknown fields
    """
    if params is None:
        return {}

    if isinstance(params, BaseModel):
        values = params.model_dump()
    elif dataclasses.is_dataclass(params) and not isinstance(params, type):
        values = {f.name: getattr(params, f.name) for f in dataclasses.fields(params)}
    elif isinstance(params, Mapping):
        values = dict(params)
    else:
        raise InvalidArgumentError(
            f"Unsupported filter value of type {type(params).__name__}"
        )

    values = {name: value for name, value in values.items() if value is not None}

    if model is not None:
        known = _mapped_attribute_names(model)
        unknown = sorted(
            name for name in values
            if (name not in known if known is not None else not hasattr(model, name))
        )
        if unknown:
            raise InvalidArgumentError(
                f"{model.__name__} has no attribute(s): {', '.join(unknown)}"
            )

    return dict(sorted(values.items()))


def matches(entity: Any, values: Mapping[str, Any]) -> bool:
    """Check that every filter field equals the entity's attribute."""
    return all(getattr(entity, name, None) == value for name, value in values.items())


__all__ = ["filter_values", "matches"]
