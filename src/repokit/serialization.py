"""
JSON Serialization Helpers

Serialize and deserialize values with camelCase keys on the wire and
snake_case keys in Python. Failures surface as ``JsonSerializeError`` /
``JsonDeserializeError``; the ``*_safely`` variants return a fallback
instead.
"""

import json
import logging
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import TypeAdapter
from pydantic.alias_generators import to_camel, to_snake
from pydantic_core import to_jsonable_python

logger = logging.getLogger(__name__)

T = TypeVar('T')


class JsonSerializeError(Exception):
    """Raised when a value cannot be serialized to JSON"""
    pass


class JsonDeserializeError(Exception):
    """Raised when JSON cannot be deserialized into the requested type"""
    pass


def _camel_key(key: Any) -> Any:
    if isinstance(key, str) and "_" in key.strip("_"):
        return to_camel(key)
    return key


def _snake_key(key: Any) -> Any:
    return to_snake(key) if isinstance(key, str) else key


def _rename_keys(data: Any, rename) -> Any:
    if isinstance(data, dict):
        return {rename(k): _rename_keys(v, rename) for k, v in data.items()}
    if isinstance(data, list):
        return [_rename_keys(item, rename) for item in data]
    return data


def _type_name(type_: Any) -> str:
    return getattr(type_, "__qualname__", None) or repr(type_)


def serialize(value: Any, camel_case: bool = True) -> str:
    """
    Serialize a value to a JSON string.

    Pydantic models, dataclasses, datetimes, enums and the like are
    converted first; dictionary keys become camelCase unless disabled.

    Raises:
        JsonSerializeError: If the value is not JSON serializable
    """
    try:
        data = to_jsonable_python(value)
        if camel_case:
            data = _rename_keys(data, _camel_key)
        return json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise JsonSerializeError(
            f"The value type of [{_type_name(type(value))}] is not supported for JSON serialization."
        ) from e


def serialize_safely(value: Any, default: str = "") -> str:
    """Serialize a value, returning ``default`` if that fails."""
    try:
        return serialize(value)
    except JsonSerializeError as e:
        logger.debug(f"Serialization fell back to default: {e}")
        return default


def deserialize(value: Union[str, bytes], type_: Any = Any, camel_case: bool = True) -> Any:
    """
    Deserialize JSON into an instance of ``type_``.

    Bytes are decoded as UTF-8. Blank input is treated as an empty object.
    camelCase keys are mapped to snake_case before validation unless
    disabled.

    Raises:
        JsonDeserializeError: If the input is not valid JSON for ``type_``
    """
    try:
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("utf-8")
        if value is None or not value.strip():
            value = "{}"
        data = json.loads(value)
        if camel_case:
            data = _rename_keys(data, _snake_key)
        return TypeAdapter(type_).validate_python(data)
    except (TypeError, ValueError) as e:
        raise JsonDeserializeError(
            f"The value cannot be deserialized to [{_type_name(type_)}]."
        ) from e


def deserialize_safely(value: Union[str, bytes], type_: Type[T], default: Optional[T] = None) -> Optional[T]:
    """
    Deserialize JSON, falling back instead of raising.

    Returns:
        The deserialized value, ``default`` if given, otherwise ``type_()``.
        None when ``type_`` cannot be built without arguments, such as a
        model with required fields.
    """
    try:
        return deserialize(value, type_)
    except JsonDeserializeError as e:
        logger.debug(f"Deserialization fell back to default: {e}")
    if default is not None:
        return default
    try:
        return type_()
    except (TypeError, ValueError):
        return None


__all__ = [
    "serialize", "serialize_safely", "deserialize", "deserialize_safely",
    "JsonSerializeError", "JsonDeserializeError",
]
