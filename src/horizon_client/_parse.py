"""
Parsing utilities for the Horizon client.

This module handles decoding of JSON payloads into the declared types.
"""

from functools import lru_cache
from typing import Any, cast

from pydantic import TypeAdapter, ValidationError

from horizon_client._errors import DeserializationError
from horizon_client._types import DecodeTarget, T
from horizon_client.resources import HorizonError

_PREVIEW_LEN = 100


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def get_adapter(target: DecodeTarget[T]) -> TypeAdapter[T]:
    """
    Return a TypeAdapter for a decode target.

    Adapters are passed through; types get a cached adapter.
    """
    if isinstance(target, TypeAdapter):
        return cast(TypeAdapter[T], target)
    try:
        return cast(TypeAdapter[T], _adapter_for(target))
    except TypeError:
        # Unhashable target
        return TypeAdapter(target)


def _target_name(target: DecodeTarget[Any]) -> str:
    if isinstance(target, TypeAdapter):
        return repr(target)
    return getattr(target, "__name__", repr(target))


def _preview(data: bytes | str) -> bytes | str:
    if len(data) > _PREVIEW_LEN:
        return data[:_PREVIEW_LEN] + (b"..." if isinstance(data, bytes) else "...")
    return data


def decode_json(data: bytes | str, target: DecodeTarget[T]) -> T:
    """
    Decode a JSON document into the target type.

    Args:
        data: JSON data as bytes or string
        target: The declared type (or TypeAdapter)

    Returns:
        The validated value

    Raises:
        DeserializationError: If the document is not valid JSON or does not
            match the target schema
    """
    adapter = get_adapter(target)
    try:
        return adapter.validate_json(data)
    except ValidationError as e:
        name = _target_name(target)
        raise DeserializationError(
            f"Failed to decode {name}: {e.error_count()} validation error(s)",
            target=name,
            body=_preview(data),
        ) from e


def decode_error_payload(data: bytes | str) -> HorizonError:
    """Decode the body of a 4xx response."""
    return decode_json(data, HorizonError)


def encode_json(value: Any, target: DecodeTarget[Any] | None = None) -> bytes:
    """
    Encode a value to JSON bytes.

    Args:
        value: The value to encode
        target: Type to serialize as (defaults to the value's own type)
    """
    adapter = get_adapter(target if target is not None else type(value))
    return adapter.dump_json(value, by_alias=True)
