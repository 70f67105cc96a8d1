"""Body codecs shared by the request encoder and the dispatcher."""

import json
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, TypeAdapter

from jamfpro.errors.exceptions import EncodingError
from jamfpro.transport.xml_codec import decode_xml, encode_xml
from jamfpro.types import ContentType


def _as_data(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return body


def encode_json(body: Any) -> bytes:
    try:
        return json.dumps(_as_data(body), separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"cannot encode {type(body).__name__} as JSON", cause=e) from e


def _form_value(key: str, value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_form_value(key, item) for item in value]
    if isinstance(value, (dict, BaseModel, set)):
        raise EncodingError(f"form field {key!r} is nested; form bodies are flat")
    return value


def encode_form(body: Any) -> bytes:
    """Flat key/value encoding; nested structures are rejected."""
    try:
        data = _as_data(body)
    except ValueError as e:
        raise EncodingError(f"cannot encode {type(body).__name__} as a form", cause=e) from e
    if not isinstance(data, dict):
        raise EncodingError(f"cannot encode {type(body).__name__} as a form; expected a mapping")

    fields = {key: _form_value(key, value) for key, value in data.items() if value is not None}
    return urlencode(fields, doseq=True).encode("ascii")


def encode_body(body: Any, content_type: ContentType) -> bytes:
    if content_type is ContentType.XML:
        return encode_xml(body)
    if content_type is ContentType.FORM:
        return encode_form(body)
    return encode_json(body)


def validate_into(data: Any, into: Any) -> Any:
    """Validate decoded data into a model, a typing construct, or return it untouched."""
    if into is None or into is Any:
        return data
    if isinstance(into, type) and issubclass(into, BaseModel):
        return into.model_validate(data)
    return TypeAdapter(into).validate_python(data)


def decode_body(raw: bytes, media_type: str, into: Any = None) -> Any:
    """
    Decode a response body for ``into``.

    The body is treated as XML when the response content type mentions xml,
    otherwise as JSON. Parse and validation errors propagate unchanged.
    """
    if "xml" in (media_type or "").lower():
        data = decode_xml(raw, into)
    else:
        data = json.loads(raw)
    return validate_into(data, into)


__all__ = [
    "encode_json",
    "encode_form",
    "encode_body",
    "decode_body",
    "validate_into",
]
