"""
Tag-based XML encoding for the legacy JSSResource API.

Models describe their XML shape with ordinary pydantic metadata:

    class ComputerGroupRequest(BaseModel):
        xml_tag: ClassVar[str] = "computer_group"

        name: str
        criteria: list[Criterion] = Field(
            default_factory=list, json_schema_extra={"xml_item": "criterion"}
        )

- ``xml_tag`` names the root element of a model used as a request/response body.
- A field's alias (or name) is its element tag.
- List fields are wrapped in a container element named after the field; each
  item uses the ``xml_item`` tag (``criteria>criterion``). Empty lists are
  omitted.
- ``None`` values are omitted; booleans are written as ``true``/``false``.
"""

import types
import typing
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel

from jamfpro.errors.exceptions import EncodingError


def _field_tag(name: str, field) -> str:
    return field.alias or name


def _item_tag(name: str, field) -> str:
    extra = field.json_schema_extra if isinstance(field.json_schema_extra, dict) else {}
    return extra.get("xml_item") or _field_tag(name, field)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (str, int, float)):
        return str(value)
    raise EncodingError(f"cannot encode value of type {type(value).__name__} as XML text")


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    if isinstance(value, BaseModel):
        parent.append(model_to_element(value, tag))
    elif isinstance(value, (dict, list, tuple, set)):
        raise EncodingError(f"cannot encode nested {type(value).__name__} under <{tag}>")
    else:
        ET.SubElement(parent, tag).text = _text(value)


def model_to_element(model: BaseModel, tag: str | None = None) -> ET.Element:
    """Build an element tree for a model instance."""
    root_tag = tag or getattr(model, "xml_tag", None)
    if not root_tag:
        raise EncodingError(f"{type(model).__name__} does not declare an xml_tag")

    element = ET.Element(root_tag)
    for name, field in type(model).model_fields.items():
        if field.exclude:
            continue
        value = getattr(model, name)
        if value is None:
            continue

        tag_name = _field_tag(name, field)
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            container = ET.SubElement(element, tag_name)
            item_tag = _item_tag(name, field)
            for item in value:
                _append(container, item_tag, item)
        else:
            _append(element, tag_name, value)
    return element


def encode_xml(body: Any) -> bytes:
    """Serialize a model to an XML document."""
    if not isinstance(body, BaseModel):
        raise EncodingError(f"cannot encode {type(body).__name__} as XML; expected a model")
    return ET.tostring(model_to_element(body), encoding="unicode").encode("utf-8")


# =============================================================================
# Decoding
# =============================================================================


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _describe(annotation: Any) -> tuple[bool, Any]:
    """Return (is_list, item_type) for a field annotation."""
    annotation = _unwrap_optional(annotation)
    if typing.get_origin(annotation) in (list, tuple):
        args = typing.get_args(annotation)
        return True, _unwrap_optional(args[0]) if args else Any
    return False, annotation


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _element_value(element: ET.Element, annotation: Any) -> Any:
    if _is_model(annotation):
        return element_to_data(element, annotation)
    return element.text


def element_to_data(element: ET.Element, model: type[BaseModel]) -> dict[str, Any]:
    """Convert an element into validation input for ``model``.

    Elements that are absent or empty are left out so field defaults apply.
    """
    data: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        tag = _field_tag(name, field)
        child = element.find(tag)
        if child is None:
            continue

        is_list, item_type = _describe(field.annotation)
        if is_list:
            items = child.findall(_item_tag(name, field))
            data[tag] = [_element_value(item, item_type) for item in items]
        elif _is_model(item_type):
            data[tag] = element_to_data(child, item_type)
        elif child.text is not None:
            data[tag] = child.text
    return data


def element_to_dict(element: ET.Element) -> Any:
    """Schema-less conversion: repeated child tags become lists."""
    children = list(element)
    if not children:
        return element.text
    result: dict[str, Any] = {}
    for child in children:
        value = element_to_dict(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = [existing]
            result[child.tag].append(value)
        else:
            result[child.tag] = value
    return result


def decode_xml(raw: bytes, model: Any = None) -> Any:
    """Parse an XML document, shaped for ``model`` when it is a pydantic model."""
    root = ET.fromstring(raw)
    if _is_model(model):
        return element_to_data(root, model)
    return element_to_dict(root)
