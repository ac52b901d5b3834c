# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""XML codec mirroring the JSON codec contract.

Values map onto elements the way Rails' ``to_xml`` does, so scalar types survive a round trip:

    {"id": 7, "tags": ["a"], "at": datetime(...), "note": None}

    <root>
      <id type="integer">7</id>
      <tags type="array"><item>a</item></tags>
      <at type="datetime">2024-01-02T03:04:05Z</at>
      <note nil="true" />
    </root>

Elements without a ``type`` attribute decode as strings (leaf) or mappings (with children);
repeated sibling tags decode as lists.
"""

from __future__ import annotations

import datetime as dt
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

_NAME_RE = re.compile(r"^[A-Za-z_][\w.\-]*$")
_ITEM_TAG = "item"


class XMLCodecError(ValueError):
    """Raised when a value cannot be represented as XML or a document cannot be decoded."""


def format_iso8601(value: dt.datetime) -> str:
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_iso8601(text: str) -> dt.datetime:
    raw = text.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return dt.datetime.fromisoformat(raw)
    except ValueError as exc:
        raise XMLCodecError(f"Invalid ISO-8601 date: {text!r}") from exc


class XMLEncoder:
    """Serialize mappings (or models dumpable to mappings) into XML bytes."""

    def __init__(self, root_tag: str = "root", *, encoding: str = "utf-8"):
        if not _NAME_RE.match(root_tag):
            raise XMLCodecError(f"Invalid root tag: {root_tag!r}")
        self.root_tag = root_tag
        self.encoding = encoding

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, Mapping):
            try:
                value = TypeAdapter(type(value)).dump_python(value)
            except Exception as exc:  # noqa: BLE001
                raise XMLCodecError(f"Cannot encode {type(value).__name__} as XML") from exc
        root = ET.Element(self.root_tag)
        self._fill(root, value)
        return ET.tostring(root, encoding=self.encoding, xml_declaration=True)

    def _fill(self, element: ET.Element, value: Any) -> None:
        if value is None:
            element.set("nil", "true")
        elif isinstance(value, bool):
            element.set("type", "boolean")
            element.text = "true" if value else "false"
        elif isinstance(value, int):
            element.set("type", "integer")
            element.text = str(value)
        elif isinstance(value, float):
            element.set("type", "float")
            element.text = repr(value)
        elif isinstance(value, dt.datetime):
            element.set("type", "datetime")
            element.text = format_iso8601(value)
        elif isinstance(value, dt.date):
            element.set("type", "date")
            element.text = value.isoformat()
        elif isinstance(value, str):
            element.text = value
        elif isinstance(value, Mapping):
            if not value:
                element.set("type", "object")
            for key, child_value in value.items():
                name = str(key)
                if not _NAME_RE.match(name) or name.lower().startswith("xml"):
                    raise XMLCodecError(f"Invalid element name: {name!r}")
                self._fill(ET.SubElement(element, name), child_value)
        elif isinstance(value, (list, tuple)):
            element.set("type", "array")
            for item in value:
                self._fill(ET.SubElement(element, _ITEM_TAG), item)
        else:
            raise XMLCodecError(f"Unsupported XML value type: {type(value).__name__}")


class XMLDecoder:
    """Parse XML bytes into Python values, optionally validated into a target type."""

    def decode(self, data: bytes, target: Any = Any) -> Any:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise XMLCodecError(f"Malformed XML: {exc}") from exc
        value = self._read(root)
        if target is Any:
            return value
        return TypeAdapter(target).validate_python(value)

    def _read(self, element: ET.Element) -> Any:
        if element.get("nil") == "true":
            return None
        kind = element.get("type")
        text = element.text or ""
        children = list(element)

        if kind == "array":
            return [self._read(child) for child in children]
        if kind == "object":
            return self._read_mapping(children)
        if kind == "boolean":
            return text.strip().lower() == "true"
        if kind == "integer":
            return self._convert(int, text)
        if kind == "float":
            return self._convert(float, text)
        if kind == "datetime":
            return parse_iso8601(text)
        if kind == "date":
            return self._convert(dt.date.fromisoformat, text.strip())
        if children:
            return self._read_mapping(children)
        return text

    def _read_mapping(self, children: list[ET.Element]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for child in children:
            value = self._read(child)
            if child.tag in out:
                existing = out[child.tag]
                if isinstance(existing, _Repeated):
                    existing.append(value)
                else:
                    out[child.tag] = _Repeated([existing, value])
            else:
                out[child.tag] = value
        return {key: list(value) if isinstance(value, _Repeated) else value for key, value in out.items()}

    @staticmethod
    def _convert(func: Any, text: str) -> Any:
        try:
            return func(text)
        except ValueError as exc:
            raise XMLCodecError(f"Invalid value {text!r}") from exc


class _Repeated(list):
    """Marks lists built from repeated sibling tags while a mapping is being read."""


__all__ = ["XMLCodecError", "XMLDecoder", "XMLEncoder", "format_iso8601", "parse_iso8601"]
