"""JSON and YAML output sharing one category-driven document builder."""

from __future__ import annotations

from typing import Any, Dict, List

import yaml

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import (
    decode_text,
    extract_text,
    is_delimited,
    is_textual,
    load_structured,
    parse_delimited,
    summary_fields,
    to_json,
)
from ...categories import Category
from ...codecs import read_workbook
from ...metadata import utc_timestamp

UNPARSEABLE_NOTE = "Could not parse as structured data"
SUMMARY_NOTE = "Binary content is not embedded; only file details are included"


def keyed_rows(rows: List[List[Any]]) -> List[Dict[str, Any]]:
    """Key every row after the first by the first row's headers."""

    if not rows:
        return []
    headers = rows[0]
    keyed = []
    for row in rows[1:]:
        record = {}
        for index, value in enumerate(row):
            header = headers[index] if index < len(headers) else None
            key = str(header) if header not in (None, "") else f"column_{index}"
            record[key] = value
        keyed.append(record)
    return keyed


class StructuredPlugin(ConversionPlugin):
    """Builds the same document tree for every structured serialisation."""

    data_key = "originalData"

    def build(self, payload: ConversionInput) -> Dict[str, Any]:
        source = payload.source
        metadata = payload.metadata

        if source.category is Category.SPREADSHEET:
            if is_delimited(source):
                return {"metadata": metadata, "data": parse_delimited(source)}
            sheets = [{"name": name, "data": keyed_rows(rows)} for name, rows in read_workbook(source.payload)]
            return {"metadata": metadata, "sheets": sheets}

        if source.category is Category.DATA:
            try:
                return {"metadata": metadata, self.data_key: load_structured(source)}
            except ValueError:
                return self.unparseable(payload)

        if is_textual(source):
            content = extract_text(source)
            return {
                "metadata": metadata,
                "fileName": source.stem,
                "originalFormat": source.media_type,
                "content": content,
                "lines": content.split("\n"),
                "wordCount": len(content.split()),
                "characterCount": len(content),
                "convertedAt": utc_timestamp(),
            }

        return {"metadata": metadata, **summary_fields(source), "note": SUMMARY_NOTE}

    def unparseable(self, payload: ConversionInput) -> Dict[str, Any]:
        return {
            "metadata": payload.metadata,
            "content": decode_text(payload.source.payload),
            "note": UNPARSEABLE_NOTE,
        }


class JsonPlugin(StructuredPlugin):
    slug = "to-json"
    target_formats = ("json",)
    media_type = "application/json"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        return self.output(to_json(self.build(payload)), "json")


class YamlPlugin(StructuredPlugin):
    slug = "to-yaml"
    target_formats = ("yaml", "yml")
    media_type = "application/x-yaml"
    data_key = "data"

    def unparseable(self, payload: ConversionInput) -> Dict[str, Any]:
        source = payload.source
        return {
            "metadata": payload.metadata,
            "fileName": source.stem,
            "fileType": source.media_type,
            "content": decode_text(source.payload),
            "note": UNPARSEABLE_NOTE,
        }

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        document = yaml.safe_dump(
            self.build(payload),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        extension = payload.target_format.lower() if payload.target_format.lower() in self.target_formats else "yaml"
        return self.output(document, extension)


REGISTRY.register(JsonPlugin)
REGISTRY.register(YamlPlugin)
