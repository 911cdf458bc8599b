"""Plain-text output."""

from __future__ import annotations

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import cell_text, extract_text, is_delimited, parse_json, to_json
from ...categories import Category
from ...codecs import read_workbook
from ...metadata import utc_timestamp


def _flatten_workbook(payload: bytes) -> str:
    chunks = []
    for name, rows in read_workbook(payload):
        lines = [f"=== {name} ==="]
        lines.extend("\t".join(cell_text(value) for value in row) for row in rows)
        chunks.append("\n".join(lines) + "\n\n")
    return "".join(chunks)


class TextPlugin(ConversionPlugin):
    slug = "to-txt"
    target_formats = ("txt",)
    media_type = "text/plain"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        if source.category is Category.DOCUMENT:
            return self.output(extract_text(source), "txt")
        if source.category is Category.SPREADSHEET:
            if is_delimited(source):
                return self.output(source.payload, "txt")
            return self.output(_flatten_workbook(source.payload), "txt")
        if source.category is Category.DATA:
            try:
                return self.output(to_json(parse_json(source.payload)), "txt")
            except ValueError:
                return self.output(source.payload, "txt")

        text = (
            f"File: {source.stem}\n"
            f"Type: {source.media_type}\n"
            f"Size: {source.size} bytes\n"
            f"Converted: {utc_timestamp()}\n"
        )
        if payload.include_metadata and payload.metadata:
            text += f"\nMetadata:\n{to_json(payload.metadata)}\n"
        return self.output(text, "txt")


REGISTRY.register(TextPlugin)
