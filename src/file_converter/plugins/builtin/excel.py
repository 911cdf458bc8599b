"""XLSX workbook output through openpyxl."""

from __future__ import annotations

from typing import Any, List

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import decode_text, is_delimited, load_structured, parse_delimited, record_table, to_json
from ...categories import Category
from ...codecs import write_workbook
from ...metadata import utc_timestamp

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def table_rows(data: Any) -> List[List[Any]] | None:
    table = record_table(data)
    if table is None:
        return None
    headers, records = table
    return [headers] + [[record.get(header) for header in headers] for record in records]


class ExcelPlugin(ConversionPlugin):
    slug = "to-xlsx"
    target_formats = ("xlsx", "excel")
    media_type = XLSX_MEDIA_TYPE

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source
        title = source.stem

        if source.category is Category.DATA:
            styled = False
            try:
                data = load_structured(source)
            except ValueError:
                rows = [["Content"], [decode_text(source.payload)]]
            else:
                rows = table_rows(data)
                styled = rows is not None
                if rows is None:
                    rows = [["Data"], [to_json(data)]]
            return self.output(write_workbook(title, rows, fill_header=styled), "xlsx")

        if source.category is Category.SPREADSHEET and is_delimited(source):
            rows = table_rows(parse_delimited(source)) or [[]]
            return self.output(write_workbook(title, rows, fill_header=True), "xlsx")

        rows = [
            ["Property", "Value"],
            ["File Name", source.stem],
            ["File Type", source.media_type],
            ["File Size", f"{source.size} bytes"],
            ["Converted At", utc_timestamp()],
        ]
        if payload.include_metadata and payload.metadata:
            rows.append(["Metadata", to_json(payload.metadata)])
        return self.output(write_workbook(title, rows), "xlsx")


REGISTRY.register(ExcelPlugin)
