"""CSV output for workbooks, delimited text and structured data."""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, List, Sequence

from ..base import ConversionInput, ConversionOutput, ConversionPlugin
from ..registry import REGISTRY
from ..utils import (
    DELIMITED_SUFFIXES,
    cell_text,
    decode_text,
    is_delimited,
    load_structured,
    record_table,
    to_json,
)
from ...categories import Category
from ...codecs import read_workbook
from ...metadata import utc_timestamp


def write_rows(rows: Iterable[Sequence[Any]], *, quoting: int = csv.QUOTE_ALL, delimiter: str = ",") -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=quoting, delimiter=delimiter, lineterminator="\n")
    for row in rows:
        writer.writerow([cell_text(value) for value in row])
    return buffer.getvalue()


def workbook_csv(payload: bytes) -> str:
    sheets = read_workbook(payload)
    chunks: List[str] = []
    for name, rows in sheets:
        banner = f"### {name} ###\n" if len(sheets) > 1 else ""
        chunks.append(banner + write_rows(rows).rstrip("\n"))
    return "\n\n".join(chunks) + "\n"


def redelimit(text: str, delimiter: str) -> str:
    rows = csv.reader(io.StringIO(text), delimiter=delimiter)
    return write_rows(rows, quoting=csv.QUOTE_MINIMAL)


class CsvPlugin(ConversionPlugin):
    slug = "to-csv"
    target_formats = ("csv",)
    media_type = "text/csv"

    def convert(self, payload: ConversionInput) -> ConversionOutput:
        source = payload.source

        if source.category is Category.SPREADSHEET:
            if source.suffix == "csv":
                return self.output(source.payload, "csv")
            if is_delimited(source):
                text = redelimit(decode_text(source.payload), DELIMITED_SUFFIXES[source.suffix])
                return self.output(text, "csv")
            return self.output(workbook_csv(source.payload), "csv")

        if source.category is Category.DATA:
            try:
                data = load_structured(source)
            except ValueError:
                return self.output(write_rows([["content"], [decode_text(source.payload)]], quoting=csv.QUOTE_MINIMAL), "csv")
            table = record_table(data)
            if table is None:
                return self.output(write_rows([["data"], [to_json(data)]], quoting=csv.QUOTE_MINIMAL), "csv")
            headers, records = table
            text = write_rows([headers], quoting=csv.QUOTE_MINIMAL)
            text += write_rows([record.get(header) for header in headers] for record in records)
            return self.output(text, "csv")

        summary = [
            ["filename", "type", "size", "converted"],
            [source.stem, source.media_type, source.size, utc_timestamp()],
        ]
        return self.output(write_rows(summary, quoting=csv.QUOTE_MINIMAL), "csv")


REGISTRY.register(CsvPlugin)
