"""Shared plugin utilities: text extraction, structured parsing, summaries."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..categories import Category
from ..codecs import docx_html, docx_text, is_word_document, pdf_text, text_html
from ..metadata import utc_timestamp
from ..models import SourceFile

DELIMITED_SUFFIXES = {"csv": ",", "tsv": "\t"}


def decode_text(payload: bytes) -> str:
    return payload.decode("utf-8", errors="replace").removeprefix("\ufeff")


def is_pdf(source: SourceFile) -> bool:
    return source.suffix == "pdf" or source.media_type == "application/pdf"


def is_textual(source: SourceFile) -> bool:
    return source.category in (Category.DOCUMENT, Category.CODE) or source.media_type.startswith("text/")


def is_delimited(source: SourceFile) -> bool:
    return source.suffix in DELIMITED_SUFFIXES


def extract_text(source: SourceFile) -> str:
    if is_word_document(source.suffix, source.media_type):
        return docx_text(source.payload)
    if is_pdf(source):
        return pdf_text(source.payload)
    return decode_text(source.payload)


def rich_markup(source: SourceFile) -> str:
    if is_word_document(source.suffix, source.media_type):
        return docx_html(source.payload)
    return text_html(extract_text(source))


def parse_delimited(source: SourceFile) -> List[Dict[str, Any]]:
    delimiter = DELIMITED_SUFFIXES.get(source.suffix, ",")
    reader = csv.DictReader(io.StringIO(decode_text(source.payload)), delimiter=delimiter)
    return [dict(row) for row in reader]


def load_structured(source: SourceFile) -> Any:
    """Parse JSON, or YAML for yaml sources; raise ``ValueError`` when neither parses."""

    text = decode_text(source.payload)
    if source.suffix in ("yaml", "yml"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML: {exc}") from exc
    return json.loads(text)


def parse_json(payload: bytes) -> Any:
    return json.loads(decode_text(payload))


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def record_table(data: Any) -> Optional[Tuple[List[str], List[Dict[str, Any]]]]:
    """Headers from the first object of a non-empty array of objects."""

    if isinstance(data, list) and data and isinstance(data[0], dict):
        headers = [str(key) for key in data[0].keys()]
        rows = [row if isinstance(row, dict) else {} for row in data]
        return headers, rows
    return None


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def summary_fields(source: SourceFile) -> Dict[str, Any]:
    return {
        "fileName": source.stem,
        "fileType": source.media_type,
        "size": source.size,
        "convertedAt": utc_timestamp(),
    }


def size_kb(source: SourceFile) -> str:
    return f"{source.size / 1024:.2f} KB"
