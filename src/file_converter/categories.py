"""Coarse classification of uploaded files into conversion categories."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Category(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    DATA = "data"
    ARCHIVE = "archive"
    CODE = "code"
    AUDIO = "audio"
    VIDEO = "video"
    UNKNOWN = "unknown"


# Insertion order is the lookup order: csv/tsv resolve to spreadsheet before data.
FORMAT_CATEGORIES: Dict[Category, Tuple[str, ...]] = {
    Category.IMAGE: ("jpg", "jpeg", "png", "webp", "gif", "bmp", "tiff", "svg", "ico"),
    Category.DOCUMENT: ("pdf", "docx", "doc", "odt", "rtf", "txt", "html", "md", "tex"),
    Category.SPREADSHEET: ("xlsx", "xls", "csv", "ods", "tsv"),
    Category.DATA: ("json", "xml", "yaml", "yml", "csv", "tsv"),
    Category.ARCHIVE: ("zip", "rar", "7z", "tar", "gz"),
    Category.CODE: ("js", "ts", "py", "java", "cpp", "c", "cs", "php", "rb", "go", "rs"),
    Category.AUDIO: ("mp3", "wav", "flac", "aac", "ogg", "m4a"),
    Category.VIDEO: ("mp4", "avi", "mov", "wmv", "flv", "mkv", "webm"),
}


def file_suffix(file_name: str) -> str:
    """Lowercase text after the last dot; the whole name when there is none."""

    return file_name.rsplit(".", 1)[-1].lower()


def file_stem(file_name: str) -> str:
    if "." not in file_name:
        return file_name
    stem = file_name.rsplit(".", 1)[0]
    return stem or file_name


def _classify_media_type(media_type: str) -> Category:
    if media_type.startswith("image/"):
        return Category.IMAGE
    if media_type.startswith("audio/"):
        return Category.AUDIO
    if media_type.startswith("video/"):
        return Category.VIDEO
    if "document" in media_type or media_type.startswith("text/"):
        return Category.DOCUMENT
    if "spreadsheet" in media_type or "excel" in media_type:
        return Category.SPREADSHEET
    return Category.UNKNOWN


def classify(file_name: str, media_type: str | None) -> Category:
    suffix = file_suffix(file_name or "")
    for category, suffixes in FORMAT_CATEGORIES.items():
        if suffix in suffixes:
            return category
    return _classify_media_type((media_type or "").lower())


def supported_formats() -> Dict[str, list[str]]:
    return {
        "images": list(FORMAT_CATEGORIES[Category.IMAGE]),
        "documents": list(FORMAT_CATEGORIES[Category.DOCUMENT]),
        "spreadsheets": list(FORMAT_CATEGORIES[Category.SPREADSHEET]),
        "data": list(FORMAT_CATEGORIES[Category.DATA]),
    }


__all__ = ["Category", "FORMAT_CATEGORIES", "classify", "file_stem", "file_suffix", "supported_formats"]
