"""Thin wrappers over the third-party codecs used by the conversion plugins.

Every wrapper translates library exceptions into a :class:`CodecError` tagged
with the failing subsystem so callers can attach a remediation hint.
"""

from __future__ import annotations

import html
import io
import json
import re
import zipfile
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import fitz  # PyMuPDF
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException
from PIL import Image, UnidentifiedImageError


class CodecError(RuntimeError):
    subsystem = "codec"


class ImageCodecError(CodecError):
    subsystem = "image"


class DocumentCodecError(CodecError):
    subsystem = "document"


class WorkbookCodecError(CodecError):
    subsystem = "spreadsheet"


class PdfCodecError(CodecError):
    subsystem = "pdf"


REMEDIATION_HINTS = {
    "image": "Image processing failed. Please ensure the file is a valid image format.",
    "document": "Document processing failed. Please ensure the file is a valid Word document.",
    "spreadsheet": "Spreadsheet processing failed. Please ensure the file is a valid Excel file.",
    "pdf": "PDF processing failed. Please ensure the file is a valid PDF document.",
}

# Used when an exception escaped without a subsystem tag.
_HINT_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("pillow", "image"),
    ("image", "image"),
    ("docx", "document"),
    ("word", "document"),
    ("openpyxl", "spreadsheet"),
    ("workbook", "spreadsheet"),
    ("excel", "spreadsheet"),
    ("mupdf", "pdf"),
    ("pdf", "pdf"),
)


def remediation_hint(exc: BaseException) -> Optional[str]:
    subsystem = getattr(exc, "subsystem", None)
    if subsystem in REMEDIATION_HINTS:
        return REMEDIATION_HINTS[subsystem]
    text = str(exc).lower()
    for keyword, key in _HINT_KEYWORDS:
        if keyword in text:
            return REMEDIATION_HINTS[key]
    return None


# ---------------------------------------------------------------- images

_PIL_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "webp": "WEBP",
    "gif": "GIF",
    "bmp": "BMP",
    "tiff": "TIFF",
    "ico": "ICO",
}


def open_image(payload: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(payload))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageCodecError(f"Pillow could not decode image: {exc}") from exc
    return image


def _flatten_alpha(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "L"):
        return image
    return image.convert("RGB")


_PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16")


def _storable_mode(image: Image.Image) -> Image.Image:
    """Convert modes PNG cannot store, such as CMYK, to RGB or RGBA."""
    if image.mode in _PNG_MODES:
        return image
    has_alpha = "A" in image.getbands() or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def encode_image(
    payload: bytes,
    target: str,
    *,
    quality: int,
    size: Optional[Tuple[int, int]] = None,
) -> bytes:
    fmt = _PIL_FORMATS.get(target)
    if fmt is None:
        raise ImageCodecError(f"Pillow has no encoder mapping for {target}")

    image = open_image(payload)
    params: dict[str, Any] = {}
    try:
        if size is not None:
            image = image.resize(size)
        if fmt == "PNG":
            image = _storable_mode(image)
            params = {"optimize": True, "compress_level": 9}
        elif fmt == "JPEG":
            image = _flatten_alpha(image)
            params = {"quality": quality, "progressive": True}
        elif fmt in ("WEBP", "TIFF"):
            params = {"quality": quality}
        elif fmt == "BMP" and image.mode not in ("1", "L", "P", "RGB"):
            image = image.convert("RGB")
        elif fmt == "ICO":
            image = _storable_mode(image)
            params = {"sizes": [image.size]}

        buffer = io.BytesIO()
        image.save(buffer, format=fmt, **params)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageCodecError(f"Pillow could not encode {fmt}: {exc}") from exc
    return buffer.getvalue()


def probe_image(payload: bytes) -> dict[str, Any]:
    image = open_image(payload)
    bands = image.getbands()
    return {
        "width": image.width,
        "height": image.height,
        "format": (image.format or "").lower() or None,
        "density": image.info.get("dpi", (None,))[0],
        "has_alpha": "A" in bands or "transparency" in image.info,
    }


# ---------------------------------------------------------------- documents

WORD_MEDIA_TYPES = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


def is_word_document(suffix: str, media_type: str) -> bool:
    return suffix == "docx" or media_type in WORD_MEDIA_TYPES


def _load_docx(payload: bytes):  # type: ignore[no-untyped-def]
    try:
        return Document(io.BytesIO(payload))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise DocumentCodecError(f"python-docx could not read document: {exc}") from exc


def docx_text(payload: bytes) -> str:
    document = _load_docx(payload)
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _heading_level(style_name: str) -> Optional[int]:
    if style_name == "Title":
        return 1
    match = re.fullmatch(r"Heading (\d)", style_name)
    if not match:
        return None
    return min(max(int(match.group(1)), 1), 6)


def _runs_to_html(paragraph) -> str:  # type: ignore[no-untyped-def]
    parts: List[str] = []
    for run in paragraph.runs:
        text = html.escape(run.text)
        if not text:
            continue
        if run.italic:
            text = f"<em>{text}</em>"
        if run.bold:
            text = f"<strong>{text}</strong>"
        parts.append(text)
    return "".join(parts)


def docx_html(payload: bytes) -> str:
    document = _load_docx(payload)
    blocks: List[str] = []
    for paragraph in document.paragraphs:
        body = _runs_to_html(paragraph)
        if not body:
            continue
        style_name = paragraph.style.name if paragraph.style is not None else ""
        level = _heading_level(style_name)
        tag = f"h{level}" if level else "p"
        blocks.append(f"<{tag}>{body}</{tag}>")
    return "".join(blocks)


def text_html(text: str) -> str:
    blocks = [block.strip() for block in re.split(r"\n\s*\n", text)]
    return "".join(
        f"<p>{html.escape(block).replace(chr(10), '<br />')}</p>" for block in blocks if block
    )


# ---------------------------------------------------------------- pdf

PAGE_WIDTH = 595
PAGE_HEIGHT = 842


def pdf_text(payload: bytes) -> str:
    try:
        with fitz.open(stream=payload, filetype="pdf") as pdf:
            return "".join(page.get_text() for page in pdf)
    except (RuntimeError, ValueError) as exc:
        raise PdfCodecError(f"PyMuPDF could not read pdf: {exc}") from exc


def render_text_pdf(
    lines: Sequence[str],
    *,
    font_size: float = 10,
    start_y: float = 800,
    line_step: float = 20,
    bottom_margin: float = 50,
    left: float = 50,
) -> bytes:
    """Lay ``lines`` out on a single A4 page; ``start_y`` counts from the bottom edge."""

    try:
        with fitz.open() as pdf:
            page = pdf.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            y = start_y
            for line in lines:
                if y < bottom_margin:
                    break
                if line:
                    page.insert_text((left, PAGE_HEIGHT - y), line, fontsize=font_size)
                y -= line_step
            return pdf.tobytes()
    except (RuntimeError, ValueError) as exc:
        raise PdfCodecError(f"PyMuPDF could not render text page: {exc}") from exc


def render_image_pdf(
    payload: bytes,
    *,
    scale: float = 0.5,
    max_width: float = 500,
    max_height: float = 350,
    left: float = 50,
    bottom: float = 400,
) -> bytes:
    image = open_image(payload)
    width = min(image.width * scale, max_width)
    height = min(image.height * scale, max_height)
    top = PAGE_HEIGHT - bottom - height
    try:
        with fitz.open() as pdf:
            page = pdf.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            page.insert_image(fitz.Rect(left, top, left + width, top + height), stream=payload)
            return pdf.tobytes()
    except (RuntimeError, ValueError) as exc:
        raise PdfCodecError(f"PyMuPDF could not embed image: {exc}") from exc


def render_blank_pdf() -> bytes:
    with fitz.open() as pdf:
        pdf.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        return pdf.tobytes()


# ---------------------------------------------------------------- workbooks

Sheet = Tuple[str, List[List[Any]]]

HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFE0E0E0")


def _trim_row(values: Iterable[Any]) -> List[Any]:
    row = list(values)
    while row and row[-1] is None:
        row.pop()
    return row


def read_workbook(payload: bytes) -> List[Sheet]:
    """Return ``(sheet name, rows)`` pairs; fully empty rows are skipped."""

    try:
        workbook = load_workbook(io.BytesIO(payload), data_only=True, read_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise WorkbookCodecError(f"openpyxl could not load workbook: {exc}") from exc

    sheets: List[Sheet] = []
    try:
        for worksheet in workbook.worksheets:
            rows = [_trim_row(row) for row in worksheet.iter_rows(values_only=True)]
            sheets.append((worksheet.title, [row for row in rows if row]))
    finally:
        workbook.close()
    return sheets


def sheet_title(name: str) -> str:
    cleaned = re.sub(r"[\[\]:*?/\\]", "_", name).strip("'")[:31]
    return cleaned or "Sheet1"


def _cell(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def write_workbook(
    title: str,
    rows: Iterable[Sequence[Any]],
    *,
    bold_header: bool = True,
    fill_header: bool = False,
) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_title(title)
    written = 0
    try:
        for row in rows:
            worksheet.append([_cell(value) for value in row])
            written += 1
        if written and (bold_header or fill_header):
            for cell in worksheet[1]:
                if bold_header:
                    cell.font = Font(bold=True)
                if fill_header:
                    cell.fill = HEADER_FILL
        buffer = io.BytesIO()
        workbook.save(buffer)
    except (IllegalCharacterError, ValueError, TypeError) as exc:
        raise WorkbookCodecError(f"openpyxl could not write workbook: {exc}") from exc
    return buffer.getvalue()
