"""Filling DOCX templates and converting them to PDF with LibreOffice."""

import logging
import os
import subprocess
import sys
import zipfile
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping

DOCUMENT_PART = "word/document.xml"
GENERATED_PDF_DIR = "storage/generated_pdf"
CONVERSION_TIMEOUT = 30.0

_UNIX_SOFFICE = (
    "/usr/bin/soffice",
    "/usr/local/bin/soffice",
    "/opt/libreoffice/program/soffice",
)
_WINDOWS_SOFFICE = (
    r"C:\Program Files\LibreOffice\program\soffice.exe",
    r"C:\Program Files (x86)\LibreOffice\program\soffice.exe",
)

_log = logging.getLogger(__name__)


class DocumentError(RuntimeError):
    """Raised when a document cannot be filled or converted."""


def _format_number(value: float) -> str:
    text = format(Decimal(repr(float(value))).normalize(), "f")
    return text


def stringify_data(data: Mapping[str, Any]) -> dict[str, str]:
    """Turn template values into strings; only strings and numbers are allowed."""
    result = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = value
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Invalid data type for key {key}")
        elif isinstance(value, int):
            result[key] = str(value)
        else:
            result[key] = _format_number(value)
    return result


def _replace_placeholders(content: str, data: Mapping[str, str]) -> str:
    for key, value in data.items():
        content = content.replace("{{." + key + "}}", value)
    return content


def fill_docx(template_path, data: Mapping[str, str], output_path) -> Path:
    """Write a copy of the DOCX at ``template_path`` to ``output_path`` with every
    ``{{.key}}`` in the main document replaced by its value."""
    try:
        with zipfile.ZipFile(template_path) as source:
            entries = [(info, source.read(info)) for info in source.infolist()]
    except (OSError, zipfile.BadZipFile) as exc:
        raise DocumentError(f"failed to read document: {exc}") from exc

    names = [info.filename for info, _ in entries]
    if DOCUMENT_PART not in names:
        raise DocumentError(f"failed to read document: {DOCUMENT_PART} not found")

    output = Path(output_path)
    try:
        with zipfile.ZipFile(output, "w") as target:
            for info, payload in entries:
                if info.filename == DOCUMENT_PART:
                    content = payload.decode("utf-8")
                    payload = _replace_placeholders(content, data).encode("utf-8")
                target.writestr(info, payload)
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"failed to save modified document: {exc}") from exc
    return output


def _default_candidates() -> list[str]:
    candidates = list(_UNIX_SOFFICE)
    if sys.platform == "win32":
        candidates.extend(_WINDOWS_SOFFICE)
    return candidates


def find_soffice(candidates: Iterable[str] | None = None) -> str | None:
    """Return the first LibreOffice executable that exists, or None."""
    for path in _default_candidates() if candidates is None else candidates:
        if os.path.isfile(path):
            return str(path)
    return None


def convert_to_pdf(docx_path, output_dir, timeout: float = CONVERSION_TIMEOUT) -> None:
    """Convert the DOCX into ``output_dir`` with headless LibreOffice."""
    soffice = find_soffice()
    if soffice is None:
        raise DocumentError("LibreOffice not found in standard locations")

    env = dict(os.environ)
    env["HOME"] = "/tmp"
    command = [
        soffice,
        "--headless",
        "--convert-to",
        "pdf",
        "--outdir",
        str(output_dir),
        str(docx_path),
    ]
    _log.info("Using LibreOffice at: %s", soffice)
    _log.info("Input DOCX path: %s", docx_path)
    _log.info("Output directory: %s", output_dir)

    try:
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=env,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise DocumentError(f"PDF conversion timed out after {timeout:g} seconds") from exc
    except OSError as exc:
        raise DocumentError(f"PDF conversion failed: {exc}, output: ") from exc

    if completed.returncode != 0:
        output = (completed.stdout or b"").decode("utf-8", errors="replace")
        _log.error("LibreOffice output: %s", output)
        raise DocumentError(
            f"PDF conversion failed: exit status {completed.returncode}, output: {output}"
        )


def process_document(
    template_path, data: Mapping[str, str], output_dir=GENERATED_PDF_DIR
) -> Path:
    """Fill the template with ``data``, convert it to PDF and return the PDF path.

    The intermediate DOCX is removed once the conversion has run."""
    out_dir = Path(output_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DocumentError(f"failed to create directory {out_dir}: {exc}") from exc

    modified = out_dir / ("modified_" + Path(template_path).name)
    fill_docx(template_path, data, modified)
    try:
        _log.info("Converting to PDF: %s", modified)
        try:
            convert_to_pdf(modified, out_dir)
        except DocumentError as exc:
            raise DocumentError(f"failed to convert to PDF: {exc}") from exc
    finally:
        modified.unlink(missing_ok=True)

    pdf_path = out_dir / (modified.stem + ".pdf")
    if not pdf_path.exists():
        raise DocumentError("PDF file was not created")
    return pdf_path