import io
import logging

import pdfplumber
from docx import Document
from docx.oxml.ns import qn

from services.exceptions import ExtractionError, UnsupportedFormatError

logger = logging.getLogger(__name__)


def extract_text_pdf(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    try:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from PDF: {e}", cause=e) from e
    return "\n".join(pages).strip()


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text runs from a DOCX file, space-joined.

    A package without a main document part yields an empty string.
    """
    try:
        doc = Document(io.BytesIO(docx_bytes))
    except KeyError as e:
        # python-docx raises KeyError when no officeDocument relationship exists
        logger.warning("DOCX has no main document part: %s", e)
        return ""
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from DOCX: {e}", cause=e) from e

    fragments = [t.text or "" for t in doc.element.body.iter(qn("w:t"))]
    return " ".join(fragments).strip()


def extract_text_txt(txt_bytes: bytes) -> str:
    return txt_bytes.decode("utf-8", errors="replace").strip()


_EXTRACTORS = {
    ".pdf": extract_text_pdf,
    ".docx": extract_text_docx,
    ".txt": extract_text_txt,
}


def extract_text(filename: str, raw_bytes: bytes) -> str:
    """Extract plain text from an uploaded document, dispatching on extension.

    Returns a whitespace-trimmed string (possibly empty). Raises
    UnsupportedFormatError for unknown extensions and ExtractionError when
    the decoder fails.
    """
    lower_name = (filename or "").lower()
    extractor = next(
        (fn for ext, fn in _EXTRACTORS.items() if lower_name.endswith(ext)), None
    )
    if extractor is None:
        raise UnsupportedFormatError(filename)

    text = extractor(raw_bytes)
    logger.debug("Extracted %d chars from %s", len(text), filename)
    return text


def candidate_name_from_filename(filename: str) -> str:
    """Strip the last extension from a filename; empty results become 'Unknown'."""
    stem, dot, _ = (filename or "").rpartition(".")
    name = stem if dot else ""
    return name or "Unknown"
