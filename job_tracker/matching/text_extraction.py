"""
Text extraction for stored resume files.

Supports PDF (via pdfplumber) and DOCX (via python-docx). Legacy ".doc"
names are routed to the DOCX handler, since uploads are usually Word
documents saved with the old extension.
"""

from pathlib import PurePosixPath
import io
import logging

import pdfplumber
from docx import Document

from job_tracker.core.errors import ExtractionError, UnsupportedFormatError


logger = logging.getLogger(__name__)


def get_extension(file_name: str) -> str:
    """Return the lower-cased extension of a file name or storage path, without the dot."""
    return PurePosixPath(file_name.replace("\\", "/")).suffix.lower().lstrip(".")


def extract_text_from_pdf(data: bytes) -> str:
    """Extract all text from a PDF file."""
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error(f"Error extracting text from PDF: {e}")
        raise ExtractionError("pdf", str(e) or e.__class__.__name__) from e

    return "\n".join(pages).strip()


def extract_text_from_docx(data: bytes) -> str:
    """Extract paragraph and table text from a DOCX file."""
    try:
        doc = Document(io.BytesIO(data))
        lines = [para.text for para in doc.paragraphs]

        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" ".join(cells))
    except Exception as e:
        logger.error(f"Error extracting text from DOCX: {e}")
        raise ExtractionError("docx", str(e) or e.__class__.__name__) from e

    return "\n".join(lines).strip()


EXTRACTORS = {
    "pdf": extract_text_from_pdf,
    "docx": extract_text_from_docx,
    "doc": extract_text_from_docx,
}


def extract_text(data: bytes, file_name: str) -> str:
    """
    Extract plain text from a resume file.

    Args:
        data: Raw file content
        file_name: File name or storage path; only its extension is used

    Returns:
        Extracted text with surrounding whitespace trimmed

    Raises:
        UnsupportedFormatError: The extension is not pdf, docx or doc
        ExtractionError: The content could not be parsed
    """
    extension = get_extension(file_name)
    extractor = EXTRACTORS.get(extension)

    if extractor is None:
        raise UnsupportedFormatError(extension)

    text = extractor(data)
    logger.debug(f"Extracted {len(text)} characters from {extension} file")
    return text
