# src/debate_kit/parsers/pdf_parser.py

import io
import logging
from collections.abc import Iterator
from typing import Any, cast

import pdfplumber
from pdfminer.pdfdocument import PDFEncryptionError, PDFPasswordIncorrect
from pdfminer.pdfparser import PDFSyntaxError
from pdfminer.psparser import PSException

from debate_kit.errors import (
    DebateKitError,
    PdfCorruptedError,
    PdfEncryptedError,
    PdfNoTextError,
)

from .base import DocumentParser
from .models import ExtractedText

logger = logging.getLogger(__name__)

# Sections are attributed to pages in groups of this size. Approximate only.
SECTIONS_PER_PAGE = 3

_ENCRYPTED_HINTS = ("password", "encrypt")
_CORRUPTED_HINTS = ("invalid", "corrupt", "eof", "xref", "not a pdf", "no /root")


class PdfParser(DocumentParser):
    """
    Text-only PDF parser.
    - Uses page order
    - Pages are separated by a blank line
    - Failure reasons are told apart: encrypted, corrupted, no text
    """

    file_type = "pdf"

    def extract_text(self, data: bytes) -> ExtractedText:
        if not data:
            raise PdfCorruptedError("file is empty")

        try:
            # pdfplumber.open accepts path-like or buffer objects; cast to Any
            with pdfplumber.open(cast(Any, io.BytesIO(data))) as pdf:
                page_count = len(pdf.pages)
                pages = [page.extract_text() or "" for page in pdf.pages]
        except DebateKitError:
            raise
        except Exception as exc:
            raise classify_pdf_error(exc) from exc

        text = "\n\n".join(p.strip() for p in pages if p.strip())
        if not text:
            logger.warning("PDF has %d page(s) but no extractable text", page_count)
            raise PdfNoTextError()

        logger.debug("Extracted %d characters from %d PDF page(s)", len(text), page_count)
        return ExtractedText(text=text, page_count=page_count)

    def page_number_for(self, section_index: int) -> int | None:
        return section_index // SECTIONS_PER_PAGE + 1


def classify_pdf_error(exc: BaseException) -> DebateKitError:
    """Map a pdfplumber/pdfminer failure to an encrypted or corrupted error.

    pdfplumber wraps pdfminer exceptions, so the wrapped exception is
    searched as well as the one raised.
    """
    chain = list(_exception_chain(exc))

    if any(isinstance(e, (PDFPasswordIncorrect, PDFEncryptionError)) for e in chain):
        return PdfEncryptedError()
    if any(isinstance(e, (PDFSyntaxError, PSException)) for e in chain):
        return PdfCorruptedError(str(exc))

    message = " ".join(str(e) for e in chain).lower()
    if any(hint in message for hint in _ENCRYPTED_HINTS):
        return PdfEncryptedError()
    if any(hint in message for hint in _CORRUPTED_HINTS):
        return PdfCorruptedError(str(exc))

    logger.warning("Unrecognised PDF failure treated as corrupted: %r", exc)
    return PdfCorruptedError(str(exc))


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.extend(a for a in current.args if isinstance(a, BaseException))
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)
