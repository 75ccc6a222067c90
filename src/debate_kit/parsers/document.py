# src/debate_kit/parsers/document.py

import asyncio
import logging
from time import monotonic

from debate_kit.errors import (
    DebateKitError,
    ExtractionTimeoutError,
    FileTooLargeError,
    InternalExtractionError,
    UnsupportedFileTypeError,
)
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import DocumentParser
from .config import SUPPORTED_EXTENSIONS, ParserOptions
from .docx_parser import DocxParser
from .models import ParsedDocument
from .pdf_parser import PdfParser
from .text_parser import TextParser

logger = logging.getLogger(__name__)

_PARSERS: dict[str, type[DocumentParser]] = {
    ".pdf": PdfParser,
    ".docx": DocxParser,
    ".txt": TextParser,
}


def normalize_extension(extension: str) -> str:
    """``PDF``, ``.pdf`` and ``report.PDF`` all normalise to ``.pdf``."""
    ext = extension.strip().lower()
    if "." in ext:
        ext = ext[ext.rindex(".") :]
    elif ext:
        ext = f".{ext}"
    return ext


def get_parser(extension: str) -> DocumentParser:
    ext = normalize_extension(extension)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(ext)
    return _PARSERS[ext]()


async def parse_document(
    data: bytes,
    extension: str,
    options: ParserOptions = ParserOptions(),
    *,
    file_name: str = "",
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> ParsedDocument:
    """Parse uploaded file bytes into a ParsedDocument.

    Validation happens before any parser runs: the extension must be one
    of .pdf, .docx or .txt and the payload must fit ``options.max_size_mb``.
    Parsing itself runs in a worker thread bounded by ``options.timeout``.

    Raises:
        UnsupportedFileTypeError: Extension not supported.
        FileTooLargeError: Payload exceeds the size limit.
        ExtractionTimeoutError: Parsing took longer than the timeout.
        PdfEncryptedError, PdfCorruptedError, PdfNoTextError: PDF-specific
            failures.
    """
    parser = get_parser(extension)

    max_bytes = options.max_size_mb * 1024 * 1024
    if len(data) > max_bytes:
        logger.warning(
            "Rejected %s upload of %d bytes (limit %sMB)",
            parser.file_type,
            len(data),
            options.max_size_mb,
        )
        raise FileTooLargeError(len(data), options.max_size_mb)

    logger.info(
        "Parsing %s document %r (%d bytes)", parser.file_type, file_name, len(data)
    )
    start = monotonic()
    labels = {"file_type": parser.file_type}

    try:
        document = await asyncio.wait_for(
            asyncio.to_thread(
                parser.parse, data, file_name=file_name, options=options
            ),
            timeout=options.timeout,
        )
    except asyncio.TimeoutError as exc:
        metrics_hook.increment(names.DOCUMENT_PARSE_ERRORS_TOTAL, labels=labels)
        raise ExtractionTimeoutError(
            f"{parser.file_type.upper()} parsing", options.timeout
        ) from exc
    except DebateKitError:
        metrics_hook.increment(names.DOCUMENT_PARSE_ERRORS_TOTAL, labels=labels)
        raise
    except Exception as exc:
        metrics_hook.increment(names.DOCUMENT_PARSE_ERRORS_TOTAL, labels=labels)
        raise InternalExtractionError(
            f"Failed to parse {parser.file_type} document: {exc}"
        ) from exc

    elapsed_ms = 1000 * (monotonic() - start)
    metrics_hook.record_latency(names.DOCUMENT_PARSE_DURATION, elapsed_ms, labels=labels)
    logger.info(
        "Parsed %s document: %d characters, %d section(s) in %.0fms",
        parser.file_type,
        len(document.content),
        len(document.sections),
        elapsed_ms,
    )
    return document
