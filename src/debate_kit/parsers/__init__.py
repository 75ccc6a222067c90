from .base import DocumentParser, normalize_whitespace
from .config import SUPPORTED_EXTENSIONS, ParserOptions
from .document import get_parser, normalize_extension, parse_document
from .docx_parser import DocxParser
from .models import DocumentMetadata, ExtractedText, ParsedDocument, Section
from .pdf_parser import PdfParser, classify_pdf_error
from .text_parser import TextParser

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "DocumentMetadata",
    "DocumentParser",
    "DocxParser",
    "ExtractedText",
    "ParsedDocument",
    "ParserOptions",
    "PdfParser",
    "Section",
    "TextParser",
    "classify_pdf_error",
    "get_parser",
    "normalize_extension",
    "normalize_whitespace",
    "parse_document",
]
