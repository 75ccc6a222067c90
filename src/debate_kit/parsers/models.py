# src/debate_kit/parsers/models.py

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Section:
    """A blank-line-delimited block of document text.

    ``page_number`` is a rough attribution for PDFs (three sections per
    page) and ``None`` for other formats. Do not rely on it for precision.
    """

    content: str
    page_number: int | None = None


@dataclass(frozen=True)
class DocumentMetadata:
    file_name: str
    file_type: str
    file_size: int
    page_count: int | None = None


@dataclass(frozen=True)
class ExtractedText:
    """What a format-specific parser hands back before sectioning."""

    text: str
    page_count: int | None = None


@dataclass(frozen=True)
class ParsedDocument:
    content: str
    raw_text: str
    sections: list[Section] = field(default_factory=list)
    metadata: DocumentMetadata | None = None
