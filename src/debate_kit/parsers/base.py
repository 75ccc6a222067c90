# src/debate_kit/parsers/base.py

import re
from abc import ABC, abstractmethod

from .config import ParserOptions
from .models import DocumentMetadata, ExtractedText, ParsedDocument, Section

_BLANK_LINES = re.compile(r"\n\s*\n")
_INLINE_WHITESPACE = re.compile(r"[ \t\f\v]+")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")


class DocumentParser(ABC):
    file_type: str = ""

    @abstractmethod
    def extract_text(self, data: bytes) -> ExtractedText:
        """
        Pull plain text out of the raw file bytes.

        Requirements:
        - Deterministic output for same input
        - No network access
        - Format-specific failures raise a debate_kit error
        """
        raise NotImplementedError

    def parse(
        self,
        data: bytes,
        *,
        file_name: str = "",
        options: ParserOptions = ParserOptions(),
    ) -> ParsedDocument:
        extracted = self.extract_text(data)
        raw_text = extracted.text

        content = raw_text.strip()
        if not options.preserve_formatting:
            content = normalize_whitespace(content)

        sections = self.split_sections(content) if options.extract_sections else []

        return ParsedDocument(
            content=content,
            raw_text=raw_text,
            sections=sections,
            metadata=DocumentMetadata(
                file_name=file_name,
                file_type=self.file_type,
                file_size=len(data),
                page_count=extracted.page_count,
            ),
        )

    def split_sections(self, content: str) -> list[Section]:
        chunks = [c.strip() for c in _BLANK_LINES.split(content)]
        return [
            Section(content=chunk, page_number=self.page_number_for(index))
            for index, chunk in enumerate(c for c in chunks if c)
        ]

    def page_number_for(self, section_index: int) -> int | None:
        return None


def normalize_whitespace(text: str) -> str:
    """Collapse runs of spaces and tabs, and runs of blank lines to one."""
    lines = [_INLINE_WHITESPACE.sub(" ", line).strip() for line in text.split("\n")]
    return _EXTRA_NEWLINES.sub("\n\n", "\n".join(lines)).strip()
