# src/debate_kit/parsers/config.py

from dataclasses import dataclass

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")


@dataclass(frozen=True)
class ParserOptions:
    max_size_mb: float = 10
    timeout: float = 45.0
    preserve_formatting: bool = True
    extract_sections: bool = True
