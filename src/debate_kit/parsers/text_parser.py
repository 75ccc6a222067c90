# src/debate_kit/parsers/text_parser.py

from .base import DocumentParser
from .models import ExtractedText


class TextParser(DocumentParser):
    file_type = "txt"

    def extract_text(self, data: bytes) -> ExtractedText:
        # Undecodable bytes become U+FFFD.
        text = data.decode("utf-8-sig", errors="replace").replace("\r\n", "\n")
        return ExtractedText(text=text)
