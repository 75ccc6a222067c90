# src/debate_kit/parsers/docx_parser.py

import io
import logging
import zipfile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from debate_kit.errors import ValidationError

from .base import DocumentParser
from .models import ExtractedText

logger = logging.getLogger(__name__)


class DocxParser(DocumentParser):
    """Raw text from a Word document. Styles and formatting are discarded."""

    file_type = "docx"

    def extract_text(self, data: bytes) -> ExtractedText:
        try:
            document = Document(io.BytesIO(data))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
            raise ValidationError(
                "The file is not a valid Word (.docx) document."
            ) from exc

        blocks = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    blocks.append(" ".join(cells))

        logger.debug(
            "Extracted %d paragraph(s) and %d table(s) from DOCX",
            len(document.paragraphs),
            len(document.tables),
        )
        return ExtractedText(text="\n\n".join(blocks))
