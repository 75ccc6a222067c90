import io
from pathlib import Path

import pytest
from docx import Document
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from debate_kit.parsers.models import ParsedDocument
from debate_kit.parsers.pdf_parser import PdfParser


def _create_sample_pdf(path: Path, encrypt: str | None = None) -> None:
    """Creates a deterministic single-page PDF for integration testing."""
    c = canvas.Canvas(str(path), pagesize=LETTER, encrypt=encrypt)
    width, height = LETTER

    text = c.beginText(40, height - 50)

    lines = [
        "RENEWABLE ENERGY BRIEFING",
        "Governments should invest in renewable energy.",
        "However, critics argue the transition is too expensive.",
        "Research on storage costs continues.",
    ]

    for line in lines:
        text.textLine(line)

    c.drawText(text)
    c.showPage()
    c.save()


def _create_multipage_pdf(path: Path) -> None:
    """Creates a deterministic multi-page PDF for integration testing."""
    c = canvas.Canvas(str(path), pagesize=LETTER)
    width, height = LETTER

    # Page 1
    text = c.beginText(40, height - 50)
    for line in ["MULTIPAGE DOCUMENT", "This content is on page one."]:
        text.textLine(line)
    c.drawText(text)
    c.showPage()

    # Page 2
    text = c.beginText(40, height - 50)
    for line in ["PAGE TWO CONTENT:", "This content is on page two."]:
        text.textLine(line)
    c.drawText(text)
    c.showPage()

    c.save()


def _create_image_only_pdf(path: Path) -> None:
    """A page with drawing but no text layer, like a scanned document."""
    c = canvas.Canvas(str(path), pagesize=LETTER)
    c.rect(100, 100, 200, 200, fill=1)
    c.showPage()
    c.save()


@pytest.fixture(scope="module")
def pdf_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Create all test PDFs once per module."""
    dir_path: Path = tmp_path_factory.mktemp("pdfs")

    _create_sample_pdf(dir_path / "sample.pdf")
    _create_sample_pdf(dir_path / "encrypted.pdf", encrypt="secret")
    _create_multipage_pdf(dir_path / "multipage.pdf")
    _create_image_only_pdf(dir_path / "image_only.pdf")

    return dir_path


@pytest.fixture(scope="module")
def parsed_sample(pdf_dir: Path) -> ParsedDocument:
    """Parse sample PDF once, reuse across tests."""
    parser = PdfParser()
    data = (pdf_dir / "sample.pdf").read_bytes()
    return parser.parse(data, file_name="sample.pdf")


@pytest.fixture(scope="module")
def parsed_multipage(pdf_dir: Path) -> ParsedDocument:
    """Parse multipage PDF once, reuse across tests."""
    parser = PdfParser()
    data = (pdf_dir / "multipage.pdf").read_bytes()
    return parser.parse(data, file_name="multipage.pdf")


@pytest.fixture(scope="module")
def docx_bytes() -> bytes:
    """A Word document with two paragraphs, an empty one, and a table."""
    document = Document()
    document.add_paragraph("Cities should ban cars from their centres.")
    document.add_paragraph("")
    document.add_paragraph("Opponents say deliveries would suffer.")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Pro"
    table.cell(0, 1).text = "Cleaner air"
    table.cell(1, 0).text = "Con"
    table.cell(1, 1).text = "Longer trips"

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
