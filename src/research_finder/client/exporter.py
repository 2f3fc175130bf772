"""
Export of the visible table page to CSV and PDF.

Exports are read-only over the rows they are given: callers pass the current
page as produced by TableState.visible_rows, never the full result set. The
rendered document is handed to a download sink; the default sink writes it
into a directory under a deterministic file name.
"""

import csv
import html
import io
import logging
from pathlib import Path
from typing import Protocol

import fitz  # PyMuPDF
from pydantic import BaseModel

from research_finder.constants import EXPORT_COLUMNS, EXPORT_FILENAME_STEM, EXPORT_LABELS
from research_finder.models.research import ResearchItem

logger = logging.getLogger(__name__)

# -- PDF layout (points) -----------------------------------------------------
PDF_PAPER = "a4-l"
PDF_MARGIN = 36.0
PDF_COLUMN_WIDTHS: tuple[float, ...] = (250.0, 200.0, 150.0, 50.0, 120.0)
PDF_FONT_SIZE = 8.0
PDF_HEADER_FONT_SIZE = 9.0
PDF_TITLE_FONT_SIZE = 14.0
PDF_CELL_PADDING = 4.0
PDF_LINE_SPACING = 1.3
PDF_MAX_CELL_LINES = 6
PDF_MEASURE_LIMIT = 10_000.0
PDF_HEADER_FILL = (0.18, 0.33, 0.55)
PDF_STRIPE_FILL = (0.94, 0.95, 0.97)
PDF_GRID_COLOR = (0.75, 0.75, 0.75)


class ExportArtifact(BaseModel):
    """A rendered export ready to be downloaded."""

    filename: str
    media_type: str
    content: bytes


class DownloadSink(Protocol):
    def __call__(self, artifact: ExportArtifact) -> None: ...


class FileDownloadSink:
    """Writes artifacts into `directory`, overwriting files of the same name."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.written: list[Path] = []

    def __call__(self, artifact: ExportArtifact) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / artifact.filename
        path.write_bytes(artifact.content)
        self.written.append(path)
        logger.info("Exported %s (%d bytes)", path, len(artifact.content))


def export_filename(extension: str, page_index: int = 0) -> str:
    return f"{EXPORT_FILENAME_STEM}-page-{page_index + 1}.{extension}"


def row_values(item: ResearchItem) -> list[str]:
    """The five exported cells of a row, in column order."""
    values = {
        "title": item.title,
        "authors": ", ".join(item.authors),
        "journal": item.journal,
        "year": str(item.year),
        "doi": item.doi,
    }
    return [values[column] for column in EXPORT_COLUMNS]


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def render_csv(rows: list[ResearchItem]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(EXPORT_LABELS)
    for item in rows:
        writer.writerow(row_values(item))
    return output.getvalue()


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------


def _css(fontsize: float, *, bold: bool = False, color: str = "#000000") -> str:
    weight = "bold" if bold else "normal"
    return (
        f"* {{font-family: sans-serif; font-size: {fontsize}pt; font-weight: {weight};"
        f" color: {color}; line-height: {PDF_LINE_SPACING}; margin: 0; padding: 0;}}"
    )


PDF_CELL_CSS = _css(PDF_FONT_SIZE)
PDF_HEADER_CSS = _css(PDF_HEADER_FONT_SIZE, bold=True, color="#ffffff")
PDF_TITLE_CSS = _css(PDF_TITLE_FONT_SIZE, bold=True)


def _html(text: str) -> str:
    return f"<p>{html.escape(text)}</p>"


def _text_height(text: str, width: float, css: str) -> float:
    """Height of `text` laid out in a box `width` points wide."""
    story = fitz.Story(html=_html(text), user_css=css)
    _, filled = story.place(fitz.Rect(0, 0, width, PDF_MEASURE_LIMIT))
    return fitz.Rect(filled).height


class _PdfTable:
    """
    Draws the fixed-width table, starting new pages as rows overflow.

    Cell text goes through MuPDF's HTML layout so glyphs missing from the
    base font (Greek, CJK, Latin Extended) are taken from fallback fonts.
    Cells taller than PDF_MAX_CELL_LINES lines are shrunk to fit.
    """

    def __init__(self, doc: fitz.Document, heading: str):
        self.doc = doc
        self.heading = heading
        self.page: fitz.Page | None = None
        self.y = 0.0

    def _new_page(self) -> None:
        width, height = fitz.paper_size(PDF_PAPER)
        self.page = self.doc.new_page(width=width, height=height)
        self.y = PDF_MARGIN
        if self.doc.page_count == 1:
            box = fitz.Rect(
                PDF_MARGIN, self.y, width - PDF_MARGIN, self.y + PDF_TITLE_FONT_SIZE * 2
            )
            self.page.insert_htmlbox(box, _html(self.heading), css=PDF_TITLE_CSS)
            self.y = box.y1
        self._draw_row(EXPORT_LABELS, header=True)

    def _bottom(self) -> float:
        return self.page.rect.height - PDF_MARGIN

    def _draw_row(self, values, *, header: bool = False, stripe: bool = False) -> None:
        css = PDF_HEADER_CSS if header else PDF_CELL_CSS
        fontsize = PDF_HEADER_FONT_SIZE if header else PDF_FONT_SIZE
        line_height = fontsize * PDF_LINE_SPACING
        max_text_height = PDF_MAX_CELL_LINES * line_height

        text_height = line_height
        for value, width in zip(values, PDF_COLUMN_WIDTHS):
            if value:
                measured = _text_height(value, width - 2 * PDF_CELL_PADDING, css)
                text_height = max(text_height, min(measured, max_text_height))
        height = text_height + 2 * PDF_CELL_PADDING

        if not header and self.y + height > self._bottom():
            self._new_page()

        x = PDF_MARGIN
        for value, width in zip(values, PDF_COLUMN_WIDTHS):
            rect = fitz.Rect(x, self.y, x + width, self.y + height)
            fill = PDF_HEADER_FILL if header else (PDF_STRIPE_FILL if stripe else None)
            self.page.draw_rect(rect, color=PDF_GRID_COLOR, fill=fill, width=0.5)
            if value:
                # Bottom padding doubles as slack for layout rounding.
                box = fitz.Rect(
                    x + PDF_CELL_PADDING,
                    self.y + PDF_CELL_PADDING,
                    x + width - PDF_CELL_PADDING,
                    rect.y1,
                )
                spare, scale = self.page.insert_htmlbox(box, _html(value), css=css)
                if spare < 0:
                    logger.warning("PDF cell text did not fit: %.60s", value)
                elif scale < 1:
                    logger.debug("PDF cell text shrunk to %.2f: %.60s", scale, value)
            x += width
        self.y += height

    def render(self, rows: list[ResearchItem]) -> None:
        self._new_page()
        for index, item in enumerate(rows):
            self._draw_row(row_values(item), stripe=index % 2 == 1)


def render_pdf(rows: list[ResearchItem], heading: str = "Research results") -> bytes:
    doc = fitz.open()
    try:
        _PdfTable(doc, heading).render(rows)
        return doc.tobytes()
    finally:
        doc.close()


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------


class Exporter:
    """Renders visible rows and triggers the download action."""

    def __init__(self, sink: DownloadSink | None = None):
        self.sink = sink or FileDownloadSink(Path.cwd())

    def export_csv(self, rows: list[ResearchItem], *, page_index: int = 0) -> ExportArtifact:
        artifact = ExportArtifact(
            filename=export_filename("csv", page_index),
            media_type="text/csv",
            content=render_csv(rows).encode("utf-8"),
        )
        self.sink(artifact)
        return artifact

    def export_pdf(
        self,
        rows: list[ResearchItem],
        *,
        page_index: int = 0,
        heading: str = "Research results",
    ) -> ExportArtifact:
        artifact = ExportArtifact(
            filename=export_filename("pdf", page_index),
            media_type="application/pdf",
            content=render_pdf(rows, heading),
        )
        self.sink(artifact)
        return artifact
