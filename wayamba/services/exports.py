"""CSV and PDF renderings of the feedback table."""

import csv
import io
from datetime import datetime
from typing import Any, Iterable, List

from fpdf import FPDF, XPos, YPos

from wayamba.models import Feedback

FEEDBACK_COLUMNS = [
    "id",
    "name",
    "comment",
    "latitude",
    "longitude",
    "image_url",
    "status",
    "created_at",
]

PDF_TITLE = "Tourist Feedback Report"


def _cell_value(feedback: Feedback, column: str) -> Any:
    value = getattr(feedback, column)
    if value is None:
        return ""
    if column == "status":
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value) if column == "id" else value


def feedback_rows(records: Iterable[Feedback]) -> List[List[Any]]:
    return [[_cell_value(f, column) for column in FEEDBACK_COLUMNS] for f in records]


def feedback_to_csv(records: Iterable[Feedback]) -> str:
    """Header row plus one row per record, in the order given."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(FEEDBACK_COLUMNS)
    writer.writerows(feedback_rows(records))
    return buffer.getvalue()


def _latin1(text: Any) -> str:
    # Core PDF fonts only cover latin-1.
    return str(text).encode("latin-1", "replace").decode("latin-1")


def feedback_to_pdf(records: Iterable[Feedback]) -> bytes:
    """A4 report listing every field of every record. Always at least one page."""
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.set_margins(10, 10, 10)
    pdf.set_auto_page_break(auto=True, margin=10)
    pdf.add_page()

    pdf.set_font("Helvetica", style="B", size=18)
    pdf.cell(0, 12, PDF_TITLE, align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    rows = feedback_rows(records)
    pdf.set_font("Helvetica", size=11)
    if not rows:
        pdf.cell(0, 8, "No feedback submitted yet.", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    for row in rows:
        for column, value in zip(FEEDBACK_COLUMNS, row):
            label = column.replace("_", " ").capitalize()
            pdf.multi_cell(0, 6, _latin1(f"{label}: {value}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

    return bytes(pdf.output())
