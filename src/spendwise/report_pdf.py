import io
from typing import Any, Iterable, List

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.units import inch

from .schemas import MonthReport, money_str


def _escape(txt: str) -> str:
    # basic HTML escaping so Paragraph does not choke
    return (txt or "").replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _make_wrapped_table(data: List[List[Any]], styles, page_width_pts: float) -> Table:
    """
    Create a wrapped table that fits the page width.
    - data[0] is the header row.
    - Column widths follow the text length of the header plus a sample of rows,
      clamped to readable bounds.
    """
    wrap_style = ParagraphStyle(
        "WrapSmall",
        parent=styles["Normal"],
        fontSize=8,
        leading=10,
        wordWrap="CJK",
    )

    wrapped: List[List[Paragraph]] = []
    for row in data:
        wrapped.append([Paragraph(_escape("" if c is None else str(c)), wrap_style) for c in row])

    ncols = len(data[0]) if data else 0
    if ncols == 0:
        t = Table(wrapped, hAlign="LEFT")
        t.setStyle(TableStyle([("GRID", (0, 0), (-1, -1), 0.25, colors.black)]))
        return t

    def _text_len(cell) -> int:
        s = "" if cell is None else str(cell)
        return max(1, min(len(s), 80))  # cap to avoid over-influence

    weights = [0] * ncols
    for row in data[: min(len(data), 51)]:  # header + 50
        for i, cell in enumerate(row):
            weights[i] += _text_len(cell)

    total_w = sum(weights) or ncols
    usable_width = page_width_pts - (0.8 * inch)  # be conservative
    min_w = 0.7 * inch
    max_w = 2.6 * inch

    col_widths = [max(min_w, min(max_w, (w / total_w) * usable_width)) for w in weights]
    total = sum(col_widths)
    if total > 0:
        scale = usable_width / total
        col_widths = [cw * scale for cw in col_widths]

    t = Table(wrapped, hAlign="LEFT", colWidths=col_widths, repeatRows=1)
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.black),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("LEADING", (0, 0), (-1, -1), 10),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ("TOPPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    return t


def build_month_pdf(report: MonthReport, transactions: Iterable[Any], title: str = "SpendWise Report") -> bytes:
    """
    Render one month as a PDF:
      - title + month label
      - totals (revenue, expense, balance)
      - expense by category with share of the month's expense
      - every entry of the month

    Returns raw PDF bytes.
    """
    entries = list(transactions)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
    )
    page_width = doc.width + doc.leftMargin + doc.rightMargin
    styles = getSampleStyleSheet()
    story = []

    story.append(Paragraph(_escape(f"{title} – {report.label}"), styles["Title"]))
    story.append(Spacer(1, 12))

    if not entries:
        story.append(Paragraph("No entries to display.", styles["Normal"]))
        doc.build(story)
        return buffer.getvalue()

    story.append(Paragraph("Totals", styles["Heading2"]))
    data = [
        ["Field", "Value"],
        ["Revenue", money_str(report.revenue)],
        ["Expense", money_str(report.expense)],
        ["Balance", money_str(report.balance)],
    ]
    story.append(_make_wrapped_table(data, styles, page_width_pts=page_width))
    story.append(Spacer(1, 10))

    if report.categories:
        story.append(Paragraph("Expense by Category", styles["Heading2"]))
        data = [["Category", "Amount", "Share %"]]
        for c in report.categories:
            data.append([c.category, money_str(c.amount), money_str(c.share)])
        story.append(_make_wrapped_table(data, styles, page_width_pts=page_width))
        story.append(Spacer(1, 10))

    story.append(Paragraph("Entries", styles["Heading2"]))
    data = [["Date", "Type", "Category", "Amount", "Note"]]
    for tx in entries:
        data.append([
            tx.date,
            getattr(tx.type, "value", tx.type),
            tx.category,
            money_str(tx.amount),
            tx.note or "",
        ])
    story.append(_make_wrapped_table(data, styles, page_width_pts=page_width))

    doc.build(story)
    return buffer.getvalue()
