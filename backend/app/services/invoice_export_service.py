"""Customer history PDF and single-invoice print export.

Both are formatting only: every figure comes from fields already stored on
the invoices.
"""

import re
from datetime import datetime
from decimal import Decimal
from html import escape
from io import BytesIO
from typing import Iterable
from urllib.parse import quote

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.app.core.settings import get_settings
from backend.app.core.time import utc_now
from backend.app.models.business_settings import BusinessSettings
from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.services.billing import is_overpaid

HISTORY_HEADERS = ["Date", "Time", "Duration", "Rate/min", "Total", "Received", "Pending"]
HEADER_FILL = colors.HexColor("#4263EB")
PENDING_COLOR = colors.HexColor("#DC2626")
SETTLED_COLOR = colors.HexColor("#059669")


def _amount(value) -> str:
    return f"{Decimal(str(value or 0)):.2f}"


def _rate(value) -> str:
    return f"{Decimal(str(value or 0)):.3f}"


def pending_label(amount_pending) -> str:
    return "Overpaid" if is_overpaid(amount_pending) else "Pending"


def history_filename(customer: Customer, ascii_only: bool = False) -> str:
    slug = re.sub(r"\s+", "_", customer.name.strip())
    # Characters that cannot appear in a download name or a quoted header value
    unsafe = r"[^A-Za-z0-9_.-]" if ascii_only else r'[\x00-\x1f\x7f/\\"]'
    slug = re.sub(unsafe, "", slug).strip("_") or "customer"
    return f"{slug}_invoice_history.pdf"


def attachment_header(filename: str, fallback: str) -> str:
    """Content-Disposition value with an ASCII name and the RFC 5987 UTF-8 name."""
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def sort_for_history(invoices: Iterable[Invoice]) -> list[Invoice]:
    return sorted(invoices, key=lambda inv: (inv.date, inv.id), reverse=True)


def build_history_rows(invoices: Iterable[Invoice]) -> list[list[str]]:
    rows = []
    for inv in sort_for_history(invoices):
        pending = _amount(inv.amount_pending)
        if is_overpaid(inv.amount_pending):
            pending = f"{pending} (overpaid)"
        rows.append(
            [
                inv.date.isoformat(),
                f"{inv.start_time} - {inv.end_time}",
                f"{inv.duration_minutes} min",
                _rate(inv.rate_per_minute),
                _amount(inv.total_cost),
                _amount(inv.amount_received),
                pending,
            ]
        )
    return rows


def build_customer_history_pdf(
    customer: Customer,
    invoices: Iterable[Invoice],
    business: BusinessSettings,
    generated_at: datetime | None = None,
) -> bytes:
    invoices = sort_for_history(invoices)
    generated_at = generated_at or utc_now()
    styles = getSampleStyleSheet()

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=14 * mm,
        leftMargin=14 * mm,
        topMargin=16 * mm,
        bottomMargin=16 * mm,
        title=f"{business.business_name} Invoice History",
    )

    story = [
        Paragraph(escape(f"{business.business_name} Invoice History"), styles["Title"]),
        Paragraph(escape(f"Customer: {customer.name}"), styles["Normal"]),
    ]
    if customer.contact:
        story.append(Paragraph(escape(f"Contact: {customer.contact}"), styles["Normal"]))
    story.append(Paragraph(f"Generated: {generated_at:%Y-%m-%d %H:%M} UTC", styles["Normal"]))
    story.append(Spacer(1, 8))

    data = [HISTORY_HEADERS] + build_history_rows(invoices)
    if not invoices:
        data.append(["No invoices yet.", "", "", "", "", "", ""])
    table = Table(data, repeatRows=1)
    table_style = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
    ]
    for row_index, inv in enumerate(invoices, start=1):
        color = SETTLED_COLOR if Decimal(str(inv.amount_pending or 0)) <= 0 else PENDING_COLOR
        table_style.append(("TEXTCOLOR", (6, row_index), (6, row_index), color))
    table.setStyle(TableStyle(table_style))
    story.append(table)

    doc.build(story)
    return buffer.getvalue()


def build_invoice_print_html(invoice: Invoice, customer: Customer, business: BusinessSettings) -> str:
    """Standalone printable invoice document."""
    currency = escape(get_settings().currency)
    title = escape(f"{business.business_name} Invoice")
    label = pending_label(invoice.amount_pending)
    pending_class = "overpaid" if label == "Overpaid" else "pending"
    pending_value = abs(Decimal(str(invoice.amount_pending or 0)))
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui; padding: 24px; }}
      .card {{ max-width: 700px; margin: 0 auto; border: 1px solid #e5e7eb; padding: 24px; border-radius: 16px; }}
      .row {{ display: flex; justify-content: space-between; }}
      h1 {{ font-size: 22px; margin: 0 0 8px; }}
      table {{ width: 100%; border-collapse: collapse; margin-top: 16px; }}
      th, td {{ text-align: left; padding: 8px; border-bottom: 1px solid #e5e7eb; }}
      .pending {{ color: #dc2626; }}
      .overpaid {{ color: #059669; }}
    </style>
  </head>
  <body>
    <div class="card">
      <h1>{title}</h1>
      <div>Service Provider: {escape(business.business_name)}</div>
      <div>Contact: {escape(business.business_contact)}</div>
      <div>Address: {escape(business.business_address)}</div>
      <hr style="margin:16px 0;" />
      <div class="row"><strong>Customer:</strong> <span>{escape(customer.name)}</span></div>
      <div class="row"><strong>Date:</strong> <span>{invoice.date.isoformat()}</span></div>
      <div class="row"><strong>Time:</strong> <span>{escape(invoice.start_time)} - {escape(invoice.end_time)} ({invoice.duration_minutes} minutes)</span></div>
      <table>
        <thead><tr><th>Description</th><th>Rate/min</th><th>Total</th></tr></thead>
        <tbody>
          <tr>
            <td>Water Supply ({invoice.duration_minutes} minutes)</td>
            <td>{currency} {_rate(invoice.rate_per_minute)}</td>
            <td>{currency} {_amount(invoice.total_cost)}</td>
          </tr>
        </tbody>
      </table>
      <div class="row" style="margin-top:12px;"><strong>Amount Received:</strong> <span>{currency} {_amount(invoice.amount_received)}</span></div>
      <div class="row {pending_class}"><strong>Amount {label}:</strong> <span>{currency} {_amount(pending_value)}</span></div>
    </div>
    <script>window.onload = () => window.print();</script>
  </body>
</html>
"""
