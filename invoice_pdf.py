"""Printable invoice for an order summary."""

import io
from datetime import date

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


LEFT = 54
RIGHT = letter[0] - 54
TOP = letter[1] - 60
LINE_HEIGHT = 16
BOTTOM_MARGIN = 60


def format_cents(cents):
    """1234 -> "$12.34", -500 -> "-$5.00" """
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:,.2f}"


class _InvoiceWriter:
    def __init__(self, pdf):
        self.pdf = pdf
        self.y = TOP

    def advance(self, lines=1):
        self.y -= LINE_HEIGHT * lines
        if self.y < BOTTOM_MARGIN:
            self.pdf.showPage()
            self.pdf.setFont("Helvetica", 10)
            self.y = TOP

    def heading(self, text, size=12):
        self.pdf.setFont("Helvetica-Bold", size)
        self.pdf.drawString(LEFT, self.y, text)
        self.pdf.setFont("Helvetica", 10)
        self.advance()

    def row(self, label, amount, bold=False, struck=False):
        self.pdf.setFont("Helvetica-Bold" if bold else "Helvetica", 10)
        self.pdf.drawString(LEFT, self.y, label)
        self.pdf.drawRightString(RIGHT, self.y, amount)
        if struck:
            width = self.pdf.stringWidth(amount, "Helvetica", 10)
            self.pdf.line(RIGHT - width, self.y + 3, RIGHT, self.y + 3)
        self.pdf.setFont("Helvetica", 10)
        self.advance()

    def rule(self):
        self.pdf.line(LEFT, self.y + LINE_HEIGHT / 2, RIGHT, self.y + LINE_HEIGHT / 2)
        self.advance(0.5)


def render_invoice_pdf(summary, title="Invoice", customer_name="", event_date=None):
    """
    Draw an OrderSummaryDisplay onto a one-or-more page letter PDF.
    Returns a BytesIO positioned at the start.
    """
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.setTitle(title)
    out = _InvoiceWriter(pdf)

    out.heading(title, size=16)
    if customer_name:
        out.row(f"Customer: {customer_name}", "")
    event_date = event_date or date.today()
    out.row(f"Event date: {event_date.strftime('%A, %m/%d/%Y')}", "")
    pickup = "Same-day pickup" if summary.pickup_preference == "same_day" else "Next-day pickup"
    if summary.is_multi_day:
        pickup = f"{pickup} (multi-day)"
    out.row(pickup, "")
    out.advance()

    out.heading("Items")
    for item in summary.items:
        label = f"{item.name} ({item.mode}) x{item.qty}"
        out.row(label, format_cents(item.line_total_cents))
    out.row("Subtotal", format_cents(summary.subtotal_cents), bold=True)
    out.advance()

    if summary.fees:
        out.heading("Fees")
        for line in summary.fees:
            if line.waived:
                original = format_cents(line.original_amount_cents or 0)
                out.row(f"{line.name} (waived, was {original})", format_cents(0), struck=True)
            else:
                out.row(line.name, format_cents(line.amount_cents))

    for line in summary.discounts:
        out.row(f"Discount: {line.name}", format_cents(-line.amount_cents))
    for line in summary.custom_fees:
        out.row(line.name, format_cents(line.amount_cents))

    out.rule()
    if summary.tax_waived:
        original_tax = format_cents(summary.original_tax_cents or 0)
        out.row(f"Tax (6%) (waived, was {original_tax})", format_cents(0), struck=True)
    else:
        out.row("Tax (6%)", format_cents(summary.tax_cents))
    if summary.tip_cents:
        out.row("Tip", format_cents(summary.tip_cents))
    out.row("Total", format_cents(summary.total_cents), bold=True)
    out.row("Deposit due", format_cents(summary.deposit_due_cents))
    if summary.deposit_paid_cents:
        out.row("Deposit paid", format_cents(summary.deposit_paid_cents))
    out.row("Balance due", format_cents(summary.balance_due_cents), bold=True)

    pdf.showPage()
    pdf.save()
    buffer.seek(0)
    return buffer
