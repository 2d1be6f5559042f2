"""
Invoice PDF rendered with the reportlab canvas from the invoice dict
"""
import base64
from io import BytesIO
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as rl_canvas

from .invoicing import format_inr

STATUS_COLOURS = {
    'Paid': (34 / 255, 197 / 255, 94 / 255),
    'Partial': (234 / 255, 179 / 255, 8 / 255),
    'Unpaid': (239 / 255, 68 / 255, 68 / 255),
}
GREEN = (34 / 255, 197 / 255, 94 / 255)
RED = (239 / 255, 68 / 255, 68 / 255)

# (heading, x offset in mm from the left margin, right aligned)
ITEM_COLUMNS = [
    ('Stone ID', 0, False),
    ('Gemstone', 38, False),
    ('Carat', 121, True),
    ('Price/Carat', 146, True),
    ('Total', 170, True),
]


def _qr_image(data_url):
    if not data_url or ',' not in data_url:
        return None
    return ImageReader(BytesIO(base64.b64decode(data_url.split(',', 1)[1])))


def build_invoice_pdf(invoice):
    buf = BytesIO()
    c = rl_canvas.Canvas(buf, pagesize=A4)
    W, H = A4
    left = 20 * mm
    right = W - 20 * mm

    def text(x, y, s, size=10, bold=False, align='left', colour=(0, 0, 0)):
        c.setFillColorRGB(*colour)
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        if align == 'right':
            c.drawRightString(x, y, str(s))
        elif align == 'center':
            c.drawCentredString(x, y, str(s))
        else:
            c.drawString(x, y, str(s))

    c.setTitle(f"Invoice {invoice['invoice_number']}")

    # Header
    text(W / 2, H - 18 * mm, invoice.get('company_name', ''), 22, bold=True, align='center')
    if invoice.get('company_tagline'):
        text(W / 2, H - 26 * mm, invoice['company_tagline'], 11, align='center', colour=(0.35, 0.35, 0.35))

    y = H - 40 * mm
    for line in invoice.get('company_address_lines', []):
        text(left, y, line); y -= 7 * mm
    contact = ' | '.join(filter(None, [
        f"Phone: {invoice['company_phone']}" if invoice.get('company_phone') else '',
        f"Email: {invoice['company_email']}" if invoice.get('company_email') else '',
    ]))
    if contact:
        text(left, y, contact); y -= 7 * mm
    if invoice.get('company_gstin'):
        text(left, y, f"GST: {invoice['company_gstin']}")

    text(right, H - 40 * mm, 'INVOICE', 16, bold=True, align='right')
    text(right, H - 50 * mm, f"Invoice #: {invoice['invoice_number']}", align='right')
    text(right, H - 57 * mm, f"Date: {invoice['date']}", align='right')
    if invoice.get('due_date'):
        text(right, H - 64 * mm, f"Due Date: {invoice['due_date']}", align='right')

    # Bill to
    text(left, H - 82 * mm, 'Bill To:', 12, bold=True)
    y = H - 92 * mm
    for line in [
        invoice.get('client_name'),
        invoice.get('firm_name'),
        invoice.get('address'),
        f"Phone: {invoice['phone_number']}" if invoice.get('phone_number') else '',
        f"GST: {invoice['gst_number']}" if invoice.get('gst_number') else '',
    ]:
        if line:
            text(left, y, str(line)[:70]); y -= 7 * mm
    bill_to_bottom = y

    status = invoice.get('payment_status', 'Unpaid')
    text(right, H - 82 * mm, f"Status: {status}", bold=True, align='right', colour=STATUS_COLOURS.get(status, RED))
    if invoice.get('waiting_period') and status != 'Paid':
        text(right, H - 90 * mm, f"Waiting Period: {invoice['waiting_period']} days", align='right')
    if invoice.get('is_trustworthy'):
        text(right, H - 98 * mm, 'Trustworthy Client', align='right', colour=GREEN)
    else:
        text(right, H - 98 * mm, 'Requires Follow-up', align='right', colour=RED)

    # Items
    y = min(bill_to_bottom - 16 * mm, H - 118 * mm)
    text(left, y + 6 * mm, 'Items', 12, bold=True)
    c.setFillColorRGB(0.94, 0.94, 0.94)
    c.rect(left, y - 2 * mm, right - left, 7 * mm, fill=1, stroke=0)
    for heading, offset, align_right in ITEM_COLUMNS:
        x = left + offset * mm
        text(x + 25 * mm if align_right else x + 1 * mm, y, heading, 9, bold=True, align='right' if align_right else 'left')
    y -= 8 * mm
    for item in invoice['items']:
        if y < 40 * mm:
            c.showPage(); y = H - 20 * mm
        row = [
            item['stone_id'],
            item['stone_name'][:32],
            f"{item['carat']:.2f} ct",
            f"{format_inr(item['price_per_carat'])}/ct",
            format_inr(item['total_price']),
        ]
        for (heading, offset, align_right), value in zip(ITEM_COLUMNS, row):
            x = left + offset * mm
            text(x + 25 * mm if align_right else x + 1 * mm, y, value, 9, align='right' if align_right else 'left')
        c.setStrokeColorRGB(0.8, 0.8, 0.8)
        c.line(left, y - 2.5 * mm, right, y - 2.5 * mm)
        y -= 7 * mm

    # Totals
    y -= 5 * mm
    lines = [f"Subtotal: {format_inr(invoice['subtotal'])}"]
    if invoice.get('discount'):
        lines.append(f"Discount: -{format_inr(invoice['discount'])}")
    for tax in invoice['taxes']:
        lines.append(f"{tax['label']}: {format_inr(tax['value'])}")
    if invoice.get('rounded_off'):
        lines.append(f"Rounded Off: {format_inr(invoice['rounded_off'], decimals=2)}")
    for line in lines:
        text(right, y, line, align='right'); y -= 7 * mm
    text(right, y - 3 * mm, f"Total: {format_inr(invoice['rounded_total'])}", 12, bold=True, align='right')

    qr = _qr_image(invoice.get('qr_code'))
    if qr is not None:
        c.drawImage(qr, left, y - 5 * mm, width=25 * mm, height=25 * mm, preserveAspectRatio=True, anchor='sw')
    y -= 14 * mm

    text(left, y, 'Amount Chargeable (in words)', 9); y -= 5 * mm
    text(left, y, invoice['amount_in_words'], 9, bold=True); y -= 5 * mm
    text(left, y, f"Tax Amount (in words): {invoice['tax_in_words']}", 8); y -= 10 * mm

    # Disclosures
    if invoice.get('treatment_disclosures'):
        text(left, y, 'Disclosures', 11, bold=True); y -= 6 * mm
        for line in invoice['treatment_disclosures']:
            text(left + 2 * mm, y, f"• {line}"[:110], 9); y -= 5 * mm

    # Footer
    grey = (120 / 255, 120 / 255, 120 / 255)
    text(W / 2, 20 * mm, 'Thank you for your business!', 8, align='center', colour=grey)
    if invoice.get('company_email'):
        text(W / 2, 15 * mm, f"For any queries, please contact us at {invoice['company_email']}", 8, align='center', colour=grey)

    c.showPage()
    c.save()
    return buf.getvalue()
