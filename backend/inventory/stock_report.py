"""
Stock report PDF built with the reportlab canvas
"""
from io import BytesIO
from decimal import Decimal
from django.utils import timezone
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas as rl_canvas

COLUMNS = [
    ('Stone ID', 0), ('Type', 110), ('Carat', 210), ('Qty', 255), ('Origin', 290), ('Grade', 370),
    ('Lab', 415), ('Status', 480), ('Supplier', 550), ('Purchase', 660), ('Selling', 735),
]


def build_stock_report_pdf(stones, company_name='', title='Stock Report'):
    """Render the given stones as a landscape A4 table with totals"""
    buf = BytesIO()
    c = rl_canvas.Canvas(buf, pagesize=landscape(A4))
    W, H = landscape(A4)
    margin = 0.5 * inch

    def text_line(x, y, s, size=9, bold=False):
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        c.drawString(x, y, str(s))

    def header_row(y):
        for label, offset in COLUMNS:
            text_line(margin + offset, y, label, 9, bold=True)
        c.line(margin, y - 4, W - margin, y - 4)
        return y - 16

    c.setTitle(title)
    y = H - margin
    if company_name:
        text_line(margin, y, company_name, 14, bold=True); y -= 18
    text_line(margin, y, title, 12, bold=True); y -= 14
    text_line(margin, y, f"Generated: {timezone.localtime().strftime('%Y-%m-%d %H:%M')}", 8); y -= 18
    y = header_row(y)

    total_carat = Decimal('0.00')
    total_quantity = 0
    total_purchase = Decimal('0.00')
    total_selling = Decimal('0.00')
    count = 0

    for stone in stones:
        if y < margin + 40:
            c.showPage()
            y = header_row(H - margin)
        row = [
            stone.stone_id, stone.type[:16], f"{stone.carat}", str(stone.quantity), (stone.origin or '-')[:14],
            stone.grade or '-', (stone.certificate_lab or '-')[:10], stone.status,
            (stone.supplier.name if stone.supplier_id else '-')[:18],
            f"{stone.purchase_price:,.2f}", f"{stone.selling_price:,.2f}",
        ]
        for (_, offset), value in zip(COLUMNS, row):
            text_line(margin + offset, y, value, 8)
        y -= 12
        count += 1
        total_carat += stone.carat
        total_quantity += stone.quantity
        total_purchase += stone.purchase_price
        total_selling += stone.selling_price

    if y < margin + 40:
        c.showPage(); y = H - margin
    c.line(margin, y + 6, W - margin, y + 6)
    y -= 6
    text_line(margin, y, f"Stones: {count}", 9, bold=True)
    text_line(margin + 210, y, f"{total_carat} ct", 9, bold=True)
    text_line(margin + 255, y, str(total_quantity), 9, bold=True)
    text_line(margin + 660, y, f"{total_purchase:,.2f}", 9, bold=True)
    text_line(margin + 735, y, f"{total_selling:,.2f}", 9, bold=True)

    c.showPage()
    c.save()
    return buf.getvalue()
