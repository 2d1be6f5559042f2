"""
Invoice data assembly for sales and ad-hoc invoice payloads.

Produces a single dict (the invoice JSON) that the print page, the PDF and the
API all render from. Money is computed with Decimal; GST is charged on the
subtotal and each tax line is rounded to whole rupees.
"""
import base64
import binascii
import io
import json
import logging
import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from urllib.parse import quote, unquote

import qrcode
from django.conf import settings
from django.utils import timezone

from .amount_words import amount_to_words_inr

logger = logging.getLogger(__name__)

CGST_RATE = Decimal('0.015')
SGST_RATE = Decimal('0.015')
IGST_RATE = Decimal('0.03')
DEFAULT_WAITING_PERIOD = 7
DATE_FORMAT = '%d/%m/%Y'

# Buyer and dispatch details printed in the invoice meta block
META_FIELDS = [
    'buyer_state_name', 'buyer_state_code', 'buyer_tin', 'delivery_note', 'reference_number',
    'reference_date', 'other_references', 'buyers_order_number', 'buyers_order_date',
    'dispatch_doc_no', 'delivery_note_date', 'dispatched_through',
]

SAMPLE_INVOICE = {
    'invoice_number': 'INV-2025-001',
    'client_name': 'M/s. Shree Jewels',
    'firm_name': 'Shree Jewels & Co.',
    'gst_number': '27ABCFS1234H1Z8',
    'address': '12, Zaveri Bazaar, Kalbadevi, Mumbai - 400002',
    'phone_number': '+91 99200 11223',
    'items': [
        {'stone_id': 'RBY-0001', 'stone_name': 'Ruby (Manik)', 'carat': 3.25, 'price_per_carat': 25000,
         'total_price': 81250, 'hsn': '7113', 'unit': 'ct', 'quantity': 1},
        {'stone_id': 'BLS-0042', 'stone_name': 'Blue Sapphire (Neelam)', 'carat': 4.10, 'price_per_carat': 32000,
         'total_price': 131200, 'hsn': '7113', 'unit': 'ct', 'quantity': 1},
    ],
    'discount': 5000,
    'buyer_state_name': 'Maharashtra',
    'buyer_state_code': '27',
    'buyer_tin': '098712342391',
    'treatment_disclosures': ['Heated sapphire disclosure as per standard trade practice. No diffusion detected.'],
}


class InvoicePayloadError(ValueError):
    """Raised when an invoice payload cannot be decoded or has bad values"""


def to_decimal(value, field='value'):
    if value is None or value == '':
        return Decimal('0.00')
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvoicePayloadError(f"Invalid number for {field}: {value}")
    if not result.is_finite():
        raise InvoicePayloadError(f"Invalid number for {field}: {value}")
    return result


def to_int(value, field='value', default=0):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvoicePayloadError(f"Invalid whole number for {field}: {value}")


def round_rupees(value):
    return Decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def money(value):
    return Decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def format_inr(amount, decimals=0):
    """Format with Indian digit grouping, e.g. 1234567 -> 'Rs. 12,34,567'"""
    amount = Decimal(str(amount or 0))
    quantum = Decimal('1') if decimals == 0 else Decimal('1').scaleb(-decimals)
    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = '-' if amount < 0 else ''
    whole, _, fraction = f"{abs(amount):f}".partition('.')
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ','.join(groups + [tail])
    text = f"{whole}.{fraction}" if fraction else whole
    return f"Rs. {sign}{text}"


def _flag(value):
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


def _snake(key):
    return re.sub(r'(?<!^)(?=[A-Z])', '_', key).lower()


def normalize_keys(data):
    """Convert camelCase keys from the browser payload to snake_case"""
    if isinstance(data, dict):
        return {_snake(k): normalize_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [normalize_keys(v) for v in data]
    return data


def decode_payload(value):
    """
    Decode an invoice payload given as a dict, a JSON string, a URI-encoded
    JSON string or base64 of either.
    """
    if isinstance(value, dict):
        return normalize_keys(value)
    if not isinstance(value, str) or not value.strip():
        raise InvoicePayloadError('Invoice data is empty')

    text = value.strip()
    try:
        text = base64.b64decode(text, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError, ValueError):
        pass

    try:
        data = json.loads(unquote(text))
    except json.JSONDecodeError:
        raise InvoicePayloadError('Invoice data is not valid JSON')
    if not isinstance(data, dict):
        raise InvoicePayloadError('Invoice data must be a JSON object')
    return normalize_keys(data)


def company_fields(profile):
    return {
        'company_name': profile.company_name,
        'company_tagline': profile.tagline,
        'company_address_lines': profile.address_lines(),
        'company_phone': profile.phone,
        'company_email': profile.email,
        'company_gstin': profile.gstin,
        'company_state_name': profile.state_name,
        'company_state_code': profile.state_code,
        'company_tin': profile.tin,
        'company_pan': profile.pan,
        'bank_name': profile.bank_name,
        'bank_account': profile.bank_account,
        'bank_ifsc': profile.bank_ifsc,
        'bank_branch': profile.bank_branch,
        'payment_terms': profile.payment_terms,
        'destination': profile.destination,
        'terms_of_delivery': profile.terms_of_delivery,
        'declaration': profile.declaration,
    }


def normalize_item(item, default_hsn='7113'):
    if not isinstance(item, dict):
        raise InvoicePayloadError("Each invoice item must be an object")
    carat = to_decimal(item.get('carat'), 'carat')
    price_per_carat = to_decimal(item.get('price_per_carat'), 'price_per_carat')
    total_price = to_decimal(item.get('total_price'), 'total_price') or money(price_per_carat * carat)
    unit = str(item.get('unit') or 'ct').strip()
    quantity = to_int(item.get('quantity') or 1, 'quantity')

    if unit.lower() == 'ct':
        quantity_text = f"{carat:.3f} {unit}"
        rate = price_per_carat
    else:
        quantity_text = f"{quantity} {unit}"
        rate = money(total_price / quantity) if quantity else total_price

    return {
        'stone_id': item.get('stone_id') or '',
        'stone_name': item.get('stone_name') or '',
        'carat': carat,
        'price_per_carat': price_per_carat,
        'total_price': total_price,
        'hsn': item.get('hsn') or default_hsn,
        'unit': unit,
        'quantity': quantity,
        'quantity_text': quantity_text,
        'rate': rate,
    }


def compute_totals(items, discount=0, is_out_of_state=False, subtotal=None,
                   cgst=None, sgst=None, igst=None, total_amount=None):
    """
    Invoice arithmetic. Explicit tax or total values win over computed ones.

    total = max(0, subtotal - discount + taxes); the printed total is rounded
    half-up to whole rupees and the difference shown as rounded off.
    """
    if subtotal is None or subtotal == '':
        subtotal = sum((item['total_price'] for item in items), Decimal('0.00'))
    subtotal = to_decimal(subtotal, 'subtotal')
    discount = to_decimal(discount, 'discount')

    if is_out_of_state:
        igst = to_decimal(igst, 'igst') if igst not in (None, '') else round_rupees(subtotal * IGST_RATE)
        cgst = sgst = None
        taxes = [{'label': 'IGST (3%)', 'value': igst}]
    else:
        cgst = to_decimal(cgst, 'cgst') if cgst not in (None, '') else round_rupees(subtotal * CGST_RATE)
        sgst = to_decimal(sgst, 'sgst') if sgst not in (None, '') else round_rupees(subtotal * SGST_RATE)
        igst = None
        taxes = [
            {'label': 'CGST (1.5%)', 'value': cgst},
            {'label': 'SGST (1.5%)', 'value': sgst},
        ]

    tax_total = (cgst or Decimal('0')) + (sgst or Decimal('0')) + (igst or Decimal('0'))
    if total_amount not in (None, '', 0):
        total = to_decimal(total_amount, 'total_amount')
    else:
        total = max(Decimal('0.00'), subtotal - discount + tax_total)

    rounded_total = round_rupees(total)
    rounded_off = money(rounded_total - total)

    taxable_value = subtotal - discount
    return {
        'subtotal': subtotal,
        'discount': discount,
        'cgst': cgst,
        'sgst': sgst,
        'igst': igst,
        'taxes': taxes,
        'tax_total': tax_total,
        'total_amount': total,
        'rounded_total': rounded_total,
        'rounded_off': rounded_off,
        'taxable_value': taxable_value,
    }


def _rate_text(amount, taxable):
    if not amount or not taxable:
        return '—'
    return f"{(amount / taxable * 100).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}%"


def hsn_summary(items, totals):
    taxable = totals['taxable_value']
    cgst = totals['cgst'] or Decimal('0')
    sgst = totals['sgst'] or Decimal('0')
    igst = totals['igst'] or Decimal('0')
    return {
        'hsn': items[0]['hsn'] if items else '7113',
        'taxable_value': taxable,
        'cgst_rate': _rate_text(cgst, taxable),
        'cgst_amount': cgst,
        'sgst_rate': _rate_text(sgst, taxable),
        'sgst_amount': sgst,
        'igst_rate': _rate_text(igst, taxable),
        'igst_amount': igst,
        'total_tax': cgst + sgst + igst,
    }


def generate_qr_data_url(target):
    """PNG QR code for the given URL as a base64 data URL ('' on failure)"""
    try:
        qr = qrcode.QRCode(border=0, box_size=4)
        qr.add_data(target)
        qr.make(fit=True)
        img = qr.make_image(fill_color='black', back_color='white')
        buffer = io.BytesIO()
        img.save(buffer)
        return f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode('utf-8')}"
    except Exception as e:
        logger.warning(f"QR code generation failed for {target}: {str(e)}")
        return ''


def qr_target_for(payload, invoice_number, base_url=''):
    target = payload.get('qr_url') or payload.get('invoice_url')
    if target:
        return target
    base_url = (base_url or getattr(settings, 'INVOICE_BASE_URL', '') or '').rstrip('/')
    return f"{base_url}/invoice/print?invoice={quote(str(invoice_number))}"


def build_invoice(payload, profile, base_url='', include_qr=True):
    """
    Merge a (snake_case) payload over the company profile and the sample
    invoice, then compute totals, words, HSN summary and QR code.
    """
    payload = dict(payload or {})
    raw_items = payload.get('items') if isinstance(payload.get('items'), list) and payload.get('items') else None
    if raw_items is None:
        # No items means a preview of the sample invoice
        payload = {**SAMPLE_INVOICE, **payload}
        raw_items = SAMPLE_INVOICE['items']

    data = {field: '' for field in META_FIELDS}
    data.update(company_fields(profile))
    data.update({k: v for k, v in payload.items() if v not in (None, '')})

    items = [normalize_item(item, profile.default_hsn or '7113') for item in raw_items]
    is_out_of_state = _flag(payload.get('is_out_of_state'))
    totals = compute_totals(
        items,
        discount=payload.get('discount'),
        is_out_of_state=is_out_of_state,
        subtotal=payload.get('subtotal'),
        cgst=payload.get('cgst'),
        sgst=payload.get('sgst'),
        igst=payload.get('igst'),
        total_amount=payload.get('total_amount'),
    )

    invoice_number = payload.get('invoice_number') or SAMPLE_INVOICE['invoice_number']
    payment_status = str(payload.get('payment_status') or 'Unpaid')
    waiting_period = payload.get('waiting_period')
    waiting_period = to_int(waiting_period, 'waiting_period', DEFAULT_WAITING_PERIOD)
    is_trustworthy = payload.get('is_trustworthy')
    if is_trustworthy is None:
        is_trustworthy = True
    disclosures = payload.get('treatment_disclosures') or []
    if isinstance(disclosures, str):
        disclosures = [disclosures]

    data.update(totals)
    data.update({
        'invoice_number': invoice_number,
        'date': payload.get('date') or timezone.localdate().strftime(DATE_FORMAT),
        'due_date': payload.get('due_date') or '',
        'items': items,
        'is_out_of_state': is_out_of_state,
        'payment_status': payment_status,
        'payment_status_class': payment_status.lower(),
        'waiting_period': waiting_period,
        'is_trustworthy': _flag(is_trustworthy),
        'treatment_disclosures': disclosures,
        'amount_in_words': f"Indian Rupees {amount_to_words_inr(totals['rounded_total'])}",
        'tax_in_words': f"Indian Rupees {amount_to_words_inr(totals['tax_total'])}",
        'hsn_summary': hsn_summary(items, totals),
    })

    data['qr_target'] = qr_target_for(payload, invoice_number, base_url)
    data['qr_code'] = generate_qr_data_url(data['qr_target']) if include_qr else ''
    return data


def invoice_payload_for_sale(sale):
    """Invoice payload for a recorded sale (one line for the sold stone)"""
    stone = sale.stone
    client = sale.client

    stone_name = stone.type
    if stone.origin:
        stone_name += f" ({stone.origin})"
    price_per_carat = money(sale.total_amount / stone.carat) if stone.carat else sale.total_amount

    payload = {
        'invoice_number': sale.sale_id,
        'date': sale.date.strftime(DATE_FORMAT),
        'client_name': client.name,
        'firm_name': client.get_client_type_display() if client.client_type else '',
        'address': client.address,
        'phone_number': client.phone or '',
        'items': [{
            'stone_id': stone.stone_id,
            'stone_name': stone_name,
            'carat': stone.carat,
            'price_per_carat': price_per_carat,
            'total_price': sale.total_amount,
            'unit': 'ct',
            'quantity': sale.quantity,
        }],
        'discount': sale.discount,
        'is_out_of_state': sale.is_out_of_state,
        'payment_status': sale.payment_status,
        'waiting_period': DEFAULT_WAITING_PERIOD,
        'is_trustworthy': client.loyalty_level != 'Low',
        'treatment_disclosures': [],
    }
    if sale.payment_status != 'Paid':
        payload['due_date'] = (sale.date + timedelta(days=DEFAULT_WAITING_PERIOD)).strftime(DATE_FORMAT)
    if stone.certified and stone.certificate_lab:
        payload['treatment_disclosures'].append(f"Stone {stone.stone_id} certified by {stone.certificate_lab}.")
    return payload


def invoice_json(invoice):
    """Make an invoice dict JSON friendly (Decimals become floats)"""
    if isinstance(invoice, dict):
        return {k: invoice_json(v) for k, v in invoice.items()}
    if isinstance(invoice, list):
        return [invoice_json(v) for v in invoice]
    if isinstance(invoice, Decimal):
        return float(invoice)
    return invoice
