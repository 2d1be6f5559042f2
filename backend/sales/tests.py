"""
Test suite for Sales module
Tests: Sale recording, payments, loyalty, deletion, invoice arithmetic and rendering
"""
import base64
import json
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog, CompanyProfile
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.sales.amount_words import amount_to_words_inr
from backend.sales.invoicing import (
    InvoicePayloadError, build_invoice, compute_totals, decode_payload, format_inr, normalize_item
)
from backend.sales.models import Sale
from backend.sales.utils import payment_status_for


class InvoiceArithmeticTests(TestCase):
    """GST, rounding and words"""

    def test_in_state_taxes(self):
        """In-state sales carry CGST and SGST at 1.5% each"""
        items = [normalize_item({'carat': 4, 'price_per_carat': 25000})]
        totals = compute_totals(items, discount=2000)
        self.assertEqual(totals['subtotal'], Decimal('100000.00'))
        self.assertEqual(totals['cgst'], Decimal('1500'))
        self.assertEqual(totals['sgst'], Decimal('1500'))
        self.assertIsNone(totals['igst'])
        self.assertEqual(totals['total_amount'], Decimal('101000.00'))

    def test_out_of_state_taxes(self):
        """Out-of-state sales carry IGST at 3%"""
        items = [normalize_item({'total_price': 50000})]
        totals = compute_totals(items, is_out_of_state=True)
        self.assertEqual(totals['igst'], Decimal('1500'))
        self.assertIsNone(totals['cgst'])
        self.assertEqual(totals['rounded_total'], Decimal('51500'))

    def test_total_never_negative(self):
        """A discount larger than the subtotal gives a zero total"""
        items = [normalize_item({'total_price': 1000})]
        totals = compute_totals(items, discount=5000)
        self.assertEqual(totals['total_amount'], Decimal('0.00'))

    def test_taxes_round_half_up(self):
        """Tax lines are rounded to whole rupees half-up"""
        items = [normalize_item({'total_price': 212450})]
        totals = compute_totals(items)
        self.assertEqual(totals['cgst'], Decimal('3187'))

    def test_format_inr(self):
        """Indian digit grouping"""
        self.assertEqual(format_inr(1234567), 'Rs. 12,34,567')
        self.assertEqual(format_inr(999), 'Rs. 999')

    def test_amount_in_words(self):
        """Lakh and crore grouping with paise"""
        self.assertEqual(
            amount_to_words_inr(Decimal('1234567.50')),
            'Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven and Fifty Paise'
        )
        self.assertEqual(amount_to_words_inr(20000000), 'Two Crore Only')
        self.assertEqual(amount_to_words_inr(0), 'Zero Only')

    def test_amount_in_words_thousands_of_crores(self):
        """Crore counts of a thousand and more group like any other number"""
        self.assertEqual(amount_to_words_inr(Decimal('10000000000')), 'One Thousand Crore Only')
        self.assertEqual(
            amount_to_words_inr(Decimal('25000000000')),
            'Two Thousand Five Hundred Crore Only'
        )
        self.assertEqual(
            amount_to_words_inr(Decimal('123456789012')),
            'Twelve Thousand Three Hundred Forty Five Crore Sixty Seven Lakh Eighty Nine Thousand Twelve Only'
        )

    def test_decode_payload_variants(self):
        """Payloads decode from JSON, URI-encoded JSON and base64"""
        raw = json.dumps({'invoiceNumber': 'INV-7'})
        self.assertEqual(decode_payload(raw), {'invoice_number': 'INV-7'})
        self.assertEqual(decode_payload('%7B%22invoiceNumber%22%3A%22INV-7%22%7D'), {'invoice_number': 'INV-7'})
        encoded = base64.b64encode(raw.encode('utf-8')).decode('ascii')
        self.assertEqual(decode_payload(encoded), {'invoice_number': 'INV-7'})
        with self.assertRaises(InvoicePayloadError):
            decode_payload('not json')

    def test_sample_invoice(self):
        """An empty payload renders the sample invoice"""
        invoice = build_invoice({}, CompanyProfile.get_solo(), include_qr=False)
        self.assertEqual(invoice['invoice_number'], 'INV-2025-001')
        self.assertEqual(invoice['subtotal'], Decimal('212450'))
        self.assertEqual(invoice['rounded_total'], Decimal('213824'))
        self.assertTrue(invoice['amount_in_words'].startswith('Indian Rupees Two Lakh Thirteen Thousand'))

    def test_payment_status_for(self):
        """Status follows the amount paid"""
        self.assertEqual(payment_status_for(0, 1000), 'Unpaid')
        self.assertEqual(payment_status_for(400, 1000), 'Partial')
        self.assertEqual(payment_status_for(1000, 1000), 'Paid')


class SaleTests(TestCase):
    """Test sale endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.buyer = TestDataFactory.create_client(name='Shree Jewels')
        self.stone = TestDataFactory.create_stone(
            stone_type='Ruby', carat=Decimal('2.50'),
            purchase_price=Decimal('50000.00'), selling_price=Decimal('75000.00')
        )

    def _create_sale(self, **overrides):
        data = {
            'client': self.buyer.id,
            'stone': self.stone.id,
            'total_amount': '80000.00',
        }
        data.update(overrides)
        return self.client.post('/api/sales/', data, format='json')

    def test_create_sale_marks_stone_sold(self):
        """Recording a sale computes profit and marks the stone sold"""
        response = self._create_sale()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['sale_id'].startswith('SALE-'))
        self.assertEqual(Decimal(response.data['profit']), Decimal('30000.00'))
        self.assertEqual(response.data['payment_status'], 'Unpaid')
        self.stone.refresh_from_db()
        self.assertEqual(self.stone.status, 'Sold')
        self.assertTrue(AuditLog.objects.filter(action='sale_create').exists())

    def test_cannot_sell_sold_stone(self):
        """A stone can only be sold once"""
        self._create_sale()
        response = self._create_sale()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('stone', response.data)

    def test_total_must_be_positive(self):
        """Zero totals are rejected"""
        response = self._create_sale(total_amount='0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_discount_cannot_exceed_total(self):
        """Discount is capped by the total"""
        response = self._create_sale(discount='90000.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('discount', response.data)

    def test_paid_sale_awards_loyalty(self):
        """A fully paid sale credits loyalty points once"""
        response = self._create_sale(amount_paid='80000.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['payment_status'], 'Paid')
        self.buyer.refresh_from_db()
        self.assertEqual(self.buyer.loyalty_points, 80)

        sale = Sale.objects.get()
        self.client.patch(f'/api/sales/{sale.id}/', {'notes': 'Delivered'}, format='json')
        self.buyer.refresh_from_db()
        self.assertEqual(self.buyer.loyalty_points, 80)

    def test_payments_move_status(self):
        """Payments accumulate until the sale is paid"""
        sale_pk = self._create_sale().data['id']

        response = self.client.post(f'/api/sales/{sale_pk}/payments/', {'amount': '30000.00', 'payment_method': 'upi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sale']['payment_status'], 'Partial')
        self.assertEqual(response.data['loyalty_points_awarded'], 0)

        response = self.client.post(f'/api/sales/{sale_pk}/payments/', {'amount': '50000.00'}, format='json')
        self.assertEqual(response.data['sale']['payment_status'], 'Paid')
        self.assertEqual(response.data['loyalty_points_awarded'], 80)

        response = self.client.post(f'/api/sales/{sale_pk}/payments/', {'amount': '10.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(f'/api/sales/{sale_pk}/payments/')
        self.assertEqual(len(response.data), 2)

    def test_delete_sale_restocks_and_revokes(self):
        """Deleting a sale returns the stone and takes back loyalty points"""
        sale_pk = self._create_sale(amount_paid='80000.00').data['id']
        response = self.client.delete(f'/api/sales/{sale_pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.stone.refresh_from_db()
        self.buyer.refresh_from_db()
        self.assertEqual(self.stone.status, 'In Stock')
        self.assertEqual(self.buyer.loyalty_points, 0)

    def test_filters(self):
        """List filters by client and payment status"""
        self._create_sale(amount_paid='80000.00')
        other_stone = TestDataFactory.create_stone()
        TestDataFactory.create_sale(stone=other_stone)

        response = self.client.get(f'/api/sales/?client={self.buyer.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/sales/?payment_status=Unpaid')
        self.assertEqual(len(response.data), 1)

    def test_sale_invoice_json(self):
        """Invoice data for a sale uses the sale id and due date"""
        sale = TestDataFactory.create_sale(client=self.buyer, stone=self.stone, total_amount=Decimal('100000.00'))
        response = self.client.get(f'/api/sales/{sale.id}/invoice/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['invoice_number'], sale.sale_id)
        self.assertEqual(response.data['client_name'], 'Shree Jewels')
        self.assertEqual(response.data['cgst'], 1500.0)
        self.assertEqual(response.data['rounded_total'], 103000.0)
        self.assertNotEqual(response.data['due_date'], '')
        self.assertTrue(response.data['qr_code'].startswith('data:image/png;base64,'))

    def test_sale_invoice_print_and_pdf(self):
        """Invoice renders as HTML and as PDF"""
        sale = TestDataFactory.create_sale(client=self.buyer, stone=self.stone)
        response = self.client.get(f'/api/sales/{sale.id}/invoice/print/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn(sale.sale_id, response.content.decode('utf-8'))

        response = self.client.get(f'/api/sales/{sale.id}/invoice/pdf/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.content.startswith(b'%PDF'))
        self.assertEqual(AuditLog.objects.filter(action='invoice_generate').count(), 2)

    def test_invoice_print_payload(self):
        """Ad-hoc payloads accept camelCase keys"""
        response = self.client.post('/api/invoices/print/?output=json', {
            'invoiceNumber': 'INV-9',
            'clientName': 'Walk-in',
            'isOutOfState': 'true',
            'items': [{'stoneName': 'Emerald', 'carat': 2, 'pricePerCarat': 10000}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['invoice_number'], 'INV-9')
        self.assertEqual(response.data['subtotal'], 20000.0)
        self.assertEqual(response.data['igst'], 600.0)

    def test_invoice_print_bad_data(self):
        """Undecodable payloads are rejected"""
        response = self.client.post('/api/invoices/print/', {'data': 'not json'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invoice_print_sample(self):
        """An empty body renders the sample invoice page"""
        response = self.client.post('/api/invoices/print/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('INV-2025-001', response.content.decode('utf-8'))

    def test_invoice_print_rejects_bad_values(self):
        """Malformed item values and waiting periods are rejected"""
        bad_payloads = [
            {'items': [{'carat': 1, 'price_per_carat': 100, 'unit': 'pc', 'quantity': 'two'}]},
            {'items': [{'carat': 1, 'price_per_carat': 100}], 'waiting_period': 'soon'},
            {'items': ['Ruby']},
            {'items': [{'carat': 'NaN', 'price_per_carat': 100}]},
        ]
        for payload in bad_payloads:
            response = self.client.post('/api/invoices/print/?output=json', payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertIn('error', response.data)

    def test_invoice_for_large_sale(self):
        """Invoice words cover totals in thousands of crores"""
        sale = TestDataFactory.create_sale(
            client=self.buyer, stone=self.stone, total_amount=Decimal('25000000000.00')
        )
        response = self.client.get(f'/api/sales/{sale.id}/invoice/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data['amount_in_words'],
            'Indian Rupees Two Thousand Five Hundred Seventy Five Crore Only'
        )

    def test_profit_follows_amount_change(self):
        """Changing the total recomputes profit against the stone cost"""
        sale_pk = self._create_sale().data['id']
        response = self.client.patch(f'/api/sales/{sale_pk}/', {'total_amount': '90000.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['profit']), Decimal('40000.00'))

    def test_swap_stone_moves_statuses_and_profit(self):
        """Switching a sale to another stone restocks the old one"""
        sale_pk = self._create_sale().data['id']
        replacement = TestDataFactory.create_stone(purchase_price=Decimal('60000.00'))

        response = self.client.patch(f'/api/sales/{sale_pk}/', {'stone': replacement.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['profit']), Decimal('20000.00'))
        self.stone.refresh_from_db()
        replacement.refresh_from_db()
        self.assertEqual(self.stone.status, 'In Stock')
        self.assertEqual(replacement.status, 'Sold')

    def test_swap_to_sold_stone_rejected(self):
        """A sale cannot move onto a stone that is already sold"""
        sale_pk = self._create_sale().data['id']
        sold_stone = TestDataFactory.create_stone()
        TestDataFactory.create_sale(stone=sold_stone)

        response = self.client.patch(f'/api/sales/{sale_pk}/', {'stone': sold_stone.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('stone', response.data)
        self.stone.refresh_from_db()
        self.assertEqual(self.stone.status, 'Sold')
        self.assertEqual(Sale.objects.get(pk=sale_pk).stone_id, self.stone.id)

    def test_payment_status_follows_amount_paid(self):
        """Partial or Unpaid sent by the caller is replaced by the derived status"""
        response = self._create_sale(payment_status='Partial')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['payment_status'], 'Unpaid')

        other_stone = TestDataFactory.create_stone()
        sale_pk = self._create_sale(stone=other_stone.id, amount_paid='30000.00').data['id']
        response = self.client.patch(f'/api/sales/{sale_pk}/', {'payment_status': 'Unpaid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['payment_status'], 'Partial')

    def test_bad_date_filter(self):
        """Malformed date filters are rejected"""
        response = self.client.get('/api/sales/?date_from=notadate')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
