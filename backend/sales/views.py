import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.template.loader import render_to_string
from decimal import Decimal
from .models import Sale
from .serializers import SaleSerializer, PaymentSerializer
from .utils import payment_status_for, award_loyalty_points, revoke_loyalty_points
from .invoicing import (
    InvoicePayloadError, build_invoice, decode_payload, invoice_json, invoice_payload_for_sale
)
from .invoice_pdf import build_invoice_pdf
from backend.core.models import CompanyProfile
from backend.core.utils import create_audit_log, parse_optional_date

logger = logging.getLogger(__name__)


def filter_sales(queryset, params):
    client_id = params.get('client', None)
    if client_id:
        queryset = queryset.filter(client_id=client_id)
    stone_id = params.get('stone', None)
    if stone_id:
        queryset = queryset.filter(stone_id=stone_id)
    payment_status = params.get('payment_status', None)
    if payment_status:
        queryset = queryset.filter(payment_status=payment_status)
    date_from = parse_optional_date(params.get('date_from', None))
    if date_from:
        queryset = queryset.filter(date__gte=date_from)
    date_to = parse_optional_date(params.get('date_to', None))
    if date_to:
        queryset = queryset.filter(date__lte=date_to)
    return queryset


def _request_base_url(request):
    return request.build_absolute_uri('/').rstrip('/')


def _sale_invoice(request, sale, include_qr=True):
    profile = CompanyProfile.get_solo()
    return build_invoice(
        invoice_payload_for_sale(sale),
        profile,
        base_url=_request_base_url(request),
        include_qr=include_qr,
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List sales or record a new sale"""
    if request.method == 'GET':
        queryset = Sale.objects.select_related('client', 'stone').prefetch_related('payments')
        try:
            queryset = filter_sales(queryset, request.query_params)
        except ValueError:
            return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)
        queryset = queryset.order_by('-date', '-created_at')
        serializer = SaleSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = SaleSerializer(data=request.data)
        if serializer.is_valid():
            sale = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='sale_create',
                model_name='Sale',
                object_id=sale.id,
                object_name=str(sale),
                object_reference=sale.sale_id,
                changes={
                    'stone': sale.stone.stone_id,
                    'client': sale.client.name,
                    'total_amount': str(sale.total_amount),
                    'profit': str(sale.profit),
                    'payment_status': sale.payment_status,
                }
            )
            return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve, update or delete a sale"""
    sale = get_object_or_404(Sale.objects.select_related('client', 'stone'), pk=pk)

    if request.method == 'GET':
        serializer = SaleSerializer(sale)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_status = sale.payment_status
        serializer = SaleSerializer(sale, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            sale = serializer.save()
            changes = {}
            if old_status != sale.payment_status:
                changes['payment_status'] = {'old': old_status, 'new': sale.payment_status}
            create_audit_log(
                request=request,
                action='update',
                model_name='Sale',
                object_id=sale.id,
                object_reference=sale.sale_id,
                changes=changes or None
            )
            return Response(SaleSerializer(sale).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        sale_id = sale.sale_id
        with transaction.atomic():
            stone = sale.stone
            revoke_loyalty_points(sale)
            sale.delete()
            # Back on the shelf unless another sale still holds it
            if not Sale.objects.filter(stone=stone).exists():
                stone.status = 'In Stock'
                stone.save(update_fields=['status', 'updated_at'])
        create_audit_log(
            request=request,
            action='delete',
            model_name='Sale',
            object_id=pk,
            object_reference=sale_id,
            changes={'stone': stone.stone_id, 'stone_status': stone.status}
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_payments(request, pk):
    """List payments for a sale or record a new payment"""
    sale = get_object_or_404(Sale.objects.select_related('client', 'stone'), pk=pk)

    if request.method == 'GET':
        return Response(PaymentSerializer(sale.payments.all(), many=True).data)

    serializer = PaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        sale = Sale.objects.select_for_update().select_related('client', 'stone').get(pk=sale.pk)
        if sale.payment_status == 'Paid':
            return Response({'error': 'Sale is already fully paid'}, status=status.HTTP_400_BAD_REQUEST)

        payment = serializer.save(sale=sale, created_by=request.user)

        old_paid = sale.amount_paid or Decimal('0.00')
        old_status = sale.payment_status
        sale.amount_paid = old_paid + payment.amount
        sale.payment_status = payment_status_for(sale.amount_paid, sale.total_amount)
        sale.save(update_fields=['amount_paid', 'payment_status', 'updated_at'])
        points = award_loyalty_points(sale)

    create_audit_log(
        request=request,
        action='payment_add',
        model_name='Payment',
        object_id=payment.id,
        object_name=f"Payment for Sale {sale.sale_id}",
        object_reference=sale.sale_id,
        changes={
            'amount': str(payment.amount),
            'payment_method': payment.payment_method,
            'payment_status': {'old': old_status, 'new': sale.payment_status},
            'amount_paid': {'old': str(old_paid), 'new': str(sale.amount_paid)},
            'loyalty_points_awarded': points,
        }
    )

    return Response({
        'payment': PaymentSerializer(payment).data,
        'sale': SaleSerializer(sale).data,
        'loyalty_points_awarded': points,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_invoice(request, pk):
    """Invoice data for a sale as JSON"""
    sale = get_object_or_404(Sale.objects.select_related('client', 'stone'), pk=pk)
    invoice = _sale_invoice(request, sale)
    return Response(invoice_json(invoice))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_invoice_print(request, pk):
    """Printable A4 invoice page for a sale"""
    sale = get_object_or_404(Sale.objects.select_related('client', 'stone'), pk=pk)
    invoice = _sale_invoice(request, sale)
    create_audit_log(
        request=request,
        action='invoice_generate',
        model_name='Sale',
        object_id=sale.id,
        object_reference=sale.sale_id,
        changes={'format': 'html'}
    )
    html = render_to_string('sales/invoice_print.html', {'invoice': invoice})
    return HttpResponse(html, content_type='text/html; charset=utf-8')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_invoice_pdf(request, pk):
    """Download the invoice for a sale as PDF"""
    sale = get_object_or_404(Sale.objects.select_related('client', 'stone'), pk=pk)
    invoice = _sale_invoice(request, sale)
    try:
        pdf_bytes = build_invoice_pdf(invoice)
    except Exception as e:
        logger.error(f"Invoice PDF generation failed for {sale.sale_id}: {str(e)}")
        return Response({'error': f'Failed to generate invoice PDF: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='invoice_generate',
        model_name='Sale',
        object_id=sale.id,
        object_reference=sale.sale_id,
        changes={'format': 'pdf'}
    )
    response = HttpResponse(pdf_bytes, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="invoice-{sale.sale_id}.pdf"'
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_print(request):
    """
    Printable invoice from an arbitrary invoice payload.

    Accepts the invoice JSON in the body, or {"data": "<base64 / URI-encoded JSON>"}.
    An empty body renders the sample invoice.
    """
    body = request.data
    try:
        if isinstance(body.get('data'), str):
            payload = decode_payload(body['data'])
        else:
            payload = decode_payload(dict(body.items()) if hasattr(body, 'items') else {})
        invoice = build_invoice(payload, CompanyProfile.get_solo(), base_url=_request_base_url(request))
    except InvoicePayloadError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    if request.query_params.get('output') == 'json':
        return Response(invoice_json(invoice))

    html = render_to_string('sales/invoice_print.html', {'invoice': invoice})
    return HttpResponse(html, content_type='text/html; charset=utf-8')
