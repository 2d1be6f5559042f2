import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q, Sum, Count, ProtectedError
from django.shortcuts import get_object_or_404
from django.utils import timezone
from decimal import Decimal
from .models import Client, Supplier
from .serializers import ClientSerializer, SupplierSerializer
from backend.core.model_cache import (
    get_cached_client, cache_client_data,
    get_cached_supplier, cache_supplier_data,
)
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def filter_clients(queryset, params):
    search = params.get('search', None)
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(city__icontains=search) |
            Q(phone__icontains=search) |
            Q(email__icontains=search)
        )
    client_type = params.get('client_type', None)
    if client_type:
        queryset = queryset.filter(client_type=client_type)
    loyalty_level = params.get('loyalty_level', None)
    if loyalty_level:
        queryset = queryset.filter(loyalty_level=loyalty_level)
    active = params.get('active', None)
    if active is not None:
        queryset = queryset.filter(is_active=active.lower() in ('true', '1', 'yes'))
    tag = params.get('tag', None)
    if tag:
        # JSON containment is not available on SQLite, match in Python
        ids = [c.id for c in queryset.only('id', 'tags') if tag in (c.tags or [])]
        queryset = queryset.filter(id__in=ids)
    return queryset


# Client views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_list_create(request):
    """List all clients or create a new client"""
    if request.method == 'GET':
        queryset = filter_clients(Client.objects.all().order_by('name'), request.query_params)
        serializer = ClientSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = ClientSerializer(data=request.data)
        if serializer.is_valid():
            client = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Client',
                object_id=client.id,
                object_name=client.name
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def client_detail(request, pk):
    """Retrieve, update or delete a client"""
    if request.method == 'GET':
        cached_data = get_cached_client(pk)
        if cached_data:
            return Response(cached_data)

    client = get_object_or_404(Client, pk=pk)

    if request.method == 'GET':
        serializer = ClientSerializer(client)
        response_data = serializer.data
        cache_client_data(client, response_data)
        return Response(response_data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ClientSerializer(client, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            client.delete()
        except ProtectedError:
            return Response(
                {'error': 'Client has recorded sales and cannot be deleted. Mark it inactive instead.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        create_audit_log(
            request=request,
            action='delete',
            model_name='Client',
            object_id=pk,
            object_name=client.name
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_search(request, query):
    """Case-insensitive search on client name, city, phone or email"""
    queryset = filter_clients(Client.objects.all().order_by('name'), {'search': query})
    return Response(ClientSerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_history(request, pk):
    """Purchase and consultation history for one client"""
    from backend.sales.models import Sale
    from backend.sales.serializers import SaleSerializer
    from backend.consultations.models import Consultation
    from backend.consultations.serializers import ConsultationSerializer

    client = get_object_or_404(Client, pk=pk)
    sales = Sale.objects.filter(client=client).select_related('stone').order_by('-date', '-id')
    consultations = Consultation.objects.filter(client=client).order_by('-date', '-id')

    totals = sales.aggregate(
        total_spent=Sum('total_amount'),
        total_paid=Sum('amount_paid'),
        purchase_count=Count('id'),
    )
    total_spent = totals['total_spent'] or Decimal('0.00')
    total_paid = totals['total_paid'] or Decimal('0.00')

    return Response({
        'client': ClientSerializer(client).data,
        'summary': {
            'purchase_count': totals['purchase_count'] or 0,
            'total_spent': float(total_spent),
            'outstanding_amount': float(max(Decimal('0.00'), total_spent - total_paid)),
            'consultation_count': consultations.count(),
            'last_purchase_date': sales[0].date.isoformat() if sales else None,
        },
        'sales': SaleSerializer(sales, many=True).data,
        'consultations': ConsultationSerializer(consultations, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def client_follow_ups(request):
    """Consultations awaiting follow-up grouped as overdue, due today and upcoming"""
    from backend.consultations.models import Consultation
    from backend.consultations.serializers import ConsultationSerializer

    today = timezone.localdate()
    pending = Consultation.objects.filter(
        follow_up_needed=True,
        next_follow_up_date__isnull=False
    ).select_related('client').order_by('next_follow_up_date')

    overdue = pending.filter(next_follow_up_date__lt=today)
    due_today = pending.filter(next_follow_up_date=today)
    upcoming = pending.filter(next_follow_up_date__gt=today)

    return Response({
        'date': today.isoformat(),
        'counts': {
            'overdue': overdue.count(),
            'due_today': due_today.count(),
            'upcoming': upcoming.count(),
        },
        'overdue': ConsultationSerializer(overdue, many=True).data,
        'due_today': ConsultationSerializer(due_today, many=True).data,
        'upcoming': ConsultationSerializer(upcoming, many=True).data,
    })


# Supplier views
def filter_suppliers(queryset, params):
    search = params.get('search', None)
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(location__icontains=search) |
            Q(phone__icontains=search) |
            Q(email__icontains=search)
        )
    supplier_type = params.get('supplier_type', None)
    if supplier_type:
        queryset = queryset.filter(supplier_type=supplier_type)
    gemstone_type = params.get('gemstone_type', None)
    if gemstone_type:
        ids = [s.id for s in queryset.only('id', 'gemstone_types') if gemstone_type in (s.gemstone_types or [])]
        queryset = queryset.filter(id__in=ids)
    return queryset


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = filter_suppliers(Supplier.objects.all().order_by('name'), request.query_params)
        serializer = SupplierSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Supplier',
                object_id=supplier.id,
                object_name=supplier.name
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    if request.method == 'GET':
        cached_data = get_cached_supplier(pk)
        if cached_data:
            return Response(cached_data)

    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        response_data = SupplierSerializer(supplier).data
        cache_supplier_data(supplier, response_data)
        return Response(response_data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        # Stones keep their history; the supplier link is cleared (SET_NULL)
        supplier.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Supplier',
            object_id=pk,
            object_name=supplier.name
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_search(request, query):
    """Case-insensitive search on supplier name, location, phone or email"""
    queryset = filter_suppliers(Supplier.objects.all().order_by('name'), {'search': query})
    return Response(SupplierSerializer(queryset, many=True).data)
