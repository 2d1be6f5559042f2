import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import ProtectedError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from .models import Gemstone
from .filters import GemstoneFilter
from .serializers import GemstoneSerializer, GemstoneListSerializer
from .label_generator import generate_stone_label
from .stock_report import build_stock_report_pdf
from backend.core.cache_utils import get_cached_inventory_list, cache_inventory_list
from backend.core.model_cache import get_cached_stone, get_cached_stone_by_code, cache_stone_data
from backend.core.models import CompanyProfile
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def _truthy(value):
    return str(value).lower() in ('true', '1', 'yes')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stone_list_create(request):
    """List inventory with filters or add a new stone"""
    if request.method == 'GET':
        filters_dict = {key: request.query_params.get(key) for key in sorted(request.query_params.keys())}
        cached_data, cache_key = get_cached_inventory_list(filters_dict)
        if cached_data is not None:
            return Response(cached_data)

        queryset = Gemstone.objects.select_related('supplier').order_by('-created_at')
        filterset = GemstoneFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

        data = GemstoneListSerializer(filterset.qs, many=True).data
        cache_inventory_list(cache_key, data)
        return Response(data)
    else:
        serializer = GemstoneSerializer(data=request.data)
        if serializer.is_valid():
            stone = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Gemstone',
                object_id=stone.id,
                object_name=str(stone),
                object_reference=stone.stone_id
            )
            if stone.certificate_file:
                create_audit_log(
                    request=request,
                    action='file_upload',
                    model_name='Gemstone',
                    object_id=stone.id,
                    object_reference=stone.stone_id,
                    changes={'certificate_file': stone.certificate_file.name}
                )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def stone_detail(request, pk):
    """Retrieve, update or delete a stone"""
    if request.method == 'GET':
        cached_data = get_cached_stone(pk)
        if cached_data:
            return Response(cached_data)

    stone = get_object_or_404(Gemstone.objects.select_related('supplier'), pk=pk)

    if request.method == 'GET':
        data = GemstoneSerializer(stone).data
        cache_stone_data(stone, data)
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        old_status = stone.status
        old_selling_price = stone.selling_price
        old_purchase_price = stone.purchase_price

        serializer = GemstoneSerializer(stone, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        stone = serializer.save()

        if stone.status != old_status:
            create_audit_log(
                request=request,
                action='status_change',
                model_name='Gemstone',
                object_id=stone.id,
                object_reference=stone.stone_id,
                changes={'status': {'old': old_status, 'new': stone.status}}
            )
        price_changes = {}
        if stone.selling_price != old_selling_price:
            price_changes['selling_price'] = {'old': str(old_selling_price), 'new': str(stone.selling_price)}
        if stone.purchase_price != old_purchase_price:
            price_changes['purchase_price'] = {'old': str(old_purchase_price), 'new': str(stone.purchase_price)}
        if price_changes:
            create_audit_log(
                request=request,
                action='price_change',
                model_name='Gemstone',
                object_id=stone.id,
                object_reference=stone.stone_id,
                changes=price_changes
            )
        return Response(serializer.data)
    else:  # DELETE
        stone_id = stone.stone_id
        try:
            stone.delete()
        except ProtectedError:
            return Response(
                {'error': 'Stone is referenced by sales or certifications and cannot be deleted.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        create_audit_log(
            request=request,
            action='delete',
            model_name='Gemstone',
            object_id=pk,
            object_reference=stone_id
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stone_search(request, query):
    """Case-insensitive search on type, origin or stone id"""
    queryset = Gemstone.objects.select_related('supplier').order_by('-created_at')
    queryset = GemstoneFilter({'search': query}, queryset=queryset).qs
    return Response(GemstoneListSerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stone_by_code(request, stone_id):
    """Look up a stone by its business id (barcode scan)"""
    cached_data = get_cached_stone_by_code(stone_id)
    if cached_data:
        return Response(cached_data)

    stone = Gemstone.objects.select_related('supplier').filter(stone_id__iexact=stone_id.strip()).first()
    if not stone:
        return Response({'error': f'Stone {stone_id} not found'}, status=status.HTTP_404_NOT_FOUND)
    data = GemstoneSerializer(stone).data
    cache_stone_data(stone, data)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stone_label(request, pk):
    """Generate a printable barcode label for a stone"""
    stone = get_object_or_404(Gemstone.objects.select_related('supplier'), pk=pk)
    try:
        image_data_url = generate_stone_label(stone, show_price=_truthy(request.query_params.get('show_price', 'false')))
    except Exception as e:
        logger.error(f"Label generation failed for stone {stone.stone_id}: {str(e)}")
        return Response({'error': f'Failed to generate label: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'stone_id': stone.stone_id,
        'image': image_data_url,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_report(request):
    """Download the stock report as a PDF"""
    queryset = Gemstone.objects.select_related('supplier').order_by('type', 'stone_id')
    if _truthy(request.query_params.get('only_available', 'true')):
        queryset = queryset.filter(status='In Stock')
    queryset = GemstoneFilter(request.query_params, queryset=queryset).qs

    company = CompanyProfile.get_solo()
    pdf_bytes = build_stock_report_pdf(list(queryset), company_name=company.company_name)

    filename = f"stock-report-{timezone.localdate().isoformat()}.pdf"
    response = HttpResponse(pdf_bytes, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
