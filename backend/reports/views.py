import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Count, Avg, DecimalField
from django.utils import timezone
from decimal import Decimal

from backend.certifications.models import Certification
from backend.core.cache_utils import (
    REPORTS_CACHE_TTL, cache_dashboard_metrics, cached_query, get_cached_dashboard_metrics
)
from backend.core.utils import parse_date_range
from backend.inventory.models import Gemstone
from backend.parties.models import Client, Supplier
from backend.sales.models import Sale
from backend.tasks.models import Task

logger = logging.getLogger('backend.reports')

PENDING_CERTIFICATION_STATUSES = ['Pending', 'In Progress']


def _limit(params, default=10):
    try:
        return max(1, int(params.get('limit', default)))
    except (TypeError, ValueError):
        return default


def _bad_date():
    return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)


def _sum(queryset, field):
    return queryset.aggregate(total=Sum(field, output_field=DecimalField()))['total'] or Decimal('0.00')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_metrics(request):
    """Headline numbers for the dashboard, cached for the polling interval"""
    today = timezone.localdate()
    cached_data, cache_key = get_cached_dashboard_metrics(today.isoformat())
    if cached_data is not None:
        return Response(cached_data)

    month_start = today.replace(day=1)
    monthly_sales = _sum(Sale.objects.filter(date__gte=month_start, date__lte=today), 'total_amount')

    in_stock = Gemstone.objects.filter(status='In Stock')
    inventory_value = _sum(in_stock, 'selling_price')

    today_tasks = Task.objects.filter(due_date=today, completed=False)

    data = {
        'monthly_sales': float(monthly_sales),
        'inventory_value': float(inventory_value),
        'total_stones': Gemstone.objects.count(),
        'in_stock_stones': in_stock.count(),
        'pending_certs': Certification.objects.filter(status__in=PENDING_CERTIFICATION_STATUSES).count(),
        'followups': today_tasks.count(),
        'high_priority': today_tasks.filter(priority='High').count(),
    }
    cache_dashboard_metrics(cache_key, data)
    logger.debug(f"Dashboard metrics recomputed for {today.isoformat()}")
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_summary(request):
    """Sales summary report"""
    try:
        date_from, date_to = parse_date_range(request)
    except ValueError:
        return _bad_date()

    sales = Sale.objects.filter(date__gte=date_from, date__lte=date_to)

    totals = sales.aggregate(
        total=Sum('total_amount', output_field=DecimalField()),
        profit=Sum('profit', output_field=DecimalField()),
        discount=Sum('discount', output_field=DecimalField()),
        avg=Avg('total_amount', output_field=DecimalField()),
    )

    daily_sales = sales.values('date').annotate(
        total=Sum('total_amount', output_field=DecimalField()),
        profit=Sum('profit', output_field=DecimalField()),
        count=Count('id')
    ).order_by('date')

    return Response({
        'period': {
            'from': date_from.isoformat(),
            'to': date_to.isoformat()
        },
        'summary': {
            'total_sales': float(totals['total'] or 0),
            'total_profit': float(totals['profit'] or 0),
            'total_discount': float(totals['discount'] or 0),
            'sale_count': sales.count(),
            'avg_sale_value': float(totals['avg'] or 0),
        },
        'by_payment_status': {
            row['payment_status']: row['count']
            for row in sales.values('payment_status').annotate(count=Count('id'))
        },
        'daily_breakdown': [
            {
                'date': row['date'].isoformat(),
                'total': float(row['total'] or 0),
                'profit': float(row['profit'] or 0),
                'count': row['count'],
            }
            for row in daily_sales
        ]
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def top_stones(request):
    """Best selling stone types by revenue"""
    try:
        date_from, date_to = parse_date_range(request, default_days=365)
    except ValueError:
        return _bad_date()

    rows = Sale.objects.filter(
        date__gte=date_from, date__lte=date_to
    ).values('stone__type').annotate(
        total_revenue=Sum('total_amount', output_field=DecimalField()),
        total_profit=Sum('profit', output_field=DecimalField()),
        total_carats=Sum('stone__carat', output_field=DecimalField()),
        sale_count=Count('id')
    ).order_by('-total_revenue')[:_limit(request.query_params)]

    return Response({
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'stones': [
            {
                'type': row['stone__type'],
                'total_revenue': float(row['total_revenue'] or 0),
                'total_profit': float(row['total_profit'] or 0),
                'total_carats': float(row['total_carats'] or 0),
                'sale_count': row['sale_count'],
            }
            for row in rows
        ]
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def top_clients(request):
    """Clients ranked by purchase value"""
    try:
        date_from, date_to = parse_date_range(request, default_days=365)
    except ValueError:
        return _bad_date()

    rows = Sale.objects.filter(
        date__gte=date_from, date__lte=date_to
    ).values('client__id', 'client__name', 'client__loyalty_level').annotate(
        total_spent=Sum('total_amount', output_field=DecimalField()),
        purchase_count=Count('id')
    ).order_by('-total_spent')[:_limit(request.query_params)]

    return Response({
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'clients': [
            {
                'id': row['client__id'],
                'name': row['client__name'],
                'loyalty_level': row['client__loyalty_level'],
                'total_spent': float(row['total_spent'] or 0),
                'purchase_count': row['purchase_count'],
            }
            for row in rows
        ]
    })


@cached_query(cache_ttl=REPORTS_CACHE_TTL, key_prefix="reports")
def supplier_ranking():
    """Active suppliers with their stone count and sold value, best first"""
    suppliers = Supplier.objects.filter(is_active=True).annotate(
        stone_count=Count('stones', distinct=True),
    )

    results = []
    for supplier in suppliers:
        sold = Sale.objects.filter(stone__supplier=supplier)
        results.append({
            'id': supplier.id,
            'name': supplier.name,
            'location': supplier.location,
            'rating': float(supplier.rating or 0),
            'stone_count': supplier.stone_count,
            'sold_count': sold.count(),
            'sales_value': float(_sum(sold, 'total_amount')),
        })

    results.sort(key=lambda r: (r['sales_value'], r['rating']), reverse=True)
    return results


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def top_suppliers(request):
    """Suppliers ranked by the value of their stones sold"""
    return Response({'suppliers': supplier_ranking()[:_limit(request.query_params)]})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_summary(request):
    """Stone counts and value by status and by type"""
    stones = Gemstone.objects.all()

    by_status = [
        {
            'status': row['status'],
            'count': row['count'],
            'carats': float(row['carats'] or 0),
            'purchase_value': float(row['purchase_value'] or 0),
            'selling_value': float(row['selling_value'] or 0),
        }
        for row in stones.values('status').annotate(
            count=Count('id'),
            carats=Sum('carat', output_field=DecimalField()),
            purchase_value=Sum('purchase_price', output_field=DecimalField()),
            selling_value=Sum('selling_price', output_field=DecimalField()),
        ).order_by('status')
    ]

    in_stock = stones.filter(status='In Stock')
    by_type = [
        {
            'type': row['type'],
            'count': row['count'],
            'carats': float(row['carats'] or 0),
            'selling_value': float(row['selling_value'] or 0),
        }
        for row in in_stock.values('type').annotate(
            count=Count('id'),
            carats=Sum('carat', output_field=DecimalField()),
            selling_value=Sum('selling_price', output_field=DecimalField()),
        ).order_by('-selling_value')
    ]

    return Response({
        'total_stones': stones.count(),
        'in_stock_count': in_stock.count(),
        'certified_count': in_stock.filter(certified=True).count(),
        'in_stock_value': float(_sum(in_stock, 'selling_price')),
        'in_stock_cost': float(_sum(in_stock, 'purchase_price')),
        'by_status': by_status,
        'by_type': by_type,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def finance_report(request):
    """Revenue, cost, gross profit and receivables for a period"""
    try:
        date_from, date_to = parse_date_range(request)
    except ValueError:
        return _bad_date()

    sales = Sale.objects.filter(date__gte=date_from, date__lte=date_to)
    revenue = _sum(sales, 'total_amount')
    profit = _sum(sales, 'profit')
    cost = revenue - profit
    collected = _sum(sales, 'amount_paid')

    # Receivables are all open balances, not only this period's
    open_sales = Sale.objects.filter(payment_status__in=['Unpaid', 'Partial'])
    receivables = _sum(open_sales, 'total_amount') - _sum(open_sales, 'amount_paid')

    margin = (profit / revenue * 100).quantize(Decimal('0.01')) if revenue else Decimal('0.00')

    return Response({
        'period': {'from': date_from.isoformat(), 'to': date_to.isoformat()},
        'revenue': float(revenue),
        'cost': float(cost),
        'gross_profit': float(profit),
        'margin_percentage': float(margin),
        'collected': float(collected),
        'receivables': float(receivables),
        'open_invoices': open_sales.count(),
        'active_clients': Client.objects.filter(sales__date__gte=date_from, sales__date__lte=date_to).distinct().count(),
    })
