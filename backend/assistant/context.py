"""
Snapshot of live business data handed to the assistant prompts
"""
from django.db.models import Count

from backend.certifications.models import Certification
from backend.consultations.models import Consultation
from backend.inventory.models import Gemstone
from backend.parties.models import Client, Supplier
from backend.sales.models import Sale
from backend.tasks.models import Task

SNAPSHOT_LIMIT = 200


def _sales(limit):
    sales = Sale.objects.select_related('client', 'stone').order_by('-date', '-created_at')[:limit]
    return [
        {
            'sale_id': s.sale_id,
            'date': s.date.isoformat() if s.date else None,
            'client': s.client.name,
            'stone': f"{s.stone.stone_id} {s.stone.type}",
            'quantity': s.quantity,
            'total_amount': float(s.total_amount),
            'profit': float(s.profit or 0),
            'payment_status': s.payment_status,
        }
        for s in sales
    ]


def _inventory(limit):
    stones = Gemstone.objects.order_by('-created_at')[:limit]
    return [
        {
            'stone_id': g.stone_id,
            'type': g.type,
            'carat': float(g.carat),
            'origin': g.origin,
            'grade': g.grade,
            'color': g.color,
            'clarity': g.clarity,
            'cut': g.cut,
            'quantity': g.quantity,
            'certified': g.certified,
            'status': g.status,
            'selling_price': float(g.selling_price or 0),
        }
        for g in stones
    ]


def _clients(limit):
    clients = Client.objects.filter(is_active=True).annotate(sale_count=Count('sales')).order_by('name')[:limit]
    return [
        {
            'name': c.name,
            'client_type': c.client_type,
            'city': c.city,
            'phone': c.phone,
            'email': c.email,
            'loyalty_level': c.loyalty_level,
            'loyalty_points': c.loyalty_points,
            'is_recurring': c.sale_count > 1,
            'is_trustworthy': c.loyalty_level != 'Low',
        }
        for c in clients
    ]


def _suppliers(limit):
    return [
        {
            'name': s.name,
            'type': s.supplier_type,
            'location': s.location,
            'quality_rating': float(s.rating or 0),
            'delivery_days': s.delivery_days,
        }
        for s in Supplier.objects.filter(is_active=True).order_by('name')[:limit]
    ]


def business_snapshot(limit=SNAPSHOT_LIMIT):
    """Plain dicts for every business area, newest first where dated"""
    return {
        'sales': _sales(limit),
        'inventory': _inventory(limit),
        'clients': _clients(limit),
        'suppliers': _suppliers(limit),
        'certifications': [
            {'stone': c.stone.stone_id, 'lab': c.lab, 'status': c.status}
            for c in Certification.objects.select_related('stone').order_by('-created_at')[:limit]
        ],
        'consultations': [
            {'client': c.client.name, 'date': c.date.isoformat(), 'medium': c.medium, 'outcome': c.outcome}
            for c in Consultation.objects.select_related('client').order_by('-date')[:limit]
        ],
        'tasks': [
            {
                'title': t.title,
                'priority': t.priority,
                'status': t.status,
                'due_date': t.due_date.isoformat() if t.due_date else None,
            }
            for t in Task.objects.order_by('due_date')[:limit]
        ],
    }
