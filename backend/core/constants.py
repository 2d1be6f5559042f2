"""
Reference lists offered to the entry forms.

Stone type and origin stay free text on the models; these lists are the
suggestions the forms show.
"""

GEMSTONE_TYPES = [
    'Blue Sapphire', 'Ruby', 'Emerald', 'Yellow Sapphire', 'Pearl', 'Red Coral',
    'Hessonite', "Cat's Eye", 'Diamond', 'Amethyst', 'Citrine', 'Garnet',
    'Peridot', 'Aquamarine', 'Moonstone', 'Opal', 'Tourmaline', 'Topaz',
]

GEMSTONE_ORIGINS = [
    'Jaipur', 'Surat', 'Sri Lanka', 'Myanmar', 'Bangkok', 'Madagascar', 'Africa',
    'Brazil', 'Colombia', 'Kashmir', 'Padparadscha', 'Mogok', 'Ratnapura',
]

CERTIFICATION_LABS = [
    'IGI', 'IIGJ', 'GJEPC', 'GIA', 'Gübelin', 'SSEF', 'AGL', 'Lotus Gemology', 'GRS', 'C. Dunaigre',
]

PACKAGE_TYPES = ['Velvet', 'Leatherette', 'Wooden Box', 'Plastic Case', 'Paper Envelope']

COMMON_TAGS = [
    'Premium', 'Budget', 'High-Demand', 'Certified', 'High Margin',
    'Bulk Buyer', 'Inactive', 'Reliable', 'Delay-prone', 'High-Quality',
]

PRIORITY_CHOICES = [
    ('High', 'High'),
    ('Medium', 'Medium'),
    ('Low', 'Low'),
]


def as_choices(values):
    return [(value, value) for value in values]


def reference_lists():
    """All form suggestion lists keyed by name"""
    from backend.parties.models import Client, Supplier
    from backend.inventory.models import Gemstone
    from backend.sales.models import Sale
    from backend.certifications.models import Certification
    from backend.consultations.models import Consultation
    from backend.tasks.models import Task

    def values(choices):
        return [value for value, _ in choices]

    return {
        'gemstone_types': GEMSTONE_TYPES,
        'gemstone_origins': GEMSTONE_ORIGINS,
        'certification_labs': CERTIFICATION_LABS,
        'package_types': PACKAGE_TYPES,
        'common_tags': COMMON_TAGS,
        'client_types': values(Client.CLIENT_TYPE_CHOICES),
        'loyalty_levels': values(Client.LOYALTY_LEVEL_CHOICES),
        'supplier_types': values(Supplier.SUPPLIER_TYPE_CHOICES),
        'stone_status': values(Gemstone.STATUS_CHOICES),
        'payment_status': values(Sale.PAYMENT_STATUS_CHOICES),
        'certification_status': values(Certification.STATUS_CHOICES),
        'consultation_mediums': values(Consultation.MEDIUM_CHOICES),
        'priority_levels': values(PRIORITY_CHOICES),
        'task_status': values(Task.STATUS_CHOICES),
    }
