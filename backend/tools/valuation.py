"""
Gemstone valuation from base price per carat and quality multipliers
"""
from dataclasses import dataclass, field

DEFAULT_BASE_PRICE = 10000

BASE_PRICE_PER_CARAT = {
    'Ruby': 14500,
    'Sapphire': 30000,
    'Emerald': 25000,
    'Diamond': 120000,
    'Pearl': 8000,
    'Opal': 12000,
    'Alexandrite': 45000,
    'Tanzanite': 18000,
    'Spinel': 15000,
    'Garnet': 6000,
    'Topaz': 5000,
    'Aquamarine': 8000,
    'Peridot': 4000,
    'Tourmaline': 10000,
}

GRADE_MULTIPLIERS = {'AAA': 2.5, 'AA': 2.0, 'A': 1.5, 'B': 1.0, 'C': 0.7}
ORIGIN_MULTIPLIERS = {
    'Burma': 1.8, 'Sri Lanka': 1.6, 'Thailand': 1.4, 'Madagascar': 1.3,
    'Tanzania': 1.2, 'Brazil': 1.1, 'Colombia': 1.1, 'Zambia': 1.0,
}
CLARITY_MULTIPLIERS = {'VVS': 1.6, 'VS': 1.4, 'SI': 1.2, 'I': 1.0}
COLOR_MULTIPLIERS = {'Exceptional': 1.8, 'Excellent': 1.6, 'Very Good': 1.4, 'Good': 1.2, 'Fair': 1.0}
CUT_MULTIPLIERS = {'Excellent': 1.5, 'Very Good': 1.3, 'Good': 1.1, 'Fair': 1.0, 'Poor': 0.8}
CERTIFICATION_MULTIPLIER = 1.15

PRICE_RANGE_SPREAD = 0.15

# Per-carat price over the last six months
MARKET_TREND = [
    {'month': 'Jan', 'Ruby': 14500, 'Sapphire': 30000, 'Emerald': 25000, 'Diamond': 120000},
    {'month': 'Feb', 'Ruby': 14800, 'Sapphire': 30500, 'Emerald': 25200, 'Diamond': 122000},
    {'month': 'Mar', 'Ruby': 15200, 'Sapphire': 31000, 'Emerald': 25500, 'Diamond': 124000},
    {'month': 'Apr', 'Ruby': 15500, 'Sapphire': 31500, 'Emerald': 25800, 'Diamond': 126000},
    {'month': 'May', 'Ruby': 15800, 'Sapphire': 32000, 'Emerald': 26000, 'Diamond': 128000},
    {'month': 'Jun', 'Ruby': 16200, 'Sapphire': 32500, 'Emerald': 26200, 'Diamond': 130000},
]

# (factor name, request key, table)
FACTOR_TABLES = [
    ('Grade', 'grade', GRADE_MULTIPLIERS),
    ('Origin', 'origin', ORIGIN_MULTIPLIERS),
    ('Clarity', 'clarity', CLARITY_MULTIPLIERS),
    ('Color', 'color', COLOR_MULTIPLIERS),
    ('Cut', 'cut', CUT_MULTIPLIERS),
]


class ValuationError(ValueError):
    pass


@dataclass
class Valuation:
    estimated_value: float
    price_min: float
    price_max: float
    confidence: int
    base_price: int
    factors: list = field(default_factory=list)

    def as_dict(self):
        return {
            'estimated_value': self.estimated_value,
            'price_range': {'min': self.price_min, 'max': self.price_max},
            'confidence_score': self.confidence,
            'base_price_per_carat': self.base_price,
            'factors': self.factors,
            'market_trend': MARKET_TREND,
        }


def base_price_for(stone_type):
    return BASE_PRICE_PER_CARAT.get(stone_type, DEFAULT_BASE_PRICE)


def valuate(stone_type, carat, grade=None, origin=None, clarity=None, color=None, cut=None, certified=False):
    """
    Estimated value = base price × carat × every applicable multiplier.

    Blank attributes are skipped; unknown values raise ValuationError.
    """
    if carat is None or carat <= 0:
        raise ValuationError('Carat must be greater than zero')

    values = {'grade': grade, 'origin': origin, 'clarity': clarity, 'color': color, 'cut': cut}
    multiplier = 1.0
    factors = []
    for name, key, table in FACTOR_TABLES:
        value = values[key]
        if not value:
            continue
        if value not in table:
            raise ValuationError(f"Unknown {key} '{value}'. Options: {', '.join(table)}")
        multiplier *= table[value]
        factors.append({'name': name, 'impact': value, 'multiplier': table[value]})

    if certified:
        multiplier *= CERTIFICATION_MULTIPLIER
        factors.append({'name': 'Certification', 'impact': 'Certified', 'multiplier': CERTIFICATION_MULTIPLIER})

    base_price = base_price_for(stone_type)
    estimated = base_price * float(carat) * multiplier
    return Valuation(
        estimated_value=round(estimated, 2),
        price_min=round(estimated * (1 - PRICE_RANGE_SPREAD), 2),
        price_max=round(estimated * (1 + PRICE_RANGE_SPREAD), 2),
        confidence=min(95, 70 + len(factors) * 5),
        base_price=base_price,
        factors=factors,
    )
