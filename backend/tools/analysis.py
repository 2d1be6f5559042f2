"""
Rule-based gemstone analysis.

Each recommendation is a Recommendation object pairing a predicate with the
advice it produces, so new rules are added to RECOMMENDATIONS rather than to
the analysis function.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from django.utils import timezone

PREMIUM_ORIGINS = ('Sri Lanka', 'Myanmar')
HIGH_DEMAND_TYPES = ('Ruby', 'Blue Sapphire')
BASE_CONFIDENCE = 85
MAX_CONFIDENCE = 99

GRADE_MULTIPLIERS = {'AAAA': 1.5, 'AAA': 1.3, 'AA': 1.1}
ORIGIN_MULTIPLIERS = {'Myanmar': 1.3, 'Sri Lanka': 1.2}


@dataclass
class StoneProfile:
    type: str
    grade: str
    carat: float
    origin: str
    price_per_carat: float
    certified: bool = False
    stone_id: Optional[str] = None

    @classmethod
    def from_gemstone(cls, stone):
        return cls(
            type=stone.type,
            grade=stone.grade,
            carat=float(stone.carat),
            origin=stone.origin,
            price_per_carat=float(stone.price_per_carat or 0),
            certified=stone.certified,
            stone_id=stone.stone_id,
        )

    @property
    def base_value(self):
        return self.price_per_carat * self.carat


@dataclass
class Recommendation:
    name: str
    applies: Callable[[StoneProfile], bool]
    message: str

    def evaluate(self, profile):
        return self.message if self.applies(profile) else None


RECOMMENDATIONS = [
    Recommendation(
        name='certify_lower_grades',
        applies=lambda p: p.grade in ('A', 'AA') and not p.certified,
        message='Consider certification for premium pricing',
    ),
    Recommendation(
        name='large_carat',
        applies=lambda p: p.carat > 5,
        message='Large carat weight - premium market opportunity',
    ),
    Recommendation(
        name='premium_origin',
        applies=lambda p: p.origin in PREMIUM_ORIGINS,
        message='Premium origin - excellent for high-end market',
    ),
]


def market_value(profile):
    multiplier = GRADE_MULTIPLIERS.get(profile.grade, 1.0) * ORIGIN_MULTIPLIERS.get(profile.origin, 1.0)
    return profile.base_value * multiplier


def market_segment(price_per_carat):
    if price_per_carat > 20000:
        return 'High-end'
    if price_per_carat > 10000:
        return 'Mid-range'
    return 'Entry-level'


def profit_potential(value, base_value):
    if value > base_value * 1.5:
        return 'High'
    if value > base_value * 1.2:
        return 'Medium'
    return 'Low'


def analyze(profile, rules=None):
    rules = rules if rules is not None else RECOMMENDATIONS
    recommendations = [msg for msg in (rule.evaluate(profile) for rule in rules) if msg]
    value = market_value(profile)

    return {
        'stone_id': profile.stone_id,
        'market_value': round(value),
        'recommendations': recommendations,
        'market_trend': market_segment(profile.price_per_carat),
        'risk_level': 'Medium' if profile.grade == 'A' else 'Low',
        'profit_potential': profit_potential(value, profile.base_value),
        'certification_value': 'High' if profile.grade in ('AAAA', 'AAA') else 'Medium',
        'market_demand': 'High' if profile.type in HIGH_DEMAND_TYPES else 'Medium',
        'analysis_date': timezone.now().isoformat(),
        'confidence': min(MAX_CONFIDENCE, BASE_CONFIDENCE + 5 * len(recommendations)),
    }
