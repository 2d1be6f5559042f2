"""
Side-by-side stone comparison with a weighted quality score
"""
from decimal import Decimal

GRADE_SCORES = {'A': 1, 'AA': 2, 'AAA': 3, 'AAAA': 4}
PREMIUM_ORIGINS = ['Sri Lanka', 'Myanmar', 'Colombia', 'Kashmir']
PREMIUM_ORIGIN_SCORE = 1
STANDARD_ORIGIN_SCORE = 0.7

DEFAULT_WEIGHTS = {
    'grade': 0.4,
    'carat': 0.3,
    'origin': 0.2,
    'certification': 0.1,
}


def grade_score(grade):
    return GRADE_SCORES.get(grade, 1)


def origin_score(origin):
    return PREMIUM_ORIGIN_SCORE if origin in PREMIUM_ORIGINS else STANDARD_ORIGIN_SCORE


def quality_score(stone, weights=None):
    """stone is a dict with grade, carat, origin and certified"""
    if not stone:
        return 0
    weights = {**DEFAULT_WEIGHTS, **(weights or {})}
    score = (
        grade_score(stone.get('grade')) * weights['grade']
        + float(stone.get('carat') or 0) * weights['carat']
        + origin_score(stone.get('origin')) * weights['origin']
        + (1 if stone.get('certified') else 0) * weights['certification']
    )
    return round(score, 2)


def stone_as_dict(stone):
    return {
        'id': stone.id,
        'stone_id': stone.stone_id,
        'type': stone.type,
        'grade': stone.grade,
        'carat': float(stone.carat),
        'origin': stone.origin,
        'certified': stone.certified,
        'price': float(stone.selling_price or Decimal('0')),
    }


def compare(left, right, weights=None):
    left_score = quality_score(left, weights)
    right_score = quality_score(right, weights)
    if left_score == right_score:
        verdict = 'Equal'
    elif left_score > right_score:
        verdict = 'Left'
    else:
        verdict = 'Right'
    price_delta = float((right or {}).get('price') or 0) - float((left or {}).get('price') or 0)
    return {
        'left': {**(left or {}), 'score': left_score},
        'right': {**(right or {}), 'score': right_score},
        'weights': {**DEFAULT_WEIGHTS, **(weights or {})},
        'price_delta': round(price_delta, 2),
        'better': verdict,
    }
