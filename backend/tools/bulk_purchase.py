"""
Bulk purchase planning: cheapest month, best supplier and the discount tier that fits a budget
"""
MONTHS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

MONTHLY_PRICES = {
    'Ruby': [14500, 15200, 14900, 14100, 13800, 14350, 14000, 13750, 13900, 14200, 14600, 15000],
    'Sapphire': [9000, 8700, 9100, 8800, 8600, 8450, 8300, 8250, 8400, 8550, 8800, 8950],
    'Emerald': [12000, 11800, 11950, 11600, 11400, 11300, 11250, 11100, 11200, 11350, 11500, 11700],
    'Diamond': [30000, 30500, 29800, 29000, 28800, 29200, 29500, 29700, 30100, 30600, 30900, 31200],
    'Yellow Sapphire': [4500, 4700, 4600, 4400, 4300, 4200, 4150, 4250, 4350, 4450, 4550, 4650],
    'Blue Sapphire': [10000, 9800, 9700, 9500, 9300, 9250, 9100, 9050, 9150, 9300, 9450, 9600],
}

SUPPLIER_OFFERS = [
    {
        'id': 'S-901', 'name': 'Shree Gems Traders', 'rating': 4.7, 'delivery_days': 5,
        'discount_tiers': [{'min': 5, 'pct': 3}, {'min': 10, 'pct': 7}, {'min': 20, 'pct': 12}],
    },
    {
        'id': 'S-783', 'name': 'Mogok Exports', 'rating': 4.5, 'delivery_days': 9,
        'discount_tiers': [{'min': 5, 'pct': 4}, {'min': 12, 'pct': 8}, {'min': 25, 'pct': 14}],
    },
    {
        'id': 'S-644', 'name': 'Ratnapura Sapphires', 'rating': 4.6, 'delivery_days': 7,
        'discount_tiers': [{'min': 4, 'pct': 2}, {'min': 10, 'pct': 6}, {'min': 20, 'pct': 10}],
    },
]

HORIZONS = (3, 6, 12)


class BulkPurchaseError(ValueError):
    pass


def price_series(stone_type, horizon=12):
    if stone_type not in MONTHLY_PRICES:
        raise BulkPurchaseError(f"No price history for '{stone_type}'. Options: {', '.join(MONTHLY_PRICES)}")
    prices = MONTHLY_PRICES[stone_type][:horizon]
    return [{'month': month, 'price': price} for month, price in zip(MONTHS, prices)]


def supplier_score(supplier):
    max_pct = max((tier['pct'] for tier in supplier['discount_tiers']), default=0)
    return supplier['rating'] - supplier['delivery_days'] / 10 + max_pct / 10


def best_supplier(suppliers=None):
    suppliers = suppliers if suppliers is not None else SUPPLIER_OFFERS
    if not suppliers:
        return None
    scored = [{**s, 'score': round(supplier_score(s), 2)} for s in suppliers]
    return max(scored, key=lambda s: s['score'])


def batch_suggestion(price_per_carat, supplier, target_carats, budget):
    """Tier with the biggest discount whose net cost is within budget, or None"""
    if supplier is None:
        return None
    candidates = []
    for tier in supplier['discount_tiers']:
        carats = max(target_carats, tier['min'])
        gross = price_per_carat * carats
        discount = gross * tier['pct'] / 100
        net = gross - discount
        if net <= budget:
            candidates.append({
                'tier': tier,
                'carats': carats,
                'gross': round(gross, 2),
                'discount': round(discount, 2),
                'net': round(net, 2),
            })
    if not candidates:
        return None
    return max(candidates, key=lambda c: c['discount'])


def optimize(stone_type, horizon=12, budget=500000, target_carats=50):
    series = price_series(stone_type, horizon)
    lowest = min(series, key=lambda p: p['price'])
    average = round(sum(p['price'] for p in series) / len(series))
    supplier = best_supplier()
    return {
        'stone_type': stone_type,
        'horizon': horizon,
        'series': series,
        'lowest_month': lowest,
        'average_price': average,
        'best_supplier': supplier,
        'batch_suggestion': batch_suggestion(average, supplier, target_carats, budget),
    }
