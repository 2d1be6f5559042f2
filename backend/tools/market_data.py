"""
Twelve-month market price series per stone type, threshold alerts and CSV import
"""
import csv
import io
from datetime import date

from .bulk_purchase import MONTHLY_PRICES
from .valuation import base_price_for

# Seasonal shape applied to the base price when no history exists for a type
SEASONAL_FACTORS = [1.00, 1.02, 1.01, 0.98, 0.96, 0.97, 0.95, 0.94, 0.96, 0.99, 1.01, 1.03]

MAX_ALERTS = 5


class MarketDataError(ValueError):
    pass


def _month_starts(today, count=12):
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def price_series(stone_type, today=None):
    """Oldest first, one point per month ending with the current month"""
    today = today or date.today()
    if stone_type in MONTHLY_PRICES:
        prices = MONTHLY_PRICES[stone_type]
    else:
        base = base_price_for(stone_type)
        prices = [round(base * factor) for factor in SEASONAL_FACTORS]
    return [
        {'date': month.isoformat(), 'price': price}
        for month, price in zip(_month_starts(today), prices)
    ]


def month_over_month(series):
    if len(series) < 2:
        return 0
    previous, latest = series[-2]['price'], series[-1]['price']
    if not previous:
        return 0
    return round((latest - previous) / previous * 100)


def price_alerts(stone_type, series, threshold, direction='above'):
    if not series or not threshold:
        return []
    last = series[-1]['price']
    if direction == 'above' and last >= threshold:
        return [f"Price for {stone_type} reached ₹{last} (≥ ₹{threshold})"]
    if direction == 'below' and last <= threshold:
        return [f"Price for {stone_type} fell to ₹{last} (≤ ₹{threshold})"]
    return []


def parse_price_csv(text):
    """Rows of `date,price`; rows without a date or a numeric price are dropped"""
    points = []
    for row in csv.reader(io.StringIO(text or '')):
        if len(row) < 2 or not row[0].strip():
            continue
        try:
            price = float(row[1])
        except ValueError:
            continue
        points.append({'date': row[0].strip(), 'price': price})
    if not points:
        raise MarketDataError('No valid date,price rows found')
    return points


def market_summary(stone_type, series, threshold=None, direction='above'):
    prices = [p['price'] for p in series]
    return {
        'stone_type': stone_type,
        'series': series,
        'latest_price': prices[-1] if prices else None,
        'min_price': min(prices) if prices else None,
        'max_price': max(prices) if prices else None,
        'month_over_month_pct': month_over_month(series),
        'alerts': price_alerts(stone_type, series, threshold, direction)[:MAX_ALERTS],
    }
