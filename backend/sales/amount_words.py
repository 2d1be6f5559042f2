"""
Indian currency amounts in words (crore / lakh / thousand / hundred grouping)
"""
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

ONES = [
    '', 'One', 'Two', 'Three', 'Four', 'Five', 'Six', 'Seven', 'Eight', 'Nine', 'Ten',
    'Eleven', 'Twelve', 'Thirteen', 'Fourteen', 'Fifteen', 'Sixteen', 'Seventeen', 'Eighteen', 'Nineteen',
]
TENS = ['', '', 'Twenty', 'Thirty', 'Forty', 'Fifty', 'Sixty', 'Seventy', 'Eighty', 'Ninety']


def two_digits(n):
    if n < 20:
        return ONES[n]
    return TENS[n // 10] + (' ' + ONES[n % 10] if n % 10 else '')


def three_digits(n):
    hundred, rest = divmod(n, 100)
    words = ''
    if hundred:
        words = ONES[hundred] + ' Hundred' + (' ' if rest else '')
    if rest:
        words += two_digits(rest)
    return words


def indian_words(n):
    """Words for a whole number in crore / lakh / thousand grouping (empty for 0)"""
    crore, remainder = divmod(n, 10000000)
    lakh, remainder = divmod(remainder, 100000)
    thousand, hundred = divmod(remainder, 1000)

    parts = []
    if crore:
        # Crore counts above 99 group again, e.g. Two Thousand Five Hundred Crore
        parts.append(indian_words(crore) + ' Crore')
    if lakh:
        parts.append(two_digits(lakh) + ' Lakh')
    if thousand:
        parts.append(two_digits(thousand) + ' Thousand')
    if hundred:
        parts.append(three_digits(hundred))
    return ' '.join(parts)


def amount_to_words_inr(amount):
    """
    Spell out a rupee amount, e.g. 1234567.5 ->
    'Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven and Fifty Paise'
    """
    amount = Decimal(str(amount or 0))
    rupees = int(amount.to_integral_value(rounding=ROUND_FLOOR))
    paise = int(((amount - rupees) * 100).to_integral_value(rounding=ROUND_HALF_UP))
    if paise == 100:
        rupees, paise = rupees + 1, 0

    words = indian_words(rupees) or 'Zero'

    if paise:
        return f"{words} and {two_digits(paise)} Paise"
    return f"{words} Only"
