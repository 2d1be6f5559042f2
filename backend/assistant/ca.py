"""
Reference data for the CA / legal assistant: GST rules by HSN code and
income-tax saving tips
"""

FILING_DEADLINES = [
    'GST to be collected at the time of supply',
    'GSTR-1 to be filed by 11th of next month',
    'GSTR-3B to be filed by 20th of next month',
]

FILING_PENALTIES = [
    'Late filing: ₹50 per day (maximum ₹5,000)',
    'Incorrect HSN: ₹25,000 per return',
    'Non-compliance: Up to 100% of tax amount',
]

GST_RULES = [
    {
        'id': '1',
        'rule': 'GST Rate for Precious Stones',
        'description': 'Precious stones and semi-precious stones attract 3% GST',
        'rate': '3%',
        'hsn_code': '7103',
        'conditions': ['Must be in raw form', 'Not set in jewelry', 'Proper HSN code'],
        'compliance': 'Use HSN code 7103 for precious stones',
        'exemptions': ['Stones set in jewelry (attracts 3% on jewelry)', 'Imitation stones (attracts 18% GST)'],
    },
    {
        'id': '2',
        'rule': 'GST Rate for Jewelry',
        'description': 'Gold, silver, and platinum jewelry attracts 3% GST',
        'rate': '3%',
        'hsn_code': '7113',
        'conditions': ['Must be jewelry items', 'Proper hallmarking', 'Invoice with HSN'],
        'compliance': 'Use HSN code 7113 for jewelry',
        'exemptions': [],
    },
    {
        'id': '3',
        'rule': 'GST Rate for Diamond',
        'description': 'Diamonds attract 3% GST',
        'rate': '3%',
        'hsn_code': '7102',
        'conditions': ['Must be in raw form', 'Proper certification', 'HSN code 7102'],
        'compliance': 'Use HSN code 7102 for diamonds',
        'exemptions': ['Diamonds for industrial use (may have different rates)'],
    },
    {
        'id': '4',
        'rule': 'GST Rate for Pearl',
        'description': 'Natural and cultured pearls attract 3% GST',
        'rate': '3%',
        'hsn_code': '7101',
        'conditions': ['Must be natural or cultured', 'Not imitation', 'HSN code 7101'],
        'compliance': 'Use HSN code 7101 for pearls',
        'exemptions': [],
    },
    {
        'id': '5',
        'rule': 'GST Rate for Imitation Jewelry',
        'description': 'Imitation jewelry attracts 18% GST',
        'rate': '18%',
        'hsn_code': '7117',
        'conditions': ['Must be imitation', 'Not precious metals', 'HSN code 7117'],
        'compliance': 'Use HSN code 7117 for imitation jewelry',
        'exemptions': [],
    },
    {
        'id': '6',
        'rule': 'GST Rate for Gemstone Cutting',
        'description': 'Services for cutting and polishing gemstones attract 18% GST',
        'rate': '18%',
        'hsn_code': '9983',
        'conditions': ['Must be service', 'Not goods', 'SAC code 9983'],
        'compliance': 'Use SAC code 9983 for gemstone services',
        'exemptions': ['Export of services (zero-rated)', 'Services to SEZ units (zero-rated)'],
    },
]

for _rule in GST_RULES:
    _rule['deadlines'] = FILING_DEADLINES
    _rule['penalties'] = FILING_PENALTIES

TAX_SAVING_TIPS = [
    {
        'id': '1',
        'title': 'Section 80C - ELSS Investment',
        'description': 'Invest in Equity Linked Saving Schemes to claim deduction up to ₹1.5 lakh under Section 80C',
        'category': 'Investment',
        'section': '80C',
        'savings': '₹1.5 lakh deduction',
        'risk_level': 'medium',
        'compliance': 'Must be held for 3 years minimum',
    },
    {
        'id': '2',
        'title': 'Section 80D - Health Insurance Premium',
        'description': 'Claim deduction for health insurance premium paid for self, spouse, children, and parents',
        'category': 'Insurance',
        'section': '80D',
        'savings': 'Up to ₹25,000 (₹50,000 for senior citizens)',
        'risk_level': 'low',
        'compliance': 'Premium must be paid by cheque/online',
    },
    {
        'id': '3',
        'title': 'Section 80G - Charitable Donations',
        'description': 'Donate to registered charitable organizations to claim deduction',
        'category': 'Donation',
        'section': '80G',
        'savings': '50% or 100% of donation amount',
        'risk_level': 'low',
        'compliance': 'Must be to registered organizations',
    },
    {
        'id': '4',
        'title': 'Section 80TTA - Interest on Savings Account',
        'description': 'Claim deduction for interest earned on savings account up to ₹10,000',
        'category': 'Interest',
        'section': '80TTA',
        'savings': '₹10,000 deduction',
        'risk_level': 'low',
        'compliance': 'Only for savings account interest',
    },
    {
        'id': '5',
        'title': 'Section 80TTB - Interest on Fixed Deposits',
        'description': 'Senior citizens can claim deduction for interest on fixed deposits up to ₹50,000',
        'category': 'Interest',
        'section': '80TTB',
        'savings': '₹50,000 deduction',
        'risk_level': 'low',
        'compliance': 'Only for senior citizens',
    },
    {
        'id': '6',
        'title': 'Section 80E - Education Loan Interest',
        'description': 'Claim deduction for interest paid on education loan for higher studies',
        'category': 'Education',
        'section': '80E',
        'savings': 'Full interest amount',
        'risk_level': 'low',
        'compliance': 'Must be for approved courses',
    },
    {
        'id': '7',
        'title': 'Section 80CCD(1B) - NPS Additional Contribution',
        'description': 'Additional deduction of ₹50,000 for NPS contribution beyond Section 80C limit',
        'category': 'Pension',
        'section': '80CCD(1B)',
        'savings': '₹50,000 additional deduction',
        'risk_level': 'low',
        'compliance': 'Must be to NPS account',
    },
    {
        'id': '8',
        'title': 'Section 80GGA - Rural Development Donations',
        'description': 'Donate to rural development projects for deduction',
        'category': 'Donation',
        'section': '80GGA',
        'savings': '100% of donation amount',
        'risk_level': 'low',
        'compliance': 'Must be to approved projects',
    },
]


def gst_rules(rate=None, hsn_code=None):
    rules = GST_RULES
    if rate:
        rate = rate if rate.endswith('%') else f'{rate}%'
        rules = [r for r in rules if r['rate'] == rate]
    if hsn_code:
        rules = [r for r in rules if r['hsn_code'] == str(hsn_code)]
    return rules


def tax_tips(category=None):
    if category:
        return [t for t in TAX_SAVING_TIPS if t['category'].lower() == category.lower()]
    return TAX_SAVING_TIPS
