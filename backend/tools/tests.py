"""
Test suite for Tools module
Tests: Valuation, Bulk purchase, Quality comparison, Analysis, Origin verification, Market prices
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.tools.analysis import StoneProfile, analyze
from backend.tools.bulk_purchase import best_supplier, batch_suggestion
from backend.tools.market_data import MarketDataError, month_over_month, parse_price_csv
from backend.tools.origin import confidence_badge, match_origin
from backend.tools.quality import quality_score
from backend.tools.valuation import ValuationError, valuate


class CalculatorTests(TestCase):
    """Pure calculator functions"""

    def test_valuation_multipliers(self):
        """Value is base price times carat times every multiplier"""
        result = valuate('Ruby', 2, grade='AAA', origin='Burma', certified=True)
        self.assertAlmostEqual(result.estimated_value, 150075.0, places=2)
        self.assertAlmostEqual(result.price_min, 127563.75, places=2)
        self.assertAlmostEqual(result.price_max, 172586.25, places=2)
        self.assertEqual(result.confidence, 85)
        self.assertEqual([f['name'] for f in result.factors], ['Grade', 'Origin', 'Certification'])

    def test_valuation_unknown_type_uses_default_base(self):
        """Unlisted stone types fall back to the default base price"""
        result = valuate('Moonstone', 1)
        self.assertEqual(result.base_price, 10000)
        self.assertEqual(result.estimated_value, 10000.0)
        self.assertEqual(result.confidence, 70)

    def test_valuation_rejects_unknown_grade(self):
        """Unknown attribute values raise"""
        with self.assertRaises(ValuationError):
            valuate('Ruby', 1, grade='Z')

    def test_best_supplier_and_batch(self):
        """The highest scoring supplier is chosen and the largest affordable discount wins"""
        supplier = best_supplier()
        self.assertEqual(supplier['name'], 'Shree Gems Traders')
        self.assertEqual(supplier['score'], 5.4)

        batch = batch_suggestion(10000, supplier, 4, 1000000)
        self.assertEqual(batch['tier']['pct'], 12)
        self.assertEqual(batch['carats'], 20)
        self.assertEqual(batch['net'], 176000.0)
        self.assertIsNone(batch_suggestion(10000, supplier, 50, 1000))

    def test_quality_score(self):
        """Weighted score of grade, carat, origin and certification"""
        stone = {'grade': 'AAA', 'carat': 2, 'origin': 'Sri Lanka', 'certified': True}
        self.assertEqual(quality_score(stone), 2.1)
        self.assertEqual(quality_score({}), 0)

    def test_analysis_rules(self):
        """Recommendations fire on grade, carat and origin"""
        profile = StoneProfile(type='Ruby', grade='AA', carat=6, origin='Sri Lanka', price_per_carat=25000)
        result = analyze(profile)
        self.assertEqual(len(result['recommendations']), 3)
        self.assertEqual(result['market_value'], 198000)
        self.assertEqual(result['market_trend'], 'High-end')
        self.assertEqual(result['profit_potential'], 'Medium')
        self.assertEqual(result['confidence'], 99)

    def test_origin_helpers(self):
        """Claims match known origins and confidence maps to a badge"""
        self.assertEqual(match_origin('colombia')['region'], 'Muzo')
        self.assertEqual(match_origin('Atlantis')['country'], 'Burma (Myanmar)')
        self.assertEqual(confidence_badge(85), 'High')
        self.assertEqual(confidence_badge(65), 'Low')

    def test_price_csv(self):
        """Rows without a date or numeric price are dropped"""
        points = parse_price_csv("2025-01-01,100\n2025-02-01,110\nbad,row\n,5\n")
        self.assertEqual(len(points), 2)
        self.assertEqual(month_over_month(points), 10)
        with self.assertRaises(MarketDataError):
            parse_price_csv('no prices here')


class ToolsApiTests(TestCase):
    """Test tool endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_requires_authentication(self):
        """Tools are not available anonymously"""
        self.client.logout()
        response = self.client.post('/api/tools/valuation/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_valuation(self):
        """Valuation returns a price range and trend"""
        response = self.client.post('/api/tools/valuation/', {
            'gemstone_type': 'Emerald', 'carat': '1.00', 'grade': 'B'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['estimated_value'], 25000.0)
        self.assertEqual(len(response.data['market_trend']), 6)

    def test_valuation_errors(self):
        """Zero carat and unknown attributes are rejected"""
        response = self.client.post('/api/tools/valuation/', {'gemstone_type': 'Ruby', 'carat': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/tools/valuation/', {
            'gemstone_type': 'Ruby', 'carat': '1.00', 'cut': 'Brilliant'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_bulk_purchase(self):
        """The cheapest month and average price over the horizon"""
        response = self.client.post('/api/tools/bulk-purchase/', {
            'stone_type': 'Ruby', 'horizon': 3, 'budget': '1000000', 'target_carats': '50'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['series']), 3)
        self.assertEqual(response.data['lowest_month'], {'month': 'Jan', 'price': 14500})
        self.assertEqual(response.data['average_price'], 14867)
        self.assertEqual(response.data['batch_suggestion']['tier']['pct'], 12)

    def test_bulk_purchase_errors(self):
        """Unknown stones and horizons are rejected"""
        response = self.client.post('/api/tools/bulk-purchase/', {'stone_type': 'Onyx'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/tools/bulk-purchase/', {'horizon': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_quality_comparison_inline(self):
        """Two inline stones are scored and the better one named"""
        response = self.client.post('/api/tools/quality-comparison/', {
            'left': {'grade': 'AAA', 'carat': '2.00', 'origin': 'Sri Lanka', 'certified': True, 'price': '100000'},
            'right': {'grade': 'A', 'carat': '3.00', 'origin': 'Thailand', 'price': '60000'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['left']['score'], 2.1)
        self.assertEqual(response.data['right']['score'], 1.44)
        self.assertEqual(response.data['better'], 'Left')
        self.assertEqual(response.data['price_delta'], -40000.0)

    def test_quality_comparison_inventory(self):
        """Inventory stones can be compared by id"""
        left = TestDataFactory.create_stone(grade='AAA', carat=Decimal('2.00'))
        right = TestDataFactory.create_stone(grade='AAA', carat=Decimal('2.00'))
        response = self.client.post('/api/tools/quality-comparison/', {
            'left_id': left.id, 'right_id': right.id
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['better'], 'Equal')
        self.assertEqual(response.data['left']['stone_id'], left.stone_id)

    def test_quality_comparison_missing_side(self):
        """Both sides are required"""
        response = self.client.post('/api/tools/quality-comparison/', {
            'left': {'grade': 'AAA', 'carat': '2.00'}
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_analysis(self):
        """Analysis of attributes from the body"""
        response = self.client.post('/api/tools/analysis/', {
            'type': 'Ruby', 'grade': 'AA', 'carat': '6.00', 'origin': 'Sri Lanka', 'price_per_carat': '25000'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['market_demand'], 'High')
        self.assertEqual(response.data['risk_level'], 'Low')

    def test_stone_analysis(self):
        """Analysis of a stone in inventory"""
        stone = TestDataFactory.create_stone(grade='AAA', origin='Burma', carat=Decimal('2.50'),
                                             selling_price=Decimal('75000.00'))
        response = self.client.get(f'/api/inventory/{stone.id}/analysis/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stone_id'], stone.stone_id)
        self.assertEqual(response.data['recommendations'], [])
        self.assertEqual(response.data['market_value'], 97500)
        self.assertEqual(response.data['confidence'], 85)

        response = self.client.get('/api/inventory/99999/analysis/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_origin_verification(self):
        """Methods are listed and a verification averages their reliability"""
        response = self.client.get('/api/tools/origin-verification/')
        self.assertEqual(len(response.data['methods']), 5)

        response = self.client.post('/api/tools/origin-verification/', {
            'stone_id': 'RUB-001', 'claimed_origin': 'Sri Lanka', 'methods': ['1', '2']
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confidence'], 90.0)
        self.assertEqual(response.data['confidence_level'], 'Very High')
        self.assertEqual(response.data['region'], 'Ratnapura')
        self.assertEqual(response.data['stone_id'], 'RUB-001')

    def test_origin_verification_errors(self):
        """Empty and unknown methods are rejected"""
        response = self.client.post('/api/tools/origin-verification/', {
            'claimed_origin': 'Colombia', 'methods': []
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/tools/origin-verification/', {
            'claimed_origin': 'Colombia', 'methods': ['9']
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_market_prices(self):
        """Twelve month series with an optional alert"""
        response = self.client.get('/api/tools/market-prices/Ruby/?threshold=15000')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['series']), 12)
        self.assertEqual(response.data['latest_price'], 15000)
        self.assertEqual(response.data['min_price'], 13750)
        self.assertEqual(response.data['max_price'], 15200)
        self.assertEqual(response.data['month_over_month_pct'], 3)
        self.assertEqual(len(response.data['alerts']), 1)

        response = self.client.get('/api/tools/market-prices/Ruby/?threshold=10000&direction=below')
        self.assertEqual(response.data['alerts'], [])

    def test_market_prices_import(self):
        """An imported CSV series is summarized"""
        response = self.client.post('/api/tools/market-prices/Ruby/?threshold=105', {
            'csv': "2025-01-01,100\n2025-02-01,110\n"
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['latest_price'], 110.0)
        self.assertEqual(len(response.data['alerts']), 1)

        response = self.client.post('/api/tools/market-prices/Ruby/', {'csv': 'nothing'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
