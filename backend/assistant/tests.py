"""
Test suite for Assistant module
Tests: Gemini service wrapper, prompt formatting, reply parsing, Astrological and CA assistants
"""
from unittest import mock
from django.test import TestCase, override_settings
from rest_framework import status
from backend.assistant.astrological import (
    QUICK_FALLBACK, AstrologicalAIService, local_recommendations, parse_response
)
from backend.assistant.ca import gst_rules, tax_tips
from backend.assistant.context import business_snapshot
from backend.assistant.gemini_service import (
    AssistantError, AssistantUnavailable, GeminiService, analysis_type_for, extract_insights,
    extract_suggestions, format_sales_data, format_task_data, trim_words
)
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient

ASTRO_REPLY = """COMPATIBILITY ANALYSIS:
• Ruby - Excellent
  • Benefits: Courage, Energy
  • Reasons: Ruled by the Sun
• Pearl - Avoid
  • Alternatives: Moonstone, Opal

TIMING ADVICE:
• Wear on Sunday morning

GENERAL ADVICE:
• Keep the stone clean
"""


def fake_service(reply=None, error=None):
    """GeminiService whose model client returns `reply` or raises `error`"""
    client = mock.Mock()
    if error is not None:
        client.models.generate_content.side_effect = error
    else:
        client.models.generate_content.return_value = mock.Mock(text=reply)
    return GeminiService(api_key='test-key', model='gemini-test', client=client)


class GeminiServiceTests(TestCase):
    """Model wrapper and helpers"""

    def test_missing_key(self):
        """Without a key the service is unavailable"""
        with self.assertRaises(AssistantUnavailable):
            GeminiService(api_key='')

    def test_generate_passes_model(self):
        """The configured model name is sent with the prompt"""
        service = fake_service('Hello')
        self.assertEqual(service.generate('Hi'), 'Hello')
        service.client.models.generate_content.assert_called_once_with(model='gemini-test', contents='Hi')

    def test_generate_errors(self):
        """Client failures and empty replies raise AssistantError"""
        with self.assertRaises(AssistantError):
            fake_service(error=RuntimeError('network down')).generate('Hi')
        with self.assertRaises(AssistantError):
            fake_service('').generate('Hi')

    def test_analyze_business_data(self):
        """Replies are split into suggestions and insights"""
        reply = "• Restock rubies before Diwali\n• Sales trend is rising for emeralds\nok"
        result = fake_service(reply).analyze_business_data('How is my profit margin?', {})
        self.assertEqual(result['analysis']['type'], 'profit_analysis')
        self.assertEqual(len(result['suggestions']), 2)
        self.assertEqual(result['insights'], ['• Sales trend is rising for emeralds'])

    def test_generate_text_collapses_blank_lines(self):
        """CA answers collapse runs of blank lines"""
        service = fake_service('Use HSN 7103.\n\n\n\nFile GSTR-1 monthly.')
        self.assertEqual(service.generate_text('Which HSN?'), 'Use HSN 7103.\n\nFile GSTR-1 monthly.')
        prompt = service.client.models.generate_content.call_args.kwargs['contents']
        self.assertIn('Chartered Accountant', prompt)
        self.assertIn('Query: Which HSN?', prompt)

    def test_helpers(self):
        """Analysis type, extraction and trimming helpers"""
        self.assertEqual(analysis_type_for('Show me stock levels'), 'inventory_analysis')
        self.assertEqual(analysis_type_for('hello'), 'general_analysis')
        self.assertEqual(extract_suggestions('- short\n- Follow up with Ravi Jewellers'), ['Follow up with Ravi Jewellers'])
        self.assertEqual(extract_insights('a pattern\nA clear pattern in sapphire sales'), ['A clear pattern in sapphire sales'])
        self.assertEqual(trim_words('one two three', limit=2), 'one two...')

    def test_formatters(self):
        """Empty data and totals are formatted for the prompt"""
        self.assertEqual(format_sales_data([]), 'No sales data available')
        text = format_sales_data([
            {'client': 'Ravi', 'stone': 'RUB-1 Ruby', 'total_amount': 60000, 'date': '2025-03-01'},
            {'client': 'Meera', 'stone': 'EME-1 Emerald', 'total_amount': 40000, 'date': '2025-03-02'},
        ])
        self.assertIn('Total Sales: 2', text)
        self.assertIn('Total Revenue: ₹100,000.00', text)
        self.assertIn('Average Sale Value: ₹50,000.00', text)
        tasks = format_task_data([{'title': 'Call Ravi', 'status': 'Pending', 'priority': 'High'}])
        self.assertIn('- Call Ravi: High priority (No due date)', tasks)


class BusinessSnapshotTests(TestCase):
    """Live data handed to prompts"""

    def test_snapshot(self):
        """Sales, clients and stones appear as plain dicts"""
        buyer = TestDataFactory.create_client(name='Ravi Jewellers', loyalty_level='Low')
        sale = TestDataFactory.create_sale(client=buyer)
        TestDataFactory.create_task(title='Call Ravi')

        snapshot = business_snapshot()
        self.assertEqual(snapshot['sales'][0]['sale_id'], sale.sale_id)
        self.assertEqual(snapshot['sales'][0]['client'], 'Ravi Jewellers')
        self.assertEqual(snapshot['inventory'][0]['status'], 'Sold')
        self.assertFalse(snapshot['clients'][0]['is_trustworthy'])
        self.assertFalse(snapshot['clients'][0]['is_recurring'])
        self.assertEqual(snapshot['tasks'][0]['title'], 'Call Ravi')


class AstrologicalTests(TestCase):
    """Zodiac gemstone recommendations"""

    def test_parse_response(self):
        """Stone lines, their details, timing and advice are parsed"""
        result = parse_response(ASTRO_REPLY, {'zodiac_sign': 'Leo'})
        ruby, pearl = result['recommendations']
        self.assertEqual(ruby['stone'], 'Ruby')
        self.assertEqual(ruby['compatibility'], 'Excellent')
        self.assertEqual(ruby['benefits'], ['Courage', 'Energy'])
        self.assertEqual(ruby['reasons'], ['Ruled by the Sun'])
        self.assertEqual(pearl['compatibility'], 'Avoid')
        self.assertEqual(pearl['alternatives'], ['Moonstone', 'Opal'])
        self.assertEqual(pearl['benefits'], ['Emotional Balance', 'Intuition', 'Peace', 'Fertility'])
        self.assertEqual(result['timing'], '• Wear on Sunday morning')
        self.assertEqual(result['general_advice'], ['• Keep the stone clean'])

    def test_local_recommendations(self):
        """Stones linked with the sign are ranked first"""
        recommendations = local_recommendations('Leo')
        self.assertEqual(len(recommendations), 10)
        self.assertEqual([r['stone'] for r in recommendations[:2]], ['Ruby', 'Diamond'])
        self.assertEqual(recommendations[2]['compatibility'], 'Moderate')

    def test_quick_recommendation_fallback(self):
        """A failed model call gives the fallback sentence"""
        service = AstrologicalAIService(fake_service(error=RuntimeError('timeout')))
        self.assertEqual(service.quick_recommendation('Leo', 'confidence'), QUICK_FALLBACK)


class CAReferenceTests(TestCase):
    """GST rules and tax tips"""

    def test_gst_rules_filters(self):
        """Rules filter by rate with or without a percent sign and by HSN code"""
        self.assertEqual(len(gst_rules()), 6)
        self.assertEqual(len(gst_rules(rate='18')), 2)
        self.assertEqual(len(gst_rules(rate='3%')), 4)
        self.assertEqual(gst_rules(hsn_code='7103')[0]['rule'], 'GST Rate for Precious Stones')
        self.assertIn('deadlines', gst_rules()[0])

    def test_tax_tips_filter(self):
        """Tips filter by category case-insensitively"""
        self.assertEqual(len(tax_tips()), 8)
        self.assertEqual(len(tax_tips(category='donation')), 2)


class AssistantApiTests(TestCase):
    """Test assistant endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    @override_settings(GEMINI_API_KEY='')
    def test_unavailable_without_key(self):
        """Model-backed endpoints answer 503 without a key"""
        response = self.client.post('/api/gemini/', {'query': 'How are sales?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        response = self.client.post('/api/ca/ask/', {'question': 'GST on rubies?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        response = self.client.post('/api/astrological/quick/', {'zodiac_sign': 'Leo', 'concern': 'career'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    @mock.patch('backend.assistant.views.get_gemini_service')
    def test_business_query(self, mock_service):
        """Business questions are answered with a timestamp"""
        mock_service.return_value = fake_service('• Focus on high margin sapphires this month')
        response = self.client.post('/api/gemini/', {'query': 'Where is my margin?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['analysis']['type'], 'profit_analysis')
        self.assertIn('timestamp', response.data)

    def test_business_query_blank(self):
        """A blank query is rejected"""
        response = self.client.post('/api/gemini/', {'query': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch('backend.assistant.views.get_gemini_service')
    def test_business_query_failure(self, mock_service):
        """A failed model call is a bad gateway"""
        mock_service.return_value = fake_service(error=RuntimeError('quota'))
        response = self.client.post('/api/gemini/', {'query': 'Sales?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)

    @mock.patch('backend.assistant.views.get_gemini_service')
    def test_insights_and_recommendations(self, mock_service):
        """Insights and recommendations are extracted from the reply"""
        mock_service.return_value = fake_service(
            "• Ruby sales trend is up this quarter\n• Restock emeralds before the wedding season"
        )
        response = self.client.get('/api/gemini/insights/')
        self.assertEqual(response.data['insights'], ['• Ruby sales trend is up this quarter'])

        response = self.client.post('/api/gemini/recommendations/', {}, format='json')
        self.assertEqual(response.data['focus_area'], 'overall business performance')
        self.assertEqual(len(response.data['recommendations']), 2)

    @mock.patch('backend.assistant.views.get_gemini_service')
    def test_astrological_analyze(self, mock_service):
        """Parsed stones are returned, or the local ranking when none were given"""
        mock_service.return_value = fake_service(ASTRO_REPLY)
        response = self.client.post('/api/astrological/analyze/', {
            'zodiac_sign': 'Leo', 'birth_date': '1990-08-10', 'specific_concerns': ['career']
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['recommendations']), 2)
        self.assertEqual(response.data['profile']['birth_date'], '1990-08-10')

        mock_service.return_value = fake_service('Wear what feels right.')
        response = self.client.post('/api/astrological/analyze/', {'zodiac_sign': 'Leo'}, format='json')
        self.assertEqual(len(response.data['recommendations']), 10)
        self.assertEqual(response.data['recommendations'][0]['stone'], 'Ruby')

    def test_astrological_unknown_sign(self):
        """Unknown signs are rejected"""
        response = self.client.post('/api/astrological/analyze/', {'zodiac_sign': 'Dragon'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/astrological/stones/?zodiac_sign=Dragon')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_astrological_stones(self):
        """The database is listed and can be ranked for a sign"""
        response = self.client.get('/api/astrological/stones/')
        self.assertEqual(len(response.data['signs']), 12)
        self.assertIn('Ruby', response.data['stones'])

        response = self.client.get('/api/astrological/stones/?zodiac_sign=Cancer')
        self.assertEqual(response.data['recommendations'][0]['stone'], 'Pearl')

    @mock.patch('backend.assistant.views.get_gemini_service')
    def test_ca_ask(self, mock_service):
        """CA questions are answered"""
        mock_service.return_value = fake_service('Use HSN code 7103 and charge 3% GST.')
        response = self.client.post('/api/ca/ask/', {'question': 'GST on loose rubies?'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['answer'], 'Use HSN code 7103 and charge 3% GST.')

    def test_ca_reference_endpoints(self):
        """GST rules and tax tips are served with filters"""
        response = self.client.get('/api/ca/gst-rules/?rate=18')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/ca/tax-tips/?category=Interest')
        self.assertEqual(len(response.data), 2)
