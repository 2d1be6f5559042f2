"""
Business analyst and CA assistant backed by Google Gemini (google-genai SDK)
"""
import logging
import re

from django.conf import settings
from google import genai

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
MAX_INSIGHTS = 3
MAX_TEXT_WORDS = 500

ANALYSIS_TYPES = [
    (('profit', 'margin'), 'profit_analysis'),
    (('client', 'customer'), 'client_analysis'),
    (('inventory', 'stock'), 'inventory_analysis'),
    (('growth', 'trend'), 'growth_analysis'),
    (('overview', 'summary'), 'business_overview'),
]

CA_SYSTEM_PROMPT = """You are an expert Chartered Accountant (CA) with deep knowledge of taxation, GST, and financial strategies in India. You also specialize in the gemstone and jewelry industry, knowing every small and big trick to:

Save maximum tax legally
Optimize GST input and output
Structure the business for high profitability
Handle imports, exports, and compliance specific to gemstones
Suggest investment structures, audits, and accounting tricks
Guide on invoices, billing, and international trade for gems
Increase net profit while staying 100% compliant with Indian tax laws

Your goal is to help gemstone businesses start and scale from sourcing to selling, both offline and online, and make them highly profitable.

Provide detailed practical plans like you are their personal CA, not textbook answers. Include examples with numbers wherever possible. Focus on gemstone business realities, not just general business advice.

Format: Use proper markdown formatting with **bold text**, # headings, bullet points (•), and tables with | separators. For tables, use proper markdown table format with headers, separator line (|----|), and data rows. Include specific section numbers (Section 80C, HSN 7103), and provide actionable steps with examples. Keep responses comprehensive but well-structured."""

SHORT_ANSWER_RULES = """CRITICAL REQUIREMENTS:
- Each {kind} must be 1 sentence maximum
- Use bullet points (•) only - NO bold text
- Keep total under 50 words
- Focus on immediate actions
- Simple, clear language only
"""


class AssistantError(Exception):
    """The language model call failed or returned nothing usable"""
    pass


class AssistantUnavailable(AssistantError):
    """No API key configured"""
    pass


def _rupees(value):
    return f"₹{float(value or 0):,.2f}"


# Business data formatting

def format_sales_data(sales):
    if not sales:
        return 'No sales data available'

    total_revenue = sum(float(s.get('total_amount') or 0) for s in sales)
    recent = sorted(sales, key=lambda s: str(s.get('date') or ''), reverse=True)[:5]

    lines = [
        f"Total Sales: {len(sales)}",
        f"Total Revenue: {_rupees(total_revenue)}",
        f"Average Sale Value: {_rupees(total_revenue / len(sales))}",
        '',
        'DETAILED SALES LIST:',
    ]
    for index, sale in enumerate(sales, 1):
        lines.append(
            f"{index}. {sale.get('stone') or 'Unknown Gem'} - {_rupees(sale.get('total_amount'))}\n"
            f"   - Client: {sale.get('client') or 'Unknown Client'}\n"
            f"   - Date: {sale.get('date')}\n"
            f"   - Quantity: {sale.get('quantity') or 1}\n"
            f"   - Payment: {sale.get('payment_status') or 'Unpaid'}"
        )
    lines += ['', 'Recent Sales:']
    lines += [
        f"- {s.get('client') or 'Unknown Client'}: {s.get('stone') or 'Unknown Gem'} - {_rupees(s.get('total_amount'))} ({s.get('date')})"
        for s in recent
    ]
    return '\n'.join(lines)


def format_inventory_data(inventory):
    if not inventory:
        return 'No inventory data available'

    total_value = sum(float(i.get('selling_price') or 0) for i in inventory)
    certified = sum(1 for i in inventory if i.get('certified'))
    available = [i for i in inventory if i.get('status') == 'In Stock']
    low_stock = [i for i in inventory if int(i.get('quantity') or 0) < 5][:5]

    lines = [
        f"Total Items: {len(inventory)}",
        f"Total Value: {_rupees(total_value)}",
        f"Certified Items: {certified}",
        f"Available Items: {len(available)}",
        '',
        'DETAILED INVENTORY LIST:',
    ]
    for index, item in enumerate(inventory, 1):
        lines.append(
            f"{index}. {item.get('stone_id') or item.get('type') or 'Unknown Gem'}\n"
            f"   - Type: {item.get('type') or 'N/A'}\n"
            f"   - Price: {_rupees(item.get('selling_price'))}\n"
            f"   - Quantity: {item.get('quantity') or 0}\n"
            f"   - Weight: {item.get('carat') or 0} carats\n"
            f"   - Certified: {'Yes' if item.get('certified') else 'No'}\n"
            f"   - Status: {item.get('status') or 'N/A'}\n"
            f"   - Color: {item.get('color') or 'N/A'}\n"
            f"   - Clarity: {item.get('clarity') or 'N/A'}\n"
            f"   - Cut: {item.get('cut') or 'N/A'}"
        )
    lines += ['', 'Low Stock Items:']
    lines += [f"- {i.get('stone_id') or i.get('type')}: {i.get('quantity')} units remaining" for i in low_stock]
    return '\n'.join(lines)


def format_client_data(clients):
    if not clients:
        return 'No client data available'

    recurring = sum(1 for c in clients if c.get('is_recurring'))
    trustworthy = sum(1 for c in clients if c.get('is_trustworthy'))

    lines = [
        f"Total Clients: {len(clients)}",
        f"Recurring Clients: {recurring}",
        f"Trustworthy Clients: {trustworthy}",
        '',
        'DETAILED CLIENT LIST:',
    ]
    for index, client in enumerate(clients, 1):
        lines.append(
            f"{index}. {client.get('name')}\n"
            f"   - Phone: {client.get('phone') or 'N/A'}\n"
            f"   - Email: {client.get('email') or 'N/A'}\n"
            f"   - City: {client.get('city') or 'N/A'}\n"
            f"   - Recurring: {'Yes' if client.get('is_recurring') else 'No'}\n"
            f"   - Trustworthy: {'Yes' if client.get('is_trustworthy') else 'No'}\n"
            f"   - Loyalty: {client.get('loyalty_level') or 'N/A'}"
        )
    return '\n'.join(lines)


def format_supplier_data(suppliers):
    if not suppliers:
        return 'No supplier data available'

    domestic = sum(1 for s in suppliers if s.get('type') == 'Domestic')
    international = sum(1 for s in suppliers if s.get('type') == 'International')
    top = sorted(
        (s for s in suppliers if (s.get('quality_rating') or 0) >= 4),
        key=lambda s: s.get('quality_rating') or 0,
        reverse=True,
    )[:5]

    lines = [
        f"Total Suppliers: {len(suppliers)}",
        f"Domestic: {domestic}",
        f"International: {international}",
        f"High Quality (4+ rating): {len(top)}",
        '',
        'Top Suppliers:',
    ]
    lines += [f"- {s.get('name')}: {s.get('type')} (Rating: {s.get('quality_rating')}/5)" for s in top]
    return '\n'.join(lines)


def format_certification_data(certifications):
    if not certifications:
        return 'No certification data available'

    by_status = {}
    for cert in certifications:
        by_status[cert.get('status')] = by_status.get(cert.get('status'), 0) + 1
    return '\n'.join([
        f"Total Certifications: {len(certifications)}",
        f"Pending: {by_status.get('Pending', 0)}",
        f"In Progress: {by_status.get('In Progress', 0)}",
        f"Received: {by_status.get('Received', 0)}",
        f"Completed: {by_status.get('Certified', 0)}",
    ])


def format_task_data(tasks):
    if not tasks:
        return 'No task data available'

    pending = [t for t in tasks if t.get('status') == 'Pending']
    lines = [
        f"Total Tasks: {len(tasks)}",
        f"Pending: {len(pending)}",
        f"Completed: {sum(1 for t in tasks if t.get('status') == 'Done')}",
        f"High Priority: {sum(1 for t in tasks if t.get('priority') == 'High')}",
        '',
        'Pending Tasks:',
    ]
    lines += [
        f"- {t.get('title')}: {t.get('priority')} priority ({t.get('due_date') or 'No due date'})"
        for t in pending[:5]
    ]
    return '\n'.join(lines)


def build_analysis_prompt(query, business_data, context=None):
    data = {key: business_data.get(key) or [] for key in
            ('sales', 'inventory', 'clients', 'suppliers', 'certifications', 'tasks')}
    return f"""
You are a helpful AI business analyst. Provide detailed information when users ask for specific data (inventory, sales, clients, etc.) and concise analysis for general questions.

CRITICAL: NO bold text (**), NO excessive emojis. For detailed lists, show complete database information. For analysis, keep responses under 100 words.

You have access to the following business data:

SALES DATA ({len(data['sales'])} records):
{format_sales_data(data['sales'])}

INVENTORY DATA ({len(data['inventory'])} records):
{format_inventory_data(data['inventory'])}

CLIENT DATA ({len(data['clients'])} records):
{format_client_data(data['clients'])}

SUPPLIER DATA ({len(data['suppliers'])} records):
{format_supplier_data(data['suppliers'])}

CERTIFICATION DATA ({len(data['certifications'])} records):
{format_certification_data(data['certifications'])}

TASK DATA ({len(data['tasks'])} records):
{format_task_data(data['tasks'])}

CONTEXT: {context or 'General business analysis'}

USER QUERY: "{query}"

Provide analysis based on the query:

If user asks for specific data (inventory, sales, clients, etc.):
- Show detailed list with all available information
- Include item-by-item breakdown
- Provide complete database information

If user asks for general analysis:
- Answer in 1-2 sentences maximum
- List 3-4 key metrics as bullet points
- Give 2-3 actionable recommendations as bullet points

CRITICAL FORMATTING RULES:
- Use bullet points (•) ONLY - NO bold text, NO asterisks
- For detailed lists: show complete information
- For analysis: keep under 100 words
- Use minimal emojis (max 2-3 total)
- Write in simple, clear language
- Focus on immediate actionable items
"""


# Response parsing

def analysis_type_for(query):
    query = (query or '').lower()
    for keywords, analysis_type in ANALYSIS_TYPES:
        if any(keyword in query for keyword in keywords):
            return analysis_type
    return 'general_analysis'


def extract_suggestions(text, limit=MAX_SUGGESTIONS):
    suggestions = []
    for line in (text or '').split('\n'):
        if '•' in line or '-' in line or 'recommendation' in line:
            suggestion = re.sub(r'^[•\-]\s*', '', line).strip()
            if len(suggestion) > 10:
                suggestions.append(suggestion)
    return suggestions[:limit]


def extract_insights(text, limit=MAX_INSIGHTS):
    insights = []
    for line in (text or '').split('\n'):
        if 'insight' in line or 'trend' in line or 'pattern' in line:
            insight = line.strip()
            if len(insight) > 10:
                insights.append(insight)
    return insights[:limit]


def trim_words(text, limit=MAX_TEXT_WORDS):
    words = text.split(' ')
    if len(words) > limit:
        return ' '.join(words[:limit]) + '...'
    return text


class GeminiService:
    """Thin wrapper around the Gemini generate_content call"""

    def __init__(self, api_key=None, model=None, client=None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        if client is not None:
            self.client = client
        elif self.api_key:
            self.client = genai.Client(api_key=self.api_key)
        else:
            raise AssistantUnavailable('GEMINI_API_KEY is not configured')

    def generate(self, prompt):
        try:
            response = self.client.models.generate_content(model=self.model, contents=prompt)
        except Exception as e:
            logger.error(f"Gemini API error: {str(e)}")
            raise AssistantError('Failed to get a response from the AI service') from e

        text = getattr(response, 'text', None)
        if not text:
            raise AssistantError('The AI service returned an empty response')
        return text

    def analyze_business_data(self, query, business_data, context=None):
        text = self.generate(build_analysis_prompt(query, business_data, context))
        return {
            'content': text,
            'analysis': {'type': analysis_type_for(query), 'content': text},
            'suggestions': extract_suggestions(text),
            'insights': extract_insights(text),
        }

    def generate_business_insights(self, business_data):
        prompt = f"""
Based on the following gemstone business data, provide 3 concise, actionable business insights:

{format_sales_data(business_data.get('sales') or [])}
{format_inventory_data(business_data.get('inventory') or [])}
{format_client_data(business_data.get('clients') or [])}

{SHORT_ANSWER_RULES.format(kind='insight')}"""
        return extract_insights(self.generate(prompt))

    def generate_recommendations(self, business_data, focus_area):
        prompt = f"""
Based on the following gemstone business data, provide 3 specific recommendations for improving {focus_area}:

{format_sales_data(business_data.get('sales') or [])}
{format_inventory_data(business_data.get('inventory') or [])}
{format_client_data(business_data.get('clients') or [])}
{format_supplier_data(business_data.get('suppliers') or [])}

{SHORT_ANSWER_RULES.format(kind='recommendation')}"""
        return extract_suggestions(self.generate(prompt))

    def generate_text(self, prompt):
        full_prompt = f"""{CA_SYSTEM_PROMPT}

Query: {prompt}

Provide practical, actionable advice for this gemstone business query."""
        text = re.sub(r'\n\n+', '\n\n', self.generate(full_prompt)).strip()
        return trim_words(text)


def get_gemini_service():
    return GeminiService()
