"""
Astrological gemstone recommendations
"""
import logging
import re

from .gemini_service import AssistantError

logger = logging.getLogger(__name__)

ZODIAC_SIGNS = [
    'Aries', 'Taurus', 'Gemini', 'Cancer', 'Leo', 'Virgo',
    'Libra', 'Scorpio', 'Sagittarius', 'Capricorn', 'Aquarius', 'Pisces',
]

COMPATIBILITY_LEVELS = ['Excellent', 'Good', 'Moderate', 'Avoid']

GEMSTONE_DATABASE = {
    'Ruby': {
        'zodiac': ['Aries', 'Leo', 'Scorpio'],
        'benefits': ['Courage', 'Leadership', 'Energy', 'Passion'],
        'properties': 'Red corundum, associated with Sun and Mars',
    },
    'Pearl': {
        'zodiac': ['Cancer', 'Libra', 'Pisces'],
        'benefits': ['Emotional Balance', 'Intuition', 'Peace', 'Fertility'],
        'properties': 'Organic gem, associated with Moon',
    },
    'Emerald': {
        'zodiac': ['Taurus', 'Gemini', 'Virgo'],
        'benefits': ['Communication', 'Wisdom', 'Growth', 'Harmony'],
        'properties': 'Green beryl, associated with Mercury',
    },
    'Diamond': {
        'zodiac': ['Aries', 'Leo', 'Libra'],
        'benefits': ['Clarity', 'Strength', 'Purity', 'Success'],
        'properties': 'Pure carbon, associated with Venus',
    },
    'Sapphire': {
        'zodiac': ['Taurus', 'Virgo', 'Capricorn'],
        'benefits': ['Wisdom', 'Truth', 'Loyalty', 'Spirituality'],
        'properties': 'Blue corundum, associated with Saturn',
    },
    'Amethyst': {
        'zodiac': ['Pisces', 'Virgo', 'Aquarius'],
        'benefits': ['Spirituality', 'Calmness', 'Protection', 'Healing'],
        'properties': 'Purple quartz, associated with Jupiter',
    },
    'Topaz': {
        'zodiac': ['Sagittarius', 'Scorpio', 'Gemini'],
        'benefits': ['Success', 'Abundance', 'Protection', 'Healing'],
        'properties': 'Aluminum silicate, associated with Jupiter',
    },
    'Garnet': {
        'zodiac': ['Capricorn', 'Aquarius', 'Aries'],
        'benefits': ['Energy', 'Passion', 'Protection', 'Grounding'],
        'properties': 'Silicate minerals, associated with Mars',
    },
    'Opal': {
        'zodiac': ['Libra', 'Cancer', 'Pisces'],
        'benefits': ['Creativity', 'Emotional Balance', 'Intuition', 'Love'],
        'properties': 'Hydrated silica, associated with Venus',
    },
    'Turquoise': {
        'zodiac': ['Sagittarius', 'Pisces', 'Scorpio'],
        'benefits': ['Protection', 'Healing', 'Communication', 'Wisdom'],
        'properties': 'Copper aluminum phosphate, associated with Neptune',
    },
}

QUICK_FALLBACK = 'I recommend consulting with a gemstone expert for personalized advice.'

STONE_LINE_RE = re.compile(r'(\w+)\s*-\s*(Excellent|Good|Moderate|Avoid)')


def build_prompt(profile):
    concerns = ', '.join(profile.get('specific_concerns') or []) or 'General well-being'
    database = '\n\n'.join(
        f"{stone}:\n"
        f"   • Zodiac Compatibility: {', '.join(data['zodiac'])}\n"
        f"   • Benefits: {', '.join(data['benefits'])}\n"
        f"   • Properties: {data['properties']}"
        for stone, data in GEMSTONE_DATABASE.items()
    )
    return f"""You are an expert astrological gemstone consultant. Provide concise, practical advice with NO bold formatting.

Analyze the compatibility between {profile['zodiac_sign']} and various gemstones.

CUSTOMER PROFILE:
• Zodiac Sign: {profile['zodiac_sign']}
• Birth Date: {profile.get('birth_date') or 'Not provided'}
• Specific Concerns: {concerns}

GEMSTONE DATABASE:
{database}

ANALYSIS REQUIREMENTS:
1. Evaluate compatibility for each gemstone (Excellent/Good/Moderate/Avoid)
2. Provide specific reasons for recommendations
3. Suggest alternatives for incompatible stones
4. Include timing advice for wearing stones
5. Give general astrological advice

FORMAT RESPONSE AS:
COMPATIBILITY ANALYSIS:
• [Stone Name] - [Compatibility Level]
  • Benefits: [list]
  • Reasons: [why it's good/bad]
  • Alternatives: [if needed]

TIMING ADVICE:
• [When to wear stones]

GENERAL ADVICE:
• [Astrological recommendations]

CRITICAL FORMATTING RULES:
- Use bullet points (•) ONLY - NO bold text (**), NO asterisks
- NO bold formatting anywhere in the response
- Keep response under 300 words
- Use minimal emojis (max 2-3 total)
- Write in simple, clear language
- Focus on immediate actionable items"""


def _labelled_values(text, stone, label, split=True):
    values = []
    pattern = re.compile(rf'{label}:\s*(.+)')
    for line in text.split('\n'):
        if stone in line and f'{label}:' in line:
            match = pattern.search(line)
            if match:
                if split:
                    values.extend(v.strip() for v in match.group(1).split(','))
                else:
                    values.append(match.group(1).strip())
    return values


def _stone_block(lines, start):
    """Lines belonging to the stone entry starting at `start`"""
    block = []
    for line in lines[start + 1:]:
        if STONE_LINE_RE.search(line) or line.strip().endswith(':') and line.strip().isupper():
            break
        block.append(line)
    return block


def _block_values(block, label, split=True):
    for line in block:
        match = re.search(rf'{label}:\s*(.+)', line)
        if match:
            value = match.group(1).strip()
            return [v.strip() for v in value.split(',')] if split else [value]
    return []


def extract_timing(lines):
    for index, line in enumerate(lines):
        if 'TIMING ADVICE:' in line:
            if index + 1 < len(lines):
                return lines[index + 1].strip()
            return ''
    return ''


def extract_general_advice(lines):
    advice = []
    in_section = False
    for line in lines:
        if 'GENERAL ADVICE:' in line:
            in_section = True
            continue
        if in_section and line.strip():
            if 'COMPATIBILITY ANALYSIS:' in line or 'TIMING ADVICE:' in line:
                break
            advice.append(line.strip())
    return advice


def parse_response(text, profile):
    """
    Structure a model reply into recommendations, timing and general advice.

    Benefits, reasons and alternatives are read from the indented lines under
    each `Stone - Level` line, or from a single line naming the stone; missing
    benefits fall back to the database entry.
    """
    lines = text.split('\n')
    recommendations = []

    for index, line in enumerate(lines):
        if ' - ' not in line:
            continue
        match = STONE_LINE_RE.search(line)
        if not match:
            continue
        stone = match.group(1)
        block = _stone_block(lines, index)

        benefits = _block_values(block, 'Benefits') or _labelled_values(text, stone, 'Benefits')
        if not benefits:
            benefits = list(GEMSTONE_DATABASE.get(stone, {}).get('benefits', []))
        recommendations.append({
            'stone': stone,
            'compatibility': match.group(2),
            'benefits': benefits,
            'reasons': _block_values(block, 'Reasons', split=False) or _labelled_values(text, stone, 'Reasons', split=False),
            'alternatives': _block_values(block, 'Alternatives') or _labelled_values(text, stone, 'Alternatives'),
        })

    return {
        'profile': profile,
        'recommendations': recommendations,
        'general_advice': extract_general_advice(lines),
        'timing': extract_timing(lines),
    }


def local_recommendations(zodiac_sign):
    """Rank the gemstone database for a sign without calling the model"""
    recommendations = []
    for stone, data in GEMSTONE_DATABASE.items():
        matched = zodiac_sign in data['zodiac']
        recommendations.append({
            'stone': stone,
            'compatibility': 'Excellent' if matched else 'Moderate',
            'benefits': list(data['benefits']),
            'reasons': [f"Traditionally linked with {', '.join(data['zodiac'])}"],
            'alternatives': [],
        })
    recommendations.sort(key=lambda r: COMPATIBILITY_LEVELS.index(r['compatibility']))
    return recommendations


class AstrologicalAIService:

    def __init__(self, gemini):
        self.gemini = gemini

    def analyze(self, profile):
        text = self.gemini.generate(build_prompt(profile))
        return parse_response(text, profile)

    def quick_recommendation(self, zodiac_sign, concern):
        prompt = (
            f"As an astrological gemstone expert, provide a quick recommendation for a {zodiac_sign} "
            f"who wants to address: {concern}.\n\n"
            f"Available gemstones: {', '.join(GEMSTONE_DATABASE)}\n\n"
            "Give a brief, practical recommendation in 2-3 sentences. "
            "Focus on the best stone for their specific concern."
        )
        try:
            return self.gemini.generate(prompt)
        except AssistantError as e:
            logger.warning(f"Quick recommendation failed: {str(e)}")
            return QUICK_FALLBACK
