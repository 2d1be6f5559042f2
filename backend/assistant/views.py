import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone
from .astrological import AstrologicalAIService, GEMSTONE_DATABASE, ZODIAC_SIGNS, local_recommendations
from .ca import gst_rules, tax_tips
from .context import business_snapshot
from .gemini_service import AssistantError, AssistantUnavailable, get_gemini_service
from .serializers import (
    AstrologicalProfileSerializer, BusinessQuerySerializer, CAQuestionSerializer,
    QuickRecommendationSerializer, RecommendationRequestSerializer
)

logger = logging.getLogger(__name__)


def _assistant_error_response(e):
    if isinstance(e, AssistantUnavailable):
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def business_query(request):
    """Answer a business question over the live sales, inventory and CRM data"""
    serializer = BusinessQuerySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = get_gemini_service().analyze_business_data(
            serializer.validated_data['query'],
            business_snapshot(),
            serializer.validated_data.get('context'),
        )
    except AssistantError as e:
        logger.error(f"Business query failed: {str(e)}")
        return _assistant_error_response(e)

    result['timestamp'] = timezone.now().isoformat()
    return Response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def business_insights(request):
    """Three short insights about the current state of the business"""
    try:
        insights = get_gemini_service().generate_business_insights(business_snapshot())
    except AssistantError as e:
        logger.error(f"Insight generation failed: {str(e)}")
        return _assistant_error_response(e)
    return Response({'insights': insights})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def business_recommendations(request):
    """Recommendations for a focus area such as sales or inventory"""
    serializer = RecommendationRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    focus_area = serializer.validated_data['focus_area']
    try:
        recommendations = get_gemini_service().generate_recommendations(business_snapshot(), focus_area)
    except AssistantError as e:
        logger.error(f"Recommendation generation failed: {str(e)}")
        return _assistant_error_response(e)
    return Response({'focus_area': focus_area, 'recommendations': recommendations})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def astrological_analyze(request):
    """Gemstone compatibility analysis for a zodiac profile"""
    serializer = AstrologicalProfileSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    profile = dict(serializer.validated_data)
    if profile.get('birth_date'):
        profile['birth_date'] = profile['birth_date'].isoformat()

    try:
        analysis = AstrologicalAIService(get_gemini_service()).analyze(profile)
    except AssistantError as e:
        logger.error(f"Astrological analysis failed: {str(e)}")
        return _assistant_error_response(e)

    # The model skipped the stone list, rank the local table instead
    if not analysis['recommendations']:
        analysis['recommendations'] = local_recommendations(profile['zodiac_sign'])
    return Response(analysis)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def astrological_quick(request):
    """Two or three sentence stone recommendation for a sign and a concern"""
    serializer = QuickRecommendationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        service = AstrologicalAIService(get_gemini_service())
    except AssistantUnavailable as e:
        return _assistant_error_response(e)
    return Response({
        'zodiac_sign': data['zodiac_sign'],
        'concern': data['concern'],
        'recommendation': service.quick_recommendation(data['zodiac_sign'], data['concern']),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def astrological_stones(request):
    """
    Gemstone database with zodiac compatibility.
    With ?zodiac_sign=Leo the stones are ranked for that sign.
    """
    zodiac_sign = request.query_params.get('zodiac_sign')
    if zodiac_sign:
        if zodiac_sign not in ZODIAC_SIGNS:
            return Response({'error': f'Unknown zodiac sign: {zodiac_sign}'}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'zodiac_sign': zodiac_sign, 'recommendations': local_recommendations(zodiac_sign)})
    return Response({'signs': ZODIAC_SIGNS, 'stones': GEMSTONE_DATABASE})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ca_ask(request):
    """Tax, GST and compliance question for the CA assistant"""
    serializer = CAQuestionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        answer = get_gemini_service().generate_text(serializer.validated_data['question'])
    except AssistantError as e:
        logger.error(f"CA assistant failed: {str(e)}")
        return _assistant_error_response(e)
    return Response({'question': serializer.validated_data['question'], 'answer': answer})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ca_gst_rules(request):
    """GST rates and compliance notes by HSN code"""
    return Response(gst_rules(
        rate=request.query_params.get('rate'),
        hsn_code=request.query_params.get('hsn_code'),
    ))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ca_tax_tips(request):
    """Income-tax saving sections"""
    return Response(tax_tips(category=request.query_params.get('category')))
