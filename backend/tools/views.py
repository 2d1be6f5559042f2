from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .analysis import StoneProfile, analyze
from .bulk_purchase import BulkPurchaseError, optimize
from .market_data import MarketDataError, market_summary, parse_price_csv, price_series
from .origin import OriginVerificationError, VERIFICATION_METHODS, KNOWN_ORIGINS, verify
from .quality import compare, stone_as_dict
from .serializers import (
    AnalysisRequestSerializer, BulkPurchaseRequestSerializer, MarketPriceImportSerializer,
    OriginVerificationSerializer, QualityComparisonSerializer, ValuationRequestSerializer
)
from .valuation import ValuationError, valuate
from backend.inventory.models import Gemstone


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def valuation(request):
    """Estimate a stone's value from type, carat and quality attributes"""
    serializer = ValuationRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = valuate(
            data['gemstone_type'],
            float(data['carat']),
            grade=data.get('grade'),
            origin=data.get('origin'),
            clarity=data.get('clarity'),
            color=data.get('color'),
            cut=data.get('cut'),
            certified=data.get('certification', False),
        )
    except ValuationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(result.as_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def bulk_purchase(request):
    """Cheapest buying month, best supplier and batch size for a budget"""
    serializer = BulkPurchaseRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = optimize(
            data['stone_type'],
            horizon=int(data['horizon']),
            budget=float(data['budget']),
            target_carats=float(data['target_carats']),
        )
    except BulkPurchaseError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(result)


def _comparison_side(data, side):
    if data.get(f'{side}_id') is not None:
        return stone_as_dict(get_object_or_404(Gemstone, pk=data[f'{side}_id']))
    stone = dict(data[side])
    stone['carat'] = float(stone['carat'])
    stone['price'] = float(stone.get('price') or 0)
    return stone


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quality_comparison(request):
    """Weighted quality score for two stones and the price difference"""
    serializer = QualityComparisonSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    left = _comparison_side(data, 'left')
    right = _comparison_side(data, 'right')
    return Response(compare(left, right, data.get('weights')))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def gemstone_analysis(request):
    """Market analysis for stone attributes given in the body"""
    serializer = AnalysisRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    profile = StoneProfile(
        type=data['type'],
        grade=data['grade'],
        carat=float(data['carat']),
        origin=data['origin'],
        price_per_carat=float(data['price_per_carat']),
        certified=data['certified'],
    )
    return Response(analyze(profile))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stone_analysis(request, pk):
    """Market analysis for a stone in inventory"""
    stone = get_object_or_404(Gemstone, pk=pk)
    return Response(analyze(StoneProfile.from_gemstone(stone)))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def origin_verification(request):
    """GET lists methods and known origins, POST runs a verification"""
    if request.method == 'GET':
        return Response({'methods': VERIFICATION_METHODS, 'origins': KNOWN_ORIGINS})

    serializer = OriginVerificationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = verify(data['claimed_origin'], data['methods'])
    except OriginVerificationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    result['stone_id'] = data.get('stone_id', '')
    result['stone_type'] = data.get('stone_type', '')
    return Response(result)


def _alert_params(params):
    threshold = params.get('threshold')
    try:
        threshold = float(threshold) if threshold else None
    except ValueError:
        threshold = None
    direction = params.get('direction', 'above')
    return threshold, direction if direction in ('above', 'below') else 'above'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def market_prices(request, stone_type):
    """
    Twelve-month price trend for a stone type.
    POST {"csv": "date,price\\n..."} summarizes an imported series instead.
    Optional ?threshold=&direction=above|below adds price alerts.
    """
    threshold, direction = _alert_params(request.query_params)

    if request.method == 'GET':
        return Response(market_summary(stone_type, price_series(stone_type), threshold, direction))

    serializer = MarketPriceImportSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        series = parse_price_csv(serializer.validated_data['csv'])
    except MarketDataError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(market_summary(stone_type, series, threshold, direction))
