from decimal import Decimal
from rest_framework import serializers
from .bulk_purchase import HORIZONS


class ValuationRequestSerializer(serializers.Serializer):
    gemstone_type = serializers.CharField(max_length=50)
    carat = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    grade = serializers.CharField(required=False, allow_blank=True)
    origin = serializers.CharField(required=False, allow_blank=True)
    clarity = serializers.CharField(required=False, allow_blank=True)
    color = serializers.CharField(required=False, allow_blank=True)
    cut = serializers.CharField(required=False, allow_blank=True)
    certification = serializers.BooleanField(required=False, default=False)


class BulkPurchaseRequestSerializer(serializers.Serializer):
    stone_type = serializers.CharField(max_length=50, default='Ruby')
    horizon = serializers.ChoiceField(choices=HORIZONS, default=12)
    budget = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0, default=500000)
    target_carats = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=50)


class InlineStoneSerializer(serializers.Serializer):
    stone_id = serializers.CharField(required=False, allow_blank=True)
    type = serializers.CharField(required=False, allow_blank=True)
    grade = serializers.CharField(required=False, allow_blank=True)
    carat = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    origin = serializers.CharField(required=False, allow_blank=True)
    certified = serializers.BooleanField(required=False, default=False)
    price = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, default=0)


class WeightsSerializer(serializers.Serializer):
    grade = serializers.FloatField(required=False, min_value=0)
    carat = serializers.FloatField(required=False, min_value=0)
    origin = serializers.FloatField(required=False, min_value=0)
    certification = serializers.FloatField(required=False, min_value=0)


class QualityComparisonSerializer(serializers.Serializer):
    """Each side is either an inventory id (left_id/right_id) or an inline stone"""
    left_id = serializers.IntegerField(required=False)
    right_id = serializers.IntegerField(required=False)
    left = InlineStoneSerializer(required=False)
    right = InlineStoneSerializer(required=False)
    weights = WeightsSerializer(required=False)

    def validate(self, attrs):
        for side in ('left', 'right'):
            if attrs.get(f'{side}_id') is None and attrs.get(side) is None:
                raise serializers.ValidationError({side: f'Provide {side}_id or an inline {side} stone'})
        return attrs


class AnalysisRequestSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=50)
    grade = serializers.CharField(max_length=10)
    carat = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    origin = serializers.CharField(max_length=100, allow_blank=True, default='')
    price_per_carat = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=0)
    certified = serializers.BooleanField(required=False, default=False)


class OriginVerificationSerializer(serializers.Serializer):
    stone_id = serializers.CharField(required=False, allow_blank=True)
    stone_type = serializers.CharField(required=False, allow_blank=True)
    claimed_origin = serializers.CharField(allow_blank=True)
    methods = serializers.ListField(child=serializers.CharField(), allow_empty=False)


class MarketPriceImportSerializer(serializers.Serializer):
    csv = serializers.CharField()
