from rest_framework import serializers
from .astrological import ZODIAC_SIGNS


class BusinessQuerySerializer(serializers.Serializer):
    query = serializers.CharField(max_length=2000)
    context = serializers.CharField(required=False, allow_blank=True, max_length=200)

    def validate_query(self, value):
        if not value.strip():
            raise serializers.ValidationError("Query is required")
        return value.strip()


class RecommendationRequestSerializer(serializers.Serializer):
    focus_area = serializers.CharField(max_length=200, default='overall business performance')


class AstrologicalProfileSerializer(serializers.Serializer):
    zodiac_sign = serializers.ChoiceField(choices=ZODIAC_SIGNS)
    birth_date = serializers.DateField(required=False, allow_null=True)
    birth_time = serializers.CharField(required=False, allow_blank=True)
    birth_place = serializers.CharField(required=False, allow_blank=True)
    specific_concerns = serializers.ListField(child=serializers.CharField(), required=False, default=list)


class QuickRecommendationSerializer(serializers.Serializer):
    zodiac_sign = serializers.ChoiceField(choices=ZODIAC_SIGNS)
    concern = serializers.CharField(max_length=500)


class CAQuestionSerializer(serializers.Serializer):
    question = serializers.CharField(max_length=4000)
