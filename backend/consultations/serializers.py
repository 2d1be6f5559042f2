from rest_framework import serializers
from .models import Consultation


class ConsultationSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)

    class Meta:
        model = Consultation
        fields = [
            'id', 'client', 'client_name', 'date', 'medium', 'stones_discussed', 'outcome',
            'follow_up_needed', 'next_follow_up_date', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_stones_discussed(self, value):
        if not isinstance(value, list) or not all(isinstance(stone, str) for stone in value):
            raise serializers.ValidationError("Stones discussed must be a list of names")
        return [stone.strip() for stone in value if stone.strip()]

    def validate(self, attrs):
        follow_up_needed = attrs.get('follow_up_needed', getattr(self.instance, 'follow_up_needed', False))
        next_date = attrs.get('next_follow_up_date', getattr(self.instance, 'next_follow_up_date', None))
        if follow_up_needed and not next_date:
            raise serializers.ValidationError({
                'next_follow_up_date': 'Next follow-up date is required when a follow-up is needed'
            })
        consultation_date = attrs.get('date', getattr(self.instance, 'date', None))
        if follow_up_needed and next_date and consultation_date and next_date < consultation_date:
            raise serializers.ValidationError({
                'next_follow_up_date': 'Next follow-up date cannot be before the consultation date'
            })
        if not follow_up_needed:
            attrs['next_follow_up_date'] = None
        return attrs
