from rest_framework import serializers
from .models import Client, Supplier
from .loyalty import next_tier


class ClientSerializer(serializers.ModelSerializer):
    loyalty_tier = serializers.CharField(read_only=True)
    next_tier = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            'id', 'name', 'client_type', 'city', 'phone', 'email', 'address',
            'loyalty_level', 'loyalty_points', 'loyalty_tier', 'next_tier',
            'notes', 'tags', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['loyalty_points', 'created_at', 'updated_at']

    def get_next_tier(self, obj):
        tier, points_needed = next_tier(obj.loyalty_points)
        return {'tier': tier, 'points_needed': points_needed}

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Name is required")
        return value.strip()

    def validate_tags(self, value):
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            raise serializers.ValidationError("Tags must be a list of strings")
        return value


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'location', 'phone', 'email', 'address', 'supplier_type',
            'gemstone_types', 'rating', 'delivery_days', 'certification_options',
            'notes', 'tags', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_rating(self, value):
        if value < 0 or value > 5:
            raise serializers.ValidationError("Rating must be between 0 and 5")
        return value

    def validate_gemstone_types(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Gemstone types must be a list of strings")
        return value

    def validate_tags(self, value):
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            raise serializers.ValidationError("Tags must be a list of strings")
        return value
