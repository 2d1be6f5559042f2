from rest_framework import serializers
from .models import Gemstone
from .utils import generate_stone_id


class GemstoneSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    price_per_carat = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    margin = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    margin_percentage = serializers.DecimalField(max_digits=8, decimal_places=2, read_only=True)

    class Meta:
        model = Gemstone
        fields = [
            'id', 'stone_id', 'type', 'carat', 'origin', 'grade', 'color', 'clarity', 'cut',
            'quantity', 'supplier', 'supplier_name', 'certified', 'certificate_lab', 'certificate_file',
            'purchase_price', 'selling_price', 'price_per_carat', 'margin', 'margin_percentage',
            'status', 'package_type', 'notes', 'tags', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'stone_id': {'required': False, 'allow_blank': True}}

    def validate_stone_id(self, value):
        return (value or '').strip()

    def validate_type(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Stone type is required")
        return value.strip()

    def validate_tags(self, value):
        if isinstance(value, str):
            # multipart forms send tags as a comma separated string
            value = [tag.strip() for tag in value.split(',') if tag.strip()]
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            raise serializers.ValidationError("Tags must be a list of strings")
        return value

    def validate(self, attrs):
        certified = attrs.get('certified', getattr(self.instance, 'certified', False))
        lab = attrs.get('certificate_lab', getattr(self.instance, 'certificate_lab', ''))
        if certified and not lab:
            raise serializers.ValidationError({'certificate_lab': 'Certificate lab is required for certified stones'})
        return attrs

    def create(self, validated_data):
        if not validated_data.get('stone_id'):
            validated_data['stone_id'] = generate_stone_id(validated_data.get('type'))
        return super().create(validated_data)

    def update(self, instance, validated_data):
        if 'stone_id' in validated_data and not validated_data['stone_id']:
            validated_data.pop('stone_id')
        return super().update(instance, validated_data)


class GemstoneListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists and search results"""
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)

    class Meta:
        model = Gemstone
        fields = [
            'id', 'stone_id', 'type', 'carat', 'origin', 'grade', 'quantity', 'supplier', 'supplier_name',
            'certified', 'certificate_lab', 'purchase_price', 'selling_price', 'status', 'tags'
        ]
