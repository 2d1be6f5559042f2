from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Setting, AuditLog, CompanyProfile
from .gst import is_valid_gstin, is_valid_pan


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'is_active', 'is_staff', 'is_superuser', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm', 'first_name', 'last_name', 'phone']

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = User.objects.create(**validated_data, is_active=True)
        user.set_password(password)
        user.save()
        return user


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = ['id', 'key', 'value', 'description', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']


class CompanyProfileSerializer(serializers.ModelSerializer):
    address_lines = serializers.SerializerMethodField()

    class Meta:
        model = CompanyProfile
        fields = [
            'id', 'company_name', 'tagline', 'address_line1', 'address_line2', 'address_lines',
            'phone', 'email', 'gstin', 'state_name', 'state_code', 'tin', 'pan',
            'bank_name', 'bank_account', 'bank_ifsc', 'bank_branch', 'default_hsn',
            'payment_terms', 'destination', 'terms_of_delivery', 'declaration', 'updated_at'
        ]
        read_only_fields = ['updated_at']

    def get_address_lines(self, obj):
        return obj.address_lines()

    def validate_gstin(self, value):
        if value and not is_valid_gstin(value):
            raise serializers.ValidationError("Invalid GSTIN format")
        return value

    def validate_pan(self, value):
        if value and not is_valid_pan(value):
            raise serializers.ValidationError("Invalid PAN format")
        return value
