from rest_framework import serializers
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from .models import Sale, Payment
from .utils import generate_sale_id, payment_status_for, calculate_profit, award_loyalty_points
from backend.core.cache_signals import suspend_cache_signals, invalidate_all_caches
from backend.inventory.models import Gemstone


class PaymentSerializer(serializers.ModelSerializer):
    created_by_username = serializers.CharField(source='created_by.username', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'sale', 'payment_method', 'amount', 'reference', 'notes', 'created_by', 'created_by_username', 'created_at']
        read_only_fields = ['sale', 'created_by', 'created_at']


class SaleSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)
    stone_code = serializers.CharField(source='stone.stone_id', read_only=True)
    stone_type = serializers.CharField(source='stone.type', read_only=True)
    stone_carat = serializers.DecimalField(source='stone.carat', max_digits=10, decimal_places=2, read_only=True)
    outstanding_amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'sale_id', 'date', 'client', 'client_name', 'stone', 'stone_code', 'stone_type', 'stone_carat',
            'quantity', 'total_amount', 'profit', 'discount', 'is_out_of_state', 'invoice_file',
            'payment_status', 'amount_paid', 'outstanding_amount', 'loyalty_points_awarded', 'notes',
            'payments', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['profit', 'loyalty_points_awarded', 'created_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'sale_id': {'required': False, 'allow_blank': True},
            'date': {'required': False},
        }

    def validate_total_amount(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Total amount must be greater than zero")
        return value

    def validate(self, attrs):
        instance = self.instance
        stone = attrs.get('stone', getattr(instance, 'stone', None))
        total_amount = attrs.get('total_amount', getattr(instance, 'total_amount', Decimal('0.00')))
        discount = attrs.get('discount', getattr(instance, 'discount', Decimal('0.00')))

        # Selling a stone that is already sold elsewhere
        stone_changed = instance is None or (stone and stone.pk != instance.stone_id)
        if stone and stone_changed and stone.status == 'Sold':
            raise serializers.ValidationError({'stone': f'Stone {stone.stone_id} is already sold'})

        if discount and discount > total_amount:
            raise serializers.ValidationError({'discount': 'Discount cannot exceed the total amount'})

        if 'amount_paid' in attrs:
            attrs['payment_status'] = payment_status_for(attrs['amount_paid'], total_amount)
        elif attrs.get('payment_status') == 'Paid':
            attrs['amount_paid'] = total_amount
        elif 'payment_status' in attrs or (instance is not None and 'total_amount' in attrs):
            amount_paid = getattr(instance, 'amount_paid', None) or Decimal('0.00')
            attrs['payment_status'] = payment_status_for(amount_paid, total_amount)

        return attrs

    def create(self, validated_data):
        with transaction.atomic(), suspend_cache_signals():
            stone = Gemstone.objects.select_for_update().get(pk=validated_data['stone'].pk)
            if stone.status == 'Sold':
                raise serializers.ValidationError({'stone': f'Stone {stone.stone_id} is already sold'})

            if not validated_data.get('sale_id'):
                validated_data['sale_id'] = generate_sale_id()
            validated_data.setdefault('date', timezone.localdate())
            validated_data['profit'] = calculate_profit(validated_data['total_amount'], stone)

            sale = super().create(validated_data)

            stone.status = 'Sold'
            stone.save(update_fields=['status', 'updated_at'])
            award_loyalty_points(sale)

        invalidate_all_caches()
        return sale

    def update(self, instance, validated_data):
        if 'sale_id' in validated_data and not validated_data['sale_id']:
            validated_data.pop('sale_id')

        with transaction.atomic(), suspend_cache_signals():
            old_stone = instance.stone
            new_stone = validated_data.get('stone', old_stone)
            if new_stone.pk != old_stone.pk:
                new_stone = Gemstone.objects.select_for_update().get(pk=new_stone.pk)
                if new_stone.status == 'Sold':
                    raise serializers.ValidationError({'stone': f'Stone {new_stone.stone_id} is already sold'})
                old_stone.status = 'In Stock'
                old_stone.save(update_fields=['status', 'updated_at'])
                new_stone.status = 'Sold'
                new_stone.save(update_fields=['status', 'updated_at'])
                validated_data['stone'] = new_stone

            total_amount = validated_data.get('total_amount', instance.total_amount)
            validated_data['profit'] = calculate_profit(total_amount, new_stone)

            sale = super().update(instance, validated_data)
            award_loyalty_points(sale)

        invalidate_all_caches()
        return sale
