from rest_framework import serializers

from backend.core.validators import validate_connection_range

from .models import MAX_CONNECTIONS, PaymentMethod, PaymentWidget, Plan, PlanPricing


class PlanPricingSerializer(serializers.ModelSerializer):
    connections = serializers.IntegerField(min_value=1, max_value=MAX_CONNECTIONS)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    class Meta:
        model = PlanPricing
        fields = ['connections', 'price']


class PlanSerializer(serializers.ModelSerializer):
    """
    Plan with its price list. On write, ``pricing`` replaces the plan's
    full price list; omit it on update to keep the current prices.
    """
    pricing = PlanPricingSerializer(many=True, required=False)
    features = serializers.ListField(child=serializers.CharField(max_length=255), required=False)

    class Meta:
        model = Plan
        fields = [
            'id', 'name', 'description', 'duration_days', 'max_connections',
            'is_active', 'features', 'promo_text', 'pricing',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_pricing(self, value):
        counts = [row['connections'] for row in value]
        if len(counts) != len(set(counts)):
            raise serializers.ValidationError('Each connection count may only be priced once.')
        return value


class PaymentOptionWindowMixin:
    def validate(self, attrs):
        attrs = super().validate(attrs)
        instance = getattr(self, 'instance', None)
        minimum = attrs.get('min_connections', getattr(instance, 'min_connections', 1))
        maximum = attrs.get('max_connections', getattr(instance, 'max_connections', MAX_CONNECTIONS))
        if minimum > maximum:
            raise serializers.ValidationError(
                {'min_connections': 'Minimum connections cannot exceed maximum connections.'}
            )
        validate_connection_range(minimum, maximum)
        return attrs


class PaymentMethodSerializer(PaymentOptionWindowMixin, serializers.ModelSerializer):
    plan_name = serializers.CharField(source='plan.name', read_only=True)

    class Meta:
        model = PaymentMethod
        fields = [
            'id', 'name', 'type', 'plan', 'plan_name', 'min_connections', 'max_connections',
            'instructions', 'payment_link', 'icon_url', 'is_active', 'sort_order',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class PaymentWidgetSerializer(PaymentOptionWindowMixin, serializers.ModelSerializer):
    plan_name = serializers.CharField(source='plan.name', read_only=True)

    class Meta:
        model = PaymentWidget
        fields = [
            'id', 'name', 'plan', 'plan_name', 'min_connections', 'max_connections',
            'invoice_id', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class PaymentOptionQuerySerializer(serializers.Serializer):
    plan_id = serializers.IntegerField(min_value=1)
    connections = serializers.IntegerField(min_value=1, max_value=MAX_CONNECTIONS)
