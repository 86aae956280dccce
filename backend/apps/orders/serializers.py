from django.conf import settings
from rest_framework import serializers

from .models import Order


class OrderSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True)
    plan_name = serializers.CharField(source='plan.name', read_only=True)
    verified_by_email = serializers.EmailField(source='verified_by.email', read_only=True, default=None)
    rejected_by_email = serializers.EmailField(source='rejected_by.email', read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            'id', 'user', 'user_email', 'plan', 'plan_name', 'connections', 'price',
            'payment_method', 'payment_widget', 'payment_method_name', 'payment_method_type',
            'credentials_type', 'mac_address', 'status', 'payment_confirmed_at',
            'verified_at', 'verified_by', 'verified_by_email',
            'rejected_at', 'rejected_by', 'rejected_by_email', 'rejection_reason',
            'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """
    Input for placing an order. Cross-field rules (pricing, payment
    channel, MAC address) are checked by the order service.
    """
    plan_id = serializers.IntegerField(min_value=1)
    connections = serializers.IntegerField(min_value=1, max_value=settings.MAX_CONNECTIONS)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    payment_method_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    payment_widget_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    payment_method_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    payment_method_type = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    credentials_type = serializers.ChoiceField(
        choices=Order.CredentialsType.choices, required=False, allow_blank=True, allow_null=True
    )
    mac_address = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if attrs.get('payment_method_id') and attrs.get('payment_widget_id'):
            raise serializers.ValidationError('Choose either a payment method or a payment widget, not both.')
        return attrs


class OrderVerifySerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True, default='')


class GuestCheckoutSerializer(serializers.Serializer):
    """
    Guest checkout body. Field names are camelCase to match the storefront.
    """
    email = serializers.EmailField()
    password = serializers.CharField(min_length=settings.GUEST_CHECKOUT_MIN_PASSWORD_LENGTH, trim_whitespace=False)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    planId = serializers.IntegerField(min_value=1)
    connections = serializers.IntegerField(min_value=1, max_value=settings.MAX_CONNECTIONS)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    paymentMethodId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    paymentWidgetId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    paymentMethodName = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    paymentMethodType = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    credentialsType = serializers.ChoiceField(
        choices=Order.CredentialsType.choices, required=False, allow_blank=True, allow_null=True
    )
    macAddress = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            'email': data['email'],
            'password': data['password'],
            'name': data.get('name'),
            'plan_id': data['planId'],
            'connections': data['connections'],
            'price': data['price'],
            'payment_method_id': data.get('paymentMethodId'),
            'payment_widget_id': data.get('paymentWidgetId'),
            'payment_method_name': data.get('paymentMethodName'),
            'payment_method_type': data.get('paymentMethodType'),
            'credentials_type': data.get('credentialsType'),
            'mac_address': data.get('macAddress'),
        }
