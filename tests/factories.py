# FILE: tests/factories.py
from datetime import timedelta
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone

from backend.apps.credentials.models import IptvCredential
from backend.apps.orders.models import Order
from backend.apps.payments.models import PaymentMethod, PaymentWidget, Plan, PlanPricing

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User
        django_get_or_create = ('email',)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker('name')
    password = factory.PostGenerationMethodCall('set_password', 'testpass123')
    is_active = True
    is_verified = True
    role = User.Role.USER


class AdminFactory(UserFactory):
    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    role = User.Role.ADMIN


class AgentFactory(UserFactory):
    email = factory.Sequence(lambda n: f"agent{n}@example.com")
    role = User.Role.AGENT


class PlanFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Plan

    name = factory.Sequence(lambda n: f"Plan {n}")
    description = "Live TV, movies and series"
    duration_days = 30
    max_connections = 10
    is_active = True
    features = factory.LazyFunction(lambda: ["HD channels", "EPG"])


class PlanPricingFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PlanPricing

    plan = factory.SubFactory(PlanFactory)
    connections = 1
    price = Decimal('10.00')


class PaymentMethodFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PaymentMethod

    name = factory.Sequence(lambda n: f"Method {n}")
    type = PaymentMethod.Type.PAYPAL
    plan = factory.SubFactory(PlanFactory)
    min_connections = 1
    max_connections = 10
    instructions = "Send the amount to payments@example.com"
    is_active = True
    sort_order = 0


class PaymentWidgetFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PaymentWidget

    name = factory.Sequence(lambda n: f"Crypto {n}")
    plan = factory.SubFactory(PlanFactory)
    min_connections = 1
    max_connections = 10
    invoice_id = factory.Sequence(lambda n: f"inv-{n:06d}")
    is_active = True


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    user = factory.SubFactory(UserFactory)
    plan = factory.SubFactory(PlanFactory)
    connections = 1
    price = Decimal('10.00')
    status = Order.Status.PENDING


class IptvCredentialFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = IptvCredential

    order = factory.SubFactory(OrderFactory, status=Order.Status.VERIFIED)
    user = factory.SelfAttribute('order.user')
    connection_number = 1
    credential_type = IptvCredential.Type.XTREAM
    server_url = "http://line.example.tv:8080"
    username = factory.Sequence(lambda n: f"line{n}")
    password = "s3cret"
    expires_at = factory.LazyFunction(lambda: timezone.now() + timedelta(days=30))
    is_active = True
