"""
Order endpoints and the anonymous guest checkout.
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework import serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import OpenApiParameter, extend_schema, inline_serializer

from backend.apps.accounts.permissions import IsStaffMember
from backend.core.exceptions import ExistingAccountError, first_error_message

from . import services
from .models import Order
from .serializers import (
    GuestCheckoutSerializer,
    OrderCreateSerializer,
    OrderRejectSerializer,
    OrderSerializer,
    OrderVerifySerializer,
)

logger = logging.getLogger(__name__)


class OrderViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.CreateModelMixin,
                   viewsets.GenericViewSet):
    """
    Buyers place and follow their orders; staff verify or reject them.
    """
    serializer_class = OrderSerializer
    lookup_value_regex = r'\d+'
    queryset = Order.objects.none()

    def get_permissions(self):
        if self.action in ('list', 'verify', 'reject'):
            permission_classes = [IsStaffMember]
        else:
            permission_classes = [IsAuthenticated]
        return [permission() for permission in permission_classes]

    @extend_schema(parameters=[
        OpenApiParameter('status', str, enum=Order.Status.values, required=False),
    ])
    def list(self, request, *args, **kwargs):
        orders = services.list_orders(request.user, status=request.query_params.get('status') or None)
        return Response(self.get_serializer(orders, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        order = services.get_order(request.user, kwargs['pk'])
        return Response(self.get_serializer(order).data if order else None)

    @extend_schema(request=OrderCreateSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.create_order(request.user, request=request, **serializer.validated_data)
        return Response(
            {'success': True, 'orderId': order.pk, 'order': self.get_serializer(order).data},
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def mine(self, request):
        orders = services.my_orders(request.user)
        return Response(self.get_serializer(orders, many=True).data)

    @extend_schema(request=None)
    @action(detail=True, methods=['post'], url_path='confirm-payment')
    def confirm_payment(self, request, pk=None):
        order = services.confirm_payment(request.user, pk, request=request)
        return Response({'success': True, 'order': self.get_serializer(order).data})

    @extend_schema(request=OrderVerifySerializer)
    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        serializer = OrderVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.verify_order(
            request.user, pk, serializer.validated_data.get('notes'), request=request
        )
        return Response({'success': True, 'order': self.get_serializer(order).data})

    @extend_schema(request=OrderRejectSerializer)
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = OrderRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.reject_order(
            request.user, pk, serializer.validated_data['reason'], request=request
        )
        return Response({'success': True, 'order': self.get_serializer(order).data})


# ----------------------------------------------------------------------
# Guest checkout
# ----------------------------------------------------------------------
class GuestCheckoutThrottle(AnonRateThrottle):
    scope = 'guest_checkout'


class GuestCheckoutView(APIView):
    """
    Single step signup and order for anonymous visitors.

    Answers with plain ``{error}`` payloads rather than the API error
    envelope; an email that belongs to another password also carries
    ``existingAccount`` so the storefront can send the visitor to sign in.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [GuestCheckoutThrottle]

    @extend_schema(
        request=GuestCheckoutSerializer,
        responses={201: inline_serializer('GuestCheckoutResponse', {
            'success': drf_serializers.BooleanField(),
            'orderId': drf_serializers.IntegerField(),
            'userId': drf_serializers.IntegerField(),
            'isNewUser': drf_serializers.BooleanField(),
            'credentialsType': drf_serializers.CharField(allow_null=True),
            'tokens': drf_serializers.DictField(child=drf_serializers.CharField()),
        })},
    )
    def post(self, request):
        serializer = GuestCheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': first_error_message(serializer.errors) or 'Invalid input.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            order, user, is_new = services.guest_checkout(request=request, **serializer.to_service_kwargs())
        except ExistingAccountError as e:
            return Response(
                {'error': str(e.detail), 'existingAccount': True},
                status=status.HTTP_400_BAD_REQUEST
            )
        except ValidationError as e:
            return Response(
                {'error': first_error_message(e.detail) or 'Invalid input.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        except APIException as e:
            return Response({'error': first_error_message(e.detail)}, status=e.status_code)
        except Exception:
            logger.exception("Guest checkout failed")
            return Response(
                {'error': 'Checkout failed. Please try again.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        refresh = RefreshToken.for_user(user)
        return Response({
            'success': True,
            'orderId': order.pk,
            'userId': user.pk,
            'isNewUser': is_new,
            'credentialsType': order.credentials_type or None,
            'tokens': {
                'access': str(refresh.access_token),
                'refresh': str(refresh),
            },
        }, status=status.HTTP_201_CREATED)
