"""
Credential endpoints: admins issue and maintain, buyers read their own.
"""
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from backend.apps.accounts.permissions import IsAdmin

from . import services
from .models import IptvCredential
from .serializers import CredentialCreateSerializer, CredentialUpdateSerializer, IptvCredentialSerializer


class CredentialViewSet(viewsets.GenericViewSet):
    serializer_class = IptvCredentialSerializer
    queryset = IptvCredential.objects.none()
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ('mine', 'by_order'):
            permission_classes = [IsAuthenticated]
        else:
            permission_classes = [IsAdmin]
        return [permission() for permission in permission_classes]

    def list(self, request):
        credentials = services.list_credentials(request.user)
        return Response(self.get_serializer(credentials, many=True).data)

    @extend_schema(request=CredentialCreateSerializer, responses={201: IptvCredentialSerializer})
    def create(self, request):
        serializer = CredentialCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        credential = services.create_credential(
            request.user,
            data.pop('user_id', None),
            data.pop('order_id'),
            data.pop('connection_number'),
            data.pop('credential_type'),
            expires_at=data.pop('expires_at', None),
            is_active=data.pop('is_active', True),
            request=request,
            **data
        )
        return Response(
            {'success': True, 'credential': self.get_serializer(credential).data},
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=CredentialUpdateSerializer, responses=IptvCredentialSerializer)
    def partial_update(self, request, pk=None):
        serializer = CredentialUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        credential = services.update_credential(request.user, pk, request=request, **serializer.validated_data)
        return Response({'success': True, 'credential': self.get_serializer(credential).data})

    def destroy(self, request, pk=None):
        services.delete_credential(request.user, pk, request=request)
        return Response({'success': True}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        credentials = services.my_credentials(request.user)
        return Response(self.get_serializer(credentials, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'by-order/(?P<order_id>\d+)')
    def by_order(self, request, order_id=None):
        credentials = services.get_credentials_by_order(request.user, order_id)
        return Response(self.get_serializer(credentials, many=True).data)
