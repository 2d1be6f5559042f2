import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from django.db.models import Q
from .models import Setting, AuditLog, CompanyProfile
from .serializers import (
    UserSerializer, UserCreateSerializer,
    SettingSerializer, AuditLogSerializer, CompanyProfileSerializer
)
from .utils import create_audit_log, parse_optional_date

User = get_user_model()
logger = logging.getLogger(__name__)

# Application groups, highest privilege first
APPLICATION_GROUPS = ['Admin', 'Manager', 'Sales']


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['groups'] = list(user.groups.values_list('name', flat=True))
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """User registration endpoint"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        token = CustomTokenObtainPairSerializer.get_token(user)
        return Response({
            'user': UserSerializer(user).data,
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.all().order_by('username')
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)
    else:
        serializer = UserCreateSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        serializer = UserSerializer(user)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with groups and page access flags"""
    user = request.user
    user_data = UserSerializer(user).data
    user_groups = list(user.groups.values_list('name', flat=True))
    user_data['groups'] = user_groups

    is_admin_group = 'Admin' in user_groups
    is_manager = 'Manager' in user_groups
    has_application_group = any(group in user_groups for group in APPLICATION_GROUPS)

    if has_application_group:
        user_data['is_admin'] = is_admin_group
        user_data['can_access_dashboard'] = is_admin_group or is_manager
        user_data['can_access_reports'] = is_admin_group or is_manager
        user_data['can_access_finance'] = is_admin_group
    else:
        # No application group: fall back to staff/superuser flags
        is_superuser_or_staff = user.is_superuser or user.is_staff
        user_data['is_admin'] = is_superuser_or_staff
        user_data['can_access_dashboard'] = True
        user_data['can_access_reports'] = is_superuser_or_staff
        user_data['can_access_finance'] = is_superuser_or_staff

    return Response(user_data)


# Setting views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def setting_list_create(request):
    """List all settings or create a new setting"""
    if request.method == 'GET':
        settings = Setting.objects.all().order_by('key')
        serializer = SettingSerializer(settings, many=True)
        return Response(serializer.data)
    else:
        serializer = SettingSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def setting_detail(request, pk):
    """Retrieve, update or delete a setting"""
    setting = get_object_or_404(Setting, pk=pk)

    if request.method == 'GET':
        serializer = SettingSerializer(setting)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SettingSerializer(setting, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        setting.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    if not request.user.is_staff:
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    reference = request.query_params.get('reference', None)
    if reference:
        queryset = queryset.filter(object_reference=reference)

    try:
        date_from = parse_optional_date(request.query_params.get('date_from', None))
        date_to = parse_optional_date(request.query_params.get('date_to', None))
    except ValueError:
        return Response({'error': 'Dates must be in YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not request.user.is_staff and audit_log.user != request.user:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def company_profile(request):
    """Read or update the business profile printed on invoices"""
    profile = CompanyProfile.get_solo()

    if request.method == 'GET':
        return Response(CompanyProfileSerializer(profile).data)

    if not request.user.is_staff:
        return Response({'error': 'Only staff can change the company profile'}, status=status.HTTP_403_FORBIDDEN)

    serializer = CompanyProfileSerializer(profile, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        create_audit_log(
            request=request,
            action='update',
            model_name='CompanyProfile',
            object_id=profile.id,
            object_name=profile.company_name,
            changes={'fields': sorted(request.data.keys())}
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_search(request):
    """Global search across stones, clients, suppliers and sales"""
    query = request.query_params.get('q', '').strip()

    if not query:
        return Response({
            'stones': [],
            'clients': [],
            'suppliers': [],
            'sales': [],
        })

    from backend.inventory.models import Gemstone
    from backend.parties.models import Client, Supplier
    from backend.sales.models import Sale
    from backend.inventory.serializers import GemstoneListSerializer
    from backend.parties.serializers import ClientSerializer, SupplierSerializer
    from backend.sales.serializers import SaleSerializer

    results = {}

    stones = Gemstone.objects.filter(
        Q(stone_id__icontains=query) |
        Q(type__icontains=query) |
        Q(origin__icontains=query)
    ).select_related('supplier')[:20]
    results['stones'] = GemstoneListSerializer(stones, many=True).data

    clients = Client.objects.filter(
        Q(name__icontains=query) |
        Q(city__icontains=query) |
        Q(phone__icontains=query) |
        Q(email__icontains=query)
    )[:20]
    results['clients'] = ClientSerializer(clients, many=True).data

    suppliers = Supplier.objects.filter(
        Q(name__icontains=query) |
        Q(location__icontains=query)
    )[:20]
    results['suppliers'] = SupplierSerializer(suppliers, many=True).data

    sales = Sale.objects.filter(
        Q(sale_id__icontains=query)
    ).select_related('client', 'stone')[:20]
    results['sales'] = SaleSerializer(sales, many=True).data

    return Response(results)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def constants(request):
    """Suggestion lists and choice values for the entry forms"""
    from .constants import reference_lists
    return Response(reference_lists())
