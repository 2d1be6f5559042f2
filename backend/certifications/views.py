from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .models import Certification
from .serializers import CertificationSerializer
from .workflow import CertificationTransitionError, advance
from backend.core.utils import create_audit_log


def filter_certifications(queryset, params):
    cert_status = params.get('status', None)
    if cert_status:
        queryset = queryset.filter(status=cert_status)
    lab = params.get('lab', None)
    if lab:
        queryset = queryset.filter(lab=lab)
    stone_id = params.get('stone', None)
    if stone_id:
        queryset = queryset.filter(stone_id=stone_id)
    return queryset


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def certification_list_create(request):
    """List certifications or submit a stone to a lab"""
    if request.method == 'GET':
        queryset = filter_certifications(Certification.objects.select_related('stone'), request.query_params)
        serializer = CertificationSerializer(queryset.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = CertificationSerializer(data=request.data)
        if serializer.is_valid():
            certification = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Certification',
                object_id=certification.id,
                object_name=str(certification),
                object_reference=certification.stone.stone_id
            )
            return Response(CertificationSerializer(certification).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def certification_detail(request, pk):
    """Retrieve, update or delete a certification"""
    certification = get_object_or_404(Certification.objects.select_related('stone'), pk=pk)

    if request.method == 'GET':
        serializer = CertificationSerializer(certification)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_status = certification.status
        serializer = CertificationSerializer(certification, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            certification = serializer.save()
            if certification.status != old_status:
                create_audit_log(
                    request=request,
                    action='status_change',
                    model_name='Certification',
                    object_id=certification.id,
                    object_reference=certification.stone.stone_id,
                    changes={'status': {'old': old_status, 'new': certification.status}}
                )
            return Response(CertificationSerializer(certification).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        stone_code = certification.stone.stone_id
        certification.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Certification',
            object_id=pk,
            object_reference=stone_code
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def certification_pending(request):
    """Certifications still at the lab or waiting to be sent"""
    queryset = Certification.objects.select_related('stone').filter(
        status__in=['Pending', 'In Progress']
    ).order_by('created_at')
    return Response(CertificationSerializer(queryset, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def certification_advance(request, pk):
    """Move a certification one step forward"""
    certification = get_object_or_404(Certification.objects.select_related('stone'), pk=pk)
    old_status = certification.status
    try:
        new_status = advance(certification)
    except CertificationTransitionError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='certification_advance',
        model_name='Certification',
        object_id=certification.id,
        object_reference=certification.stone.stone_id,
        changes={'status': {'old': old_status, 'new': new_status}}
    )
    return Response(CertificationSerializer(certification).data)
