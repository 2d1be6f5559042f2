from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .models import Consultation
from .serializers import ConsultationSerializer
from backend.core.utils import create_audit_log


def filter_consultations(queryset, params):
    client_id = params.get('client', None)
    if client_id:
        queryset = queryset.filter(client_id=client_id)
    follow_up_needed = params.get('follow_up_needed', None)
    if follow_up_needed is not None:
        queryset = queryset.filter(follow_up_needed=follow_up_needed.lower() in ('true', '1', 'yes'))
    medium = params.get('medium', None)
    if medium:
        queryset = queryset.filter(medium=medium)
    return queryset


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def consultation_list_create(request):
    """List consultations or log a new one"""
    if request.method == 'GET':
        queryset = filter_consultations(Consultation.objects.select_related('client'), request.query_params)
        serializer = ConsultationSerializer(queryset.order_by('-date', '-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = ConsultationSerializer(data=request.data)
        if serializer.is_valid():
            consultation = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Consultation',
                object_id=consultation.id,
                object_name=str(consultation)
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def consultation_detail(request, pk):
    """Retrieve, update or delete a consultation"""
    consultation = get_object_or_404(Consultation.objects.select_related('client'), pk=pk)

    if request.method == 'GET':
        serializer = ConsultationSerializer(consultation)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ConsultationSerializer(consultation, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        consultation.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Consultation',
            object_id=pk
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
