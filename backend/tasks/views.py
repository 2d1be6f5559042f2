import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.utils import timezone
from .models import Task
from .serializers import TaskSerializer, TemplateTaskSerializer
from .automation import (
    AUTOMATION_RULES, TASK_TEMPLATES, TemplateNotFound, build_task_from_template,
    generate_smart_tasks, run_automation, task_insights
)
from backend.assistant.context import business_snapshot
from backend.assistant.gemini_service import AssistantError, AssistantUnavailable, get_gemini_service
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def filter_tasks(queryset, params):
    task_status = params.get('status', None)
    if task_status:
        queryset = queryset.filter(status=task_status)
    priority = params.get('priority', None)
    if priority:
        queryset = queryset.filter(priority=priority)
    related_type = params.get('related_type', None)
    if related_type:
        queryset = queryset.filter(related_type=related_type)
    completed = params.get('completed', None)
    if completed is not None:
        queryset = queryset.filter(completed=completed.lower() in ('true', '1', 'yes'))
    due = params.get('due', None)
    if due == 'today':
        queryset = queryset.filter(due_date=timezone.localdate())
    elif due == 'overdue':
        queryset = queryset.filter(completed=False, due_date__lt=timezone.localdate())
    return queryset


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def task_list_create(request):
    """List tasks or create a new task"""
    if request.method == 'GET':
        queryset = filter_tasks(Task.objects.all(), request.query_params)
        serializer = TaskSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = TaskSerializer(data=request.data)
        if serializer.is_valid():
            task = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Task',
                object_id=task.id,
                object_name=task.title
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def task_detail(request, pk):
    """Retrieve, update or delete a task"""
    task = get_object_or_404(Task, pk=pk)

    if request.method == 'GET':
        serializer = TaskSerializer(task)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_status = task.status
        serializer = TaskSerializer(task, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            task = serializer.save()
            if old_status != task.status:
                create_audit_log(
                    request=request,
                    action='status_change',
                    model_name='Task',
                    object_id=task.id,
                    object_name=task.title,
                    changes={'status': {'old': old_status, 'new': task.status}}
                )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        title = task.title
        task.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Task',
            object_id=pk,
            object_name=title
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def task_templates(request):
    """Available task templates"""
    return Response(TASK_TEMPLATES)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def task_from_template(request, template_id):
    """Create a task from a template, applying any customizations in the body"""
    customizations = TemplateTaskSerializer(data=request.data)
    if not customizations.is_valid():
        return Response(customizations.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        fields = build_task_from_template(template_id, customizations.validated_data)
    except TemplateNotFound as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    task = Task.objects.create(**fields)
    create_audit_log(
        request=request,
        action='create',
        model_name='Task',
        object_id=task.id,
        object_name=task.title,
        changes={'template': str(template_id)}
    )
    return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def automation_rules(request):
    """Configured automation rules"""
    return Response(AUTOMATION_RULES)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def automation_run(request):
    """Evaluate the automation rules now and create any due tasks"""
    result = run_automation()
    created = result['created']
    if created:
        create_audit_log(
            request=request,
            action='automation_run',
            model_name='Task',
            object_id=','.join(str(t.id) for t in created),
            object_name='Task automation',
            changes={'rules': result['triggered'], 'created': [t.id for t in created]}
        )
    return Response({
        'triggered_rules': result['triggered'],
        'created': TaskSerializer(created, many=True).data,
        'skipped': result['skipped'],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def task_insights_view(request):
    """Productivity statistics across all tasks"""
    return Response(task_insights())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def smart_tasks(request):
    """Task suggestions from the assistant based on current business data"""
    try:
        service = get_gemini_service()
        suggestions = generate_smart_tasks(service, business_snapshot())
    except AssistantUnavailable as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except AssistantError as e:
        logger.error(f"Smart task generation failed: {str(e)}")
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({'suggestions': suggestions})
