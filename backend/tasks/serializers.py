from rest_framework import serializers
from .models import Task


class TaskSerializer(serializers.ModelSerializer):
    class Meta:
        model = Task
        fields = [
            'id', 'title', 'description', 'related_to', 'related_type', 'assigned_to', 'due_date',
            'priority', 'status', 'completed', 'category', 'estimated_duration', 'tags', 'checklist',
            'automation_rule', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_title(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Title is required")
        return value.strip()

    def validate(self, attrs):
        # Whichever of completed / status the caller sent decides the other
        if 'completed' in attrs:
            if attrs['completed']:
                attrs['status'] = 'Done'
            elif attrs.get('status', getattr(self.instance, 'status', 'Pending')) == 'Done':
                attrs['status'] = 'Pending'
        elif 'status' in attrs:
            attrs['completed'] = attrs['status'] == 'Done'
        return attrs


class TemplateTaskSerializer(serializers.Serializer):
    """Customizations applied over a task template"""
    title = serializers.CharField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    priority = serializers.ChoiceField(choices=['High', 'Medium', 'Low'], required=False)
    estimated_duration = serializers.IntegerField(required=False, min_value=1)
    category = serializers.CharField(required=False)
    tags = serializers.ListField(child=serializers.CharField(), required=False)
    checklist = serializers.ListField(child=serializers.CharField(), required=False)
    due_date = serializers.DateField(required=False)
    assigned_to = serializers.CharField(required=False, allow_blank=True)
    related_to = serializers.CharField(required=False, allow_blank=True)
    related_type = serializers.ChoiceField(choices=[c for c, _ in Task.RELATED_TYPE_CHOICES], required=False)
