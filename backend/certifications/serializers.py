from rest_framework import serializers
from .models import Certification
from .workflow import STATUS_FLOW, CertificationTransitionError, transition_to


class CertificationSerializer(serializers.ModelSerializer):
    stone_code = serializers.CharField(source='stone.stone_id', read_only=True)
    stone_type = serializers.CharField(source='stone.type', read_only=True)

    class Meta:
        model = Certification
        fields = [
            'id', 'stone', 'stone_code', 'stone_type', 'lab', 'date_sent', 'date_received',
            'certificate_file', 'certificate_number', 'status', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        date_sent = attrs.get('date_sent', getattr(self.instance, 'date_sent', None))
        date_received = attrs.get('date_received', getattr(self.instance, 'date_received', None))
        if date_sent and date_received and date_received < date_sent:
            raise serializers.ValidationError({'date_received': 'Date received cannot be before date sent'})

        target = attrs.get('status')
        if self.instance is not None and target and STATUS_FLOW.index(target) < STATUS_FLOW.index(self.instance.status):
            raise serializers.ValidationError({
                'status': f"Cannot move certification back from '{self.instance.status}' to '{target}'"
            })
        return attrs

    def create(self, validated_data):
        target = validated_data.pop('status', 'Pending')
        certification = super().create(validated_data)
        if target != 'Pending':
            self._transition(certification, target)
        return certification

    def update(self, instance, validated_data):
        target = validated_data.pop('status', None)
        certification = super().update(instance, validated_data)
        if target and target != certification.status:
            self._transition(certification, target)
        return certification

    def _transition(self, certification, target):
        try:
            transition_to(certification, target)
        except CertificationTransitionError as e:
            raise serializers.ValidationError({'status': str(e)})
