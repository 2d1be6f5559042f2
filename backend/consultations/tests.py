"""
Test suite for Consultations module
"""
from datetime import timedelta
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.consultations.models import Consultation
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ConsultationTests(TestCase):
    """Test consultation endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_client(name='Acharya Mishra', client_type='Astrologer')
        self.today = timezone.localdate()

    def test_create_consultation(self):
        """Log a consultation with the stones discussed"""
        response = self.client.post('/api/consultations/', {
            'client': self.customer.id,
            'date': self.today.isoformat(),
            'medium': 'Video',
            'stones_discussed': [' Blue Sapphire ', 'Ruby', ''],
            'outcome': 'Interested in a 5ct sapphire',
            'follow_up_needed': True,
            'next_follow_up_date': (self.today + timedelta(days=3)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['client_name'], 'Acharya Mishra')
        self.assertEqual(response.data['stones_discussed'], ['Blue Sapphire', 'Ruby'])

    def test_follow_up_requires_date(self):
        """A follow-up without a date is rejected"""
        response = self.client.post('/api/consultations/', {
            'client': self.customer.id,
            'date': self.today.isoformat(),
            'medium': 'Call',
            'follow_up_needed': True,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('next_follow_up_date', response.data)

    def test_follow_up_before_consultation_rejected(self):
        """The follow-up cannot precede the consultation"""
        response = self.client.post('/api/consultations/', {
            'client': self.customer.id,
            'date': self.today.isoformat(),
            'medium': 'Call',
            'follow_up_needed': True,
            'next_follow_up_date': (self.today - timedelta(days=1)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_no_follow_up_clears_date(self):
        """Turning off the follow-up clears the next date"""
        consultation = TestDataFactory.create_consultation(
            client=self.customer, follow_up_needed=True, next_follow_up_date=self.today + timedelta(days=2)
        )
        response = self.client.patch(f'/api/consultations/{consultation.id}/', {'follow_up_needed': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        consultation.refresh_from_db()
        self.assertIsNone(consultation.next_follow_up_date)

    def test_filters(self):
        """List filters by client, medium and follow-up flag"""
        other = TestDataFactory.create_client()
        TestDataFactory.create_consultation(client=self.customer, medium='In-person')
        TestDataFactory.create_consultation(client=other, medium='Call', follow_up_needed=True,
                                            next_follow_up_date=self.today)

        response = self.client.get(f'/api/consultations/?client={self.customer.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/consultations/?medium=Call')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/consultations/?follow_up_needed=true')
        self.assertEqual(response.data[0]['client'], other.id)

    def test_delete_consultation(self):
        """Consultations can be deleted"""
        consultation = TestDataFactory.create_consultation(client=self.customer)
        response = self.client.delete(f'/api/consultations/{consultation.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Consultation.objects.exists())

    def test_deleting_client_removes_consultations(self):
        """Consultations go with their client"""
        TestDataFactory.create_consultation(client=self.customer)
        self.customer.delete()
        self.assertFalse(Consultation.objects.exists())
