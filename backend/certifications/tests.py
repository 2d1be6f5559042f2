"""
Test suite for Certifications module
Tests: Lab submissions, linear status workflow, pending list
"""
from datetime import timedelta
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.certifications.workflow import CertificationTransitionError, advance, next_status, transition_to
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class WorkflowTests(TestCase):
    """Status progression helpers"""

    def setUp(self):
        self.stone = TestDataFactory.create_stone()
        self.certification = TestDataFactory.create_certification(stone=self.stone, lab='IGI')

    def test_next_status(self):
        """Statuses move in a fixed order"""
        self.assertEqual(next_status('Pending'), 'In Progress')
        self.assertEqual(next_status('Received'), 'Certified')
        with self.assertRaises(CertificationTransitionError):
            next_status('Certified')

    def test_advance_stamps_dates(self):
        """Sending and receiving stamp today's date"""
        today = timezone.localdate()
        advance(self.certification)
        self.assertEqual(self.certification.date_sent, today)
        advance(self.certification)
        self.assertEqual(self.certification.date_received, today)

    def test_certified_updates_stone(self):
        """Certifying marks the stone certified with the lab"""
        entered = transition_to(self.certification, 'Certified')
        self.assertEqual(entered, ['In Progress', 'Received', 'Certified'])
        self.stone.refresh_from_db()
        self.assertTrue(self.stone.certified)
        self.assertEqual(self.stone.certificate_lab, 'IGI')

    def test_no_backward_transition(self):
        """Moving back is refused"""
        transition_to(self.certification, 'Received')
        with self.assertRaises(CertificationTransitionError):
            transition_to(self.certification, 'Pending')


class CertificationTests(TestCase):
    """Test certification endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.stone = TestDataFactory.create_stone(stone_type='Blue Sapphire')

    def test_submit_stone(self):
        """Submitting a stone creates a pending certification"""
        response = self.client.post('/api/certifications/', {'stone': self.stone.id, 'lab': 'GIA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Pending')
        self.assertEqual(response.data['stone_code'], self.stone.stone_id)

    def test_unknown_lab_rejected(self):
        """Lab must be one of the known labs"""
        response = self.client.post('/api/certifications/', {'stone': self.stone.id, 'lab': 'Backyard Lab'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_at_later_status_runs_steps(self):
        """Creating straight into Received stamps both dates"""
        response = self.client.post('/api/certifications/', {
            'stone': self.stone.id, 'lab': 'GRS', 'status': 'Received'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNotNone(response.data['date_sent'])
        self.assertIsNotNone(response.data['date_received'])

    def test_received_before_sent_rejected(self):
        """Date received cannot precede date sent"""
        today = timezone.localdate()
        response = self.client.post('/api/certifications/', {
            'stone': self.stone.id,
            'lab': 'IGI',
            'date_sent': today.isoformat(),
            'date_received': (today - timedelta(days=3)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_received', response.data)

    def test_advance_endpoint(self):
        """Advance moves one step and is audited"""
        certification = TestDataFactory.create_certification(stone=self.stone)
        response = self.client.post(f'/api/certifications/{certification.id}/advance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'In Progress')
        self.assertTrue(AuditLog.objects.filter(action='certification_advance').exists())

    def test_advance_past_certified(self):
        """Certified is the last step"""
        certification = TestDataFactory.create_certification(stone=self.stone, status='Certified')
        response = self.client.post(f'/api/certifications/{certification.id}/advance/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_backward_rejected(self):
        """Status cannot be moved back through an update"""
        certification = TestDataFactory.create_certification(stone=self.stone, status='Received')
        response = self.client.patch(f'/api/certifications/{certification.id}/', {'status': 'Pending'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data)

    def test_patch_to_certified(self):
        """Updating to Certified marks the stone"""
        certification = TestDataFactory.create_certification(stone=self.stone, lab='SSEF', status='In Progress')
        response = self.client.patch(f'/api/certifications/{certification.id}/', {'status': 'Certified'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.stone.refresh_from_db()
        self.assertTrue(self.stone.certified)
        self.assertEqual(self.stone.certificate_lab, 'SSEF')

    def test_pending_list(self):
        """Pending lists only Pending and In Progress"""
        TestDataFactory.create_certification(stone=self.stone, status='Pending')
        TestDataFactory.create_certification(stone=self.stone, status='In Progress')
        TestDataFactory.create_certification(stone=self.stone, status='Certified')
        response = self.client.get('/api/certifications/pending/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_filter_by_lab(self):
        """List filters by lab"""
        TestDataFactory.create_certification(stone=self.stone, lab='GIA')
        TestDataFactory.create_certification(stone=self.stone, lab='IGI')
        response = self.client.get('/api/certifications/?lab=IGI')
        self.assertEqual(len(response.data), 1)
