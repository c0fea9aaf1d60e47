import logging

from django.test import TestCase

from common.logging_config import RequestIDFilter


class HealthCheckTests(TestCase):

    def test_liveness(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'healthy')

    def test_readiness(self):
        response = self.client.get('/ready/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['checks'], {'database': True, 'cache': True})

    def test_deep(self):
        response = self.client.get('/health/deep/')
        self.assertEqual(response.status_code, 200)
        checks = response.json()['checks']
        self.assertTrue(checks['database']['status'])
        self.assertEqual(checks['occupancy']['details']['active_tenants'], 0)


class RequestIDTests(TestCase):

    def test_generated_id_is_returned(self):
        response = self.client.get('/health/')
        self.assertEqual(len(response['X-Request-ID']), 8)

    def test_incoming_id_is_reused(self):
        response = self.client.get('/health/', HTTP_X_REQUEST_ID='abcdef1234567890')
        self.assertEqual(response['X-Request-ID'], 'abcdef12')

    def test_filter_outside_request(self):
        record = logging.LogRecord('tenants', logging.INFO, __file__, 1, 'msg', None, None)
        self.assertTrue(RequestIDFilter().filter(record))
        self.assertEqual(record.request_id, 'N/A')
