from unittest import mock

from django.test import TestCase
from redis.exceptions import ConnectionError as RedisConnectionError


class HealthEndpointTests(TestCase):

    @mock.patch('backend.apps.health_check.views.Redis')
    def test_healthy(self, redis_cls):
        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['ok'])
        self.assertEqual(body['database']['status'], 'ok')
        self.assertEqual(body['redis']['status'], 'ok')
        self.assertIn('timestamp', body)

    @mock.patch('backend.apps.health_check.views.Redis')
    def test_redis_outage_is_reported_but_not_fatal(self, redis_cls):
        redis_cls.from_url.return_value.ping.side_effect = RedisConnectionError("refused")

        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['ok'])
        self.assertEqual(response.json()['redis']['status'], 'unavailable')

    def test_post_not_allowed(self):
        response = self.client.post('/health/')

        self.assertEqual(response.status_code, 405)
