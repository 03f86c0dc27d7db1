"""Tests for structured JSON logging."""

import json
import logging
import unittest
from datetime import datetime, timezone

from utils.logging import JSONFormatter


class TestJSONFormatter(unittest.TestCase):

    def _format(self, msg, extra=None, **kwargs):
        logger = logging.getLogger('test.json')
        record = logger.makeRecord('test.json', logging.INFO, __file__, 1, msg, (), None, extra=extra, **kwargs)
        return json.loads(JSONFormatter().format(record))

    def test_basic_fields(self):
        data = self._format("User created")

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'test.json')
        self.assertEqual(data['message'], 'User created')
        self.assertTrue(data['timestamp'].endswith('Z'))
        self.assertNotIn('lineno', data)

    def test_extra_fields_included(self):
        data = self._format("Auth failed", extra={
            "userId": "u-1",
            "failures": ["identity token rejected", "session token rejected"],
            "at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        })

        self.assertEqual(data['userId'], 'u-1')
        self.assertEqual(len(data['failures']), 2)
        self.assertEqual(data['at'], '2026-01-01 00:00:00+00:00')

    def test_sensitive_extra_fields_redacted(self):
        data = self._format("oops", extra={"token": "eyJ...", "password": "hunter2"})

        self.assertEqual(data['token'], '[REDACTED]')
        self.assertEqual(data['password'], '[REDACTED]')


if __name__ == '__main__':
    unittest.main()
