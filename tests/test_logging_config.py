"""
Tests for the JSON log formatter
"""
import json
import logging
import sys
import unittest

from puffy_delights.logging_config import JSONFormatter, setup_logging


class TestJSONFormatter(unittest.TestCase):
    """Test cases for JSONFormatter"""

    def make_record(self, message="Order placed", **extra):
        record = logging.LogRecord("puffy_delights.services.order_service", logging.INFO,
                                   __file__, 10, message, (), None, func="place_order")
        for name, value in extra.items():
            setattr(record, name, value)
        return record

    def test_one_json_object_per_record(self):
        line = JSONFormatter("puffy-delights").format(self.make_record(order_id=7, ignored="x"))
        data = json.loads(line)

        self.assertEqual(data["service"], "puffy-delights")
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["message"], "Order placed")
        self.assertEqual(data["func"], "place_order")
        self.assertEqual(data["order_id"], 7)
        self.assertNotIn("ignored", data)

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = self.make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter("puffy-delights").format(record))
        self.assertIn("RuntimeError: boom", data["exception"])

    def test_setup_logging_replaces_handlers(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("puffy-delights", "debug")
            setup_logging("puffy-delights", "warning")
            self.assertEqual(len(root.handlers), 1)
            self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)
            self.assertEqual(root.level, logging.WARNING)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


if __name__ == '__main__':
    unittest.main()
