"""Tests for shared HTTP instrumentation helpers."""

import unittest

from perfhook.instrumentation.http import decode_text_body, get_content_type_header, is_text_content_type


class TestHttpHelpers(unittest.TestCase):
    """Test body decoding and header helpers."""

    def test_get_content_type_header_case_insensitive(self):
        self.assertEqual(get_content_type_header({"Content-Type": "application/json"}), "application/json")
        self.assertEqual(get_content_type_header({"CONTENT-TYPE": "text/html"}), "text/html")
        self.assertIsNone(get_content_type_header({"Accept": "application/json"}))

    def test_is_text_content_type(self):
        self.assertTrue(is_text_content_type("application/json; charset=utf-8"))
        self.assertTrue(is_text_content_type("text/csv"))
        self.assertTrue(is_text_content_type("application/problem+json"))
        self.assertFalse(is_text_content_type("image/png"))
        self.assertFalse(is_text_content_type(None))

    def test_decode_text_body(self):
        self.assertEqual(decode_text_body(b'{"a": 1}', "application/json"), '{"a": 1}')
        self.assertEqual(decode_text_body(b"\x89PNG", "image/png"), b"\x89PNG")
        self.assertEqual(decode_text_body(b"\xff\xfe", "text/plain"), b"\xff\xfe")
        self.assertIsNone(decode_text_body(b"", "text/plain"))
        self.assertEqual(decode_text_body({"a": 1}, None), {"a": 1})


if __name__ == "__main__":
    unittest.main()
