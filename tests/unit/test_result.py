"""Tests for the fail-open result type."""

import unittest

from perfhook.core.result import InstrumentationResult, InstrumentationResultCode, fail_open


class TestInstrumentationResult(unittest.TestCase):
    """Test result constructors."""

    def test_success(self):
        result = InstrumentationResult.success()
        self.assertTrue(result.ok)
        self.assertIsNone(result.error)

    def test_ignored_from_string(self):
        result = InstrumentationResult.ignored("Something went wrong")
        self.assertEqual(result.code, InstrumentationResultCode.IGNORED_FAILURE)
        self.assertIsInstance(result.error, Exception)
        self.assertIn("Something went wrong", str(result.error))

    def test_skipped_keeps_reason(self):
        result = InstrumentationResult.skipped("nothing to do")
        self.assertFalse(result.ok)
        self.assertEqual(result.reason, "nothing to do")


class TestFailOpen(unittest.TestCase):
    """Test the fail_open wrapper."""

    def test_exception_becomes_ignored_failure(self):
        def explode():
            raise RuntimeError("boom")

        result = fail_open(explode)

        self.assertEqual(result.code, InstrumentationResultCode.IGNORED_FAILURE)
        self.assertIsInstance(result.error, RuntimeError)

    def test_passes_arguments_and_plain_values_count_as_success(self):
        seen = []
        result = fail_open(lambda a, b=None: seen.append((a, b)), 1, b=2)

        self.assertTrue(result.ok)
        self.assertEqual(seen, [(1, 2)])

    def test_result_is_passed_through(self):
        skipped = InstrumentationResult.skipped("x")
        self.assertIs(fail_open(lambda: skipped), skipped)


if __name__ == "__main__":
    unittest.main()
