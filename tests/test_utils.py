import logging
import unittest

from PySide6.QtWidgets import QLabel, QWidget

from qlayer.utils import interval, kind_of, logger, restcheck, setup_logging, typecheck
from tests.qt import QtTestCase


class TestKindOf(QtTestCase):

    def test_kinds(self):
        self.assertEqual(kind_of(None), "undefined")
        self.assertEqual(kind_of(True), "boolean")
        self.assertEqual(kind_of(3), "number")
        self.assertEqual(kind_of(2.5), "number")
        self.assertEqual(kind_of("x"), "string")
        self.assertEqual(kind_of([1]), "array")
        self.assertEqual(kind_of((1,)), "array")
        self.assertEqual(kind_of({"a": 1}), "object")
        self.assertEqual(kind_of(QLabel()), "widget")
        self.assertEqual(kind_of(len), "function")
        self.assertEqual(kind_of(object()), "object")


class TestChecks(unittest.TestCase):

    def test_typecheck_accepts_matching_kind(self):
        with self.assertNoLogs("qlayer", level="WARNING"):
            self.assertTrue(typecheck("label", "text", "string", "label"))
            self.assertTrue(typecheck("size", None, ["number", "undefined"], "icon"))

    def test_typecheck_reports_mismatch(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            self.assertFalse(typecheck("wrap", "yes", "boolean", "label"))
        self.assertEqual(cm.output, ['WARNING:qlayer:label: "wrap" has to be boolean, got string'])

    def test_typecheck_lists_all_expected_kinds(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            typecheck("onClick", 5, ["string", "function"], "button")
        self.assertIn("has to be string or function, got number", cm.output[0])

    def test_restcheck_warns_once_per_key(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            count = restcheck({"foo": 1, "bar": 2}, "box")
        self.assertEqual(count, 2)
        self.assertEqual(cm.output, [
            'WARNING:qlayer:box has no property "foo"',
            'WARNING:qlayer:box has no property "bar"',
        ])

    def test_restcheck_silent_when_empty(self):
        with self.assertNoLogs("qlayer", level="WARNING"):
            self.assertEqual(restcheck({}, "box"), 0)


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        for handler in [h for h in logger.handlers if getattr(h, "_qlayer", False)]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_handler_installed_once(self):
        setup_logging("info")
        setup_logging(logging.DEBUG)
        ours = [h for h in logger.handlers if getattr(h, "_qlayer", False)]
        self.assertEqual(len(ours), 1)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_unknown_level_name_falls_back_to_warning(self):
        setup_logging("chatty")
        self.assertEqual(logger.level, logging.WARNING)


class TestInterval(QtTestCase):

    def test_runs_immediately_and_is_owned_by_scope(self):
        scope = QWidget()
        calls = []
        timer = interval(1000, lambda: calls.append(1), scope)
        self.assertEqual(calls, [1])
        self.assertIs(timer.parent(), scope)
        self.assertTrue(timer.isActive())
        self.assertEqual(timer.interval(), 1000)
        timer.stop()

    def test_failing_callback_is_reported(self):
        scope = QWidget()

        def boom():
            raise RuntimeError("nope")

        with self.assertLogs("qlayer", level="ERROR") as cm:
            timer = interval(500, boom, scope)
        timer.stop()
        self.assertIn("interval callback failed", cm.output[0])


if __name__ == "__main__":
    unittest.main()
