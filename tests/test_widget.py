import unittest
from unittest import mock

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QLineEdit, QPushButton, QSizePolicy, QWidget

from qlayer.controllers import MotionController, controllers_of
from qlayer.style import class_names
from qlayer.widget import WidgetRegistry, build, registry
from qlayer.widgets import Box
from tests.qt import QtTestCase


def make_label():
    return QLabel("made")


class TestRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = WidgetRegistry()

    def test_register_and_lookup(self):
        self.registry.register("thing", make_label)
        self.assertIn("thing", self.registry)
        self.assertIs(self.registry.get("thing"), make_label)
        self.assertEqual(self.registry.keys(), ["thing"])
        self.assertEqual(len(self.registry), 1)

    def test_decorator(self):
        @self.registry.register("other")
        def build_other(type="other"):
            return QLabel(type)

        self.assertIs(self.registry.get("other"), build_other)

    def test_invalid_registrations(self):
        with self.assertRaises(ValueError):
            self.registry.register("", make_label)
        with self.assertRaises(ValueError):
            self.registry.register("thing", "not callable")

    def test_duplicates_need_replace(self):
        self.registry.register("thing", make_label)
        with self.assertRaises(ValueError):
            self.registry.register("thing", lambda **kw: QLabel())
        replacement = lambda **kw: QLabel()
        self.registry.register("thing", replacement, replace=True)
        self.assertIs(self.registry.get("thing"), replacement)

    def test_unregister(self):
        self.registry.register("thing", make_label)
        self.assertIs(self.registry.unregister("thing"), make_label)
        self.assertNotIn("thing", self.registry)
        self.assertIsNone(self.registry.unregister("thing"))

    def test_builtins_registered(self):
        for key in ("box", "centerbox", "label", "icon", "button", "entry", "slider", "stack",
                    "scrollable", "revealer", "overlay", "levelbar", "switch"):
            self.assertIn(key, registry)


class TestBuildVariants(QtTestCase):

    def test_string_becomes_plain_label(self):
        widget = build("<b>hi</b>")
        self.assertIsInstance(widget, QLabel)
        self.assertEqual(widget.text(), "<b>hi</b>")
        self.assertEqual(widget.textFormat(), Qt.TextFormat.PlainText)

    def test_widget_passes_through(self):
        widget = QPushButton()
        self.assertIs(build(widget), widget)

    def test_factory_is_called(self):
        widget = build(make_label)
        self.assertEqual(widget.text(), "made")

    def test_null_descriptor(self):
        for descriptor in (None, "", {}):
            with self.assertLogs("qlayer", level="ERROR") as cm:
                widget = build(descriptor)
            self.assertEqual(cm.output, ["ERROR:qlayer:Widget from null/undefined"])
            self.assertIn("error", class_names(widget))

    def test_unknown_type_reported_once(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            widget = build({"type": "nope", "label": "x"})
        self.assertEqual(cm.output, ['ERROR:qlayer:There is no widget with type "nope"'])
        self.assertIsInstance(widget, QLabel)
        self.assertEqual(widget.text(), "nope doesn't exist")
        self.assertIn("error", class_names(widget))

    def test_unsupported_descriptor(self):
        with self.assertLogs("qlayer", level="ERROR"):
            widget = build(42)
        self.assertIn("error", class_names(widget))

    def test_failing_factory(self):
        def broken():
            raise RuntimeError("boom")

        with self.assertLogs("qlayer", level="ERROR") as cm:
            widget = build(broken)
        self.assertIn("construction failed", cm.output[0])
        self.assertEqual(widget.text(), "broken failed to build")

    def test_factory_returning_non_widget(self):
        with self.assertLogs("qlayer", level="ERROR") as cm:
            build({"type": lambda: "text"})
        self.assertIn("not a widget", cm.output[0])


class TestStructured(QtTestCase):

    def tearDown(self):
        registry.unregister("test-counter")

    def test_box_end_to_end(self):
        box = build({"type": "box", "orientation": "v", "children": ["a", "b"], "className": "bar"})
        self.assertIsInstance(box, Box)
        self.assertEqual(box.orientation(), Qt.Orientation.Vertical)
        self.assertEqual([child.text() for child in box.child_widgets()], ["a", "b"])
        self.assertEqual(class_names(box), ["bar"])

    def test_unknown_options_warn_per_key(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            build({"type": "label", "label": "x", "colour": "red", "size": 3})
        self.assertEqual(cm.output, [
            'WARNING:qlayer:label has no property "colour"',
            'WARNING:qlayer:label has no property "size"',
        ])

    def test_callable_type_rejects_extra_options(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            widget = build({"type": make_label, "label": "ignored"})
        self.assertEqual(cm.output, ['WARNING:qlayer:make_label has no property "label"'])
        self.assertEqual(widget.text(), "made")

    def test_custom_registered_type(self):
        @registry.register("test-counter")
        def build_counter(type="test-counter", start=0):
            return QLabel(str(start))

        widget = build({"type": "test-counter", "start": 5, "name": "counter"})
        self.assertEqual(widget.text(), "5")
        self.assertEqual(widget.objectName(), "counter")

    def test_common_props(self):
        widget = build({
            "type": "label",
            "label": "x",
            "halign": "end",
            "valign": "center",
            "hexpand": True,
            "sensitive": False,
            "tooltip": "tip",
            "style": "color: red;",
        })
        self.assertEqual(widget.property("halign"), "end")
        self.assertEqual(widget.property("valign"), "center")
        self.assertEqual(widget.sizePolicy().horizontalPolicy(), QSizePolicy.Policy.Expanding)
        self.assertFalse(widget.isEnabled())
        self.assertEqual(widget.toolTip(), "tip")
        self.assertIn("color: red;", widget.styleSheet())

    def test_wrong_align_is_reported_and_ignored(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            widget = build({"type": "label", "halign": "middle"})
        self.assertIn('wrong halign value "middle"', cm.output[0])
        self.assertIsNone(widget.property("halign"))

    def test_wrong_prop_type_is_reported(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            build({"type": "label", "hexpand": "yes"})
        self.assertIn('"hexpand" has to be boolean or undefined, got string', cm.output[0])

    def test_hidden_child(self):
        box = build({"type": "box", "children": [{"type": "label", "label": "x", "visible": False}]})
        self.assertTrue(box.child_widgets()[0].isHidden())

    def test_properties(self):
        widget = build({"type": "label", "properties": [["count", 3]]})
        self.assertEqual(widget._count, 3)
        widget = build({"type": "label", "properties": {"items": []}})
        self.assertEqual(widget._items, [])

    def test_signal_connection(self):
        calls = []
        entry = build({"type": "entry", "connections": [["textChanged", lambda w, text: calls.append((w, text))]]})
        self.assertIsInstance(entry, QLineEdit)
        entry.setText("abc")
        self.assertEqual(calls, [(entry, "abc")])

    def test_unknown_signal_connection(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            build({"type": "label", "connections": [["noSuchSignal", lambda w: None]]})
        self.assertIn('there is no signal "noSuchSignal"', cm.output[0])

    def test_interval_connection_runs_immediately(self):
        calls = []
        widget = build({"type": "label", "connections": [[1000, lambda w: calls.append(w)]]})
        self.assertEqual(calls, [widget])

    def test_service_connection(self):
        service = mock.Mock(spec=["connect_widget"])
        callback = lambda w: None
        widget = build({"type": "label", "connections": [[service, callback, "changed"]]})
        service.connect_widget.assert_called_once_with(widget, callback, "changed")

    def test_service_class_with_instance(self):
        service = mock.Mock(spec=["connect_widget"])
        holder = type("Battery", (), {"instance": service})
        callback = lambda w: None
        widget = build({"type": "label", "connections": [[holder, callback]]})
        service.connect_widget.assert_called_once_with(widget, callback, None)

    def test_setup_runs_last(self):
        seen = []

        def setup(widget):
            seen.append((class_names(widget), len(controllers_of(widget, MotionController)), widget.objectName()))

        build({
            "type": "box",
            "className": "panel",
            "name": "main",
            "onHoverEnter": lambda w, x, y: None,
            "setup": setup,
        })
        self.assertEqual(seen, [(["panel"], 1, "main")])

    def test_failing_setup_keeps_widget(self):
        def setup(widget):
            raise RuntimeError("bad setup")

        with self.assertLogs("qlayer", level="ERROR") as cm:
            widget = build({"type": "label", "label": "x", "setup": setup})
        self.assertIn("setup failed", cm.output[0])
        self.assertEqual(widget.text(), "x")

    def test_descriptor_is_not_mutated(self):
        descriptor = {"type": "label", "label": "x", "className": "a", "onScroll": lambda *a: None}
        copy = dict(descriptor)
        build(descriptor)
        self.assertEqual(descriptor, copy)


if __name__ == "__main__":
    unittest.main()
