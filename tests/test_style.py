import unittest

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QLabel

from qlayer.style import CLASS_PROPERTY, STYLE_PROPERTY, add_class_names, class_names, set_style, styled, toggle_class_name
from qlayer.widget import build
from tests.qt import QtTestCase


class TestClassNames(QtTestCase):

    def test_toggle_is_idempotent(self):
        label = QLabel()
        toggle_class_name(label, "active")
        toggle_class_name(label, "active")
        self.assertEqual(class_names(label), ["active"])

        toggle_class_name(label, "active", False)
        toggle_class_name(label, "active", False)
        self.assertEqual(class_names(label), [])

    def test_add_class_names_splits_on_whitespace(self):
        label = QLabel()
        add_class_names(label, "bar  workspace\tfocused")
        self.assertEqual(class_names(label), ["bar", "workspace", "focused"])
        self.assertEqual(label.property(CLASS_PROPERTY), "bar workspace focused")

    def test_styled_wrapper(self):
        label = QLabel()
        handle = styled(label)
        handle.toggle_class_name("urgent")
        self.assertEqual(handle.class_names, ["urgent"])
        handle.set_style("color: red;")
        self.assertIn("color: red;", label.styleSheet())


class TestSetStyle(QtTestCase):

    def test_later_rules_are_appended(self):
        label = QLabel()
        set_style(label, "color: red;")
        set_style(label, "color: blue;")
        sheet = label.styleSheet()
        self.assertLess(sheet.index("color: red;"), sheet.index("color: blue;"))
        self.assertTrue(sheet.startswith(f'*[{STYLE_PROPERTY}="'))
        tag = label.property(STYLE_PROPERTY)
        self.assertEqual(sheet.count(f'[{STYLE_PROPERTY}="{tag}"]'), 2)

    def test_rule_does_not_reach_children(self):
        box = build({"type": "box", "style": "color: #ff0000;", "children": ["child"]})
        child = box.child_widgets()[0]
        box.ensurePolished()
        child.ensurePolished()
        red = QColor("#ff0000")
        self.assertEqual(box.palette().color(QPalette.ColorRole.WindowText), red)
        self.assertNotEqual(child.palette().color(QPalette.ColorRole.WindowText), red)
        self.assertIsNone(child.property(STYLE_PROPERTY))

    def test_each_widget_gets_its_own_tag(self):
        first, second = QLabel(), QLabel()
        set_style(first, "color: red;")
        set_style(second, "color: red;")
        self.assertNotEqual(first.property(STYLE_PROPERTY), second.property(STYLE_PROPERTY))


if __name__ == "__main__":
    unittest.main()
