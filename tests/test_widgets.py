import unittest

from PySide6.QtCore import QAbstractAnimation, Qt
from PySide6.QtWidgets import QApplication, QCheckBox, QLineEdit, QPushButton, QScrollArea, QSizePolicy

from qlayer.controllers import ScrollController, controllers_of
from qlayer.widget import build
from qlayer.widgets import (
    ARROW_SIZE,
    CenterBox,
    Icon,
    LevelBar,
    MenuButton,
    Overlay,
    Popover,
    Revealer,
    Slider,
    Stack,
)
from tests.qt import QtTestCase, wheel


class TestContainers(QtTestCase):

    def test_homogeneous_box_stretches_children(self):
        box = build({"type": "box", "homogeneous": True, "children": ["a", "b"]})
        layout = box.layout()
        self.assertEqual([layout.stretch(i) for i in range(layout.count())], [1, 1])

    def test_expanding_child_gets_stretch(self):
        box = build({"type": "box", "children": ["a", {"type": "label", "hexpand": True}]})
        layout = box.layout()
        self.assertEqual([layout.stretch(i) for i in range(layout.count())], [0, 1])

    def test_wrong_orientation(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            box = build({"type": "box", "orientation": "diagonal"})
        self.assertIn('wrong orientation value "diagonal"', cm.output[0])
        self.assertEqual(box.orientation(), Qt.Orientation.Horizontal)

    def test_centerbox_slots(self):
        box = build({"type": "centerbox", "startWidget": "s", "endWidget": "e"})
        self.assertIsInstance(box, CenterBox)
        self.assertEqual(box.start_widget().text(), "s")
        self.assertIsNone(box.center_widget())
        self.assertEqual(box.end_widget().text(), "e")

        box.set_center_widget(build("c"))
        self.assertEqual(box.center_widget().text(), "c")

    def test_stack_pages(self):
        stack = build({"type": "stack", "items": [["one", "1"], ["two", "2"]]})
        self.assertIsInstance(stack, Stack)
        self.assertEqual(stack.get_child_by_name("two").text(), "2")

        stack.show_child("two")
        self.assertEqual(stack.visible_child_name(), "two")
        stack.show_child(lambda: "one")
        self.assertEqual(stack.visible_child_name(), "one")

        stack.show_child("three")
        self.assertTrue(stack.isHidden())

    def test_stack_bad_item(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            stack = build({"type": "stack", "items": [["one", "1"], "two"]})
        self.assertIn("items have to be [name, widget] pairs", cm.output[0])
        self.assertEqual(stack.count(), 1)

    def test_stack_transition_options(self):
        with self.assertNoLogs("qlayer", level="WARNING"):
            stack = build({"type": "stack", "items": [["one", "1"]], "transition": "slide_left_right",
                           "transitionDuration": 300, "interpolateSize": True, "vhomogeneous": False})
        self.assertEqual(stack.transition, "slide_left_right")
        self.assertEqual(stack.duration, 300)
        self.assertTrue(stack.interpolate_size)

    def test_stack_wrong_transition(self):
        with self.assertLogs("qlayer", level="ERROR") as cm:
            stack = build({"type": "stack", "transition": "spin"})
        self.assertIn('wrong transition type "spin"', cm.output[0])
        self.assertEqual(stack.transition, "none")

    def test_stack_animates_visible_switches_only(self):
        stack = build({"type": "stack", "items": [["one", "1"], ["two", "2"]], "transition": "crossfade"})
        stack.show_child("two")
        self.assertIsNone(stack.animation())

        stack.show()
        try:
            stack.show_child("one")
            animation = stack.animation()
            self.assertIsNotNone(animation)
            self.assertEqual(animation.state(), QAbstractAnimation.State.Running)
            self.assertIsNotNone(stack.get_child_by_name("one").graphicsEffect())

            animation.setCurrentTime(animation.totalDuration())
            self.assertIsNone(stack.animation())
            self.assertIsNone(stack.get_child_by_name("one").graphicsEffect())
            self.assertEqual(stack.visible_child_name(), "one")
        finally:
            stack.close()

    def test_scrollable_policies(self):
        area = build({"type": "scrollable", "child": "x", "hscroll": "never", "vscroll": "always"})
        self.assertIsInstance(area, QScrollArea)
        self.assertEqual(area.horizontalScrollBarPolicy(), Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.assertEqual(area.verticalScrollBarPolicy(), Qt.ScrollBarPolicy.ScrollBarAlwaysOn)
        self.assertEqual(area.widget().text(), "x")

    def test_scrollable_wrong_policy(self):
        with self.assertLogs("qlayer", level="ERROR") as cm:
            build({"type": "scrollable", "vscroll": "sometimes"})
        self.assertIn('wrong scroll policy "sometimes" for vscroll', cm.output[0])

    def test_revealer(self):
        revealer = build({"type": "revealer", "child": "x", "revealChild": True, "transition": "slide_down"})
        self.assertIsInstance(revealer, Revealer)
        self.assertTrue(revealer.reveal_child())
        self.assertFalse(revealer.child().isHidden())

        revealer.set_reveal_child(False, animate=False)
        self.assertFalse(revealer.reveal_child())
        self.assertTrue(revealer.child().isHidden())

    def test_revealer_wrong_transition(self):
        with self.assertLogs("qlayer", level="ERROR") as cm:
            revealer = build({"type": "revealer", "transition": "spin"})
        self.assertIn('wrong transition type "spin"', cm.output[0])
        self.assertEqual(revealer.transition, "crossfade")

    def test_overlay(self):
        overlay = build({
            "type": "overlay",
            "child": "base",
            "overlays": ["top", {"type": "label", "label": "badge", "measure": False}],
        })
        self.assertIsInstance(overlay, Overlay)
        top, badge = overlay.overlays()
        self.assertEqual(top.text(), "top")
        self.assertEqual(badge.sizePolicy().horizontalPolicy(), QSizePolicy.Policy.Ignored)
        self.assertNotEqual(top.sizePolicy().horizontalPolicy(), QSizePolicy.Policy.Ignored)


class TestLeaves(QtTestCase):

    def test_label_options(self):
        label = build({"type": "label", "label": "<i>x</i>", "markup": True, "wrap": True, "justify": "left"})
        self.assertEqual(label.textFormat(), Qt.TextFormat.RichText)
        self.assertTrue(label.wordWrap())
        self.assertTrue(label.alignment() & Qt.AlignmentFlag.AlignLeft)

    def test_label_wrong_justify(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            build({"type": "label", "justify": "sideways"})
        self.assertIn('wrong justify value "sideways"', cm.output[0])

    def test_icon(self):
        icon = build({"type": "icon", "iconName": "", "size": 24})
        self.assertIsInstance(icon, Icon)
        self.assertEqual(icon.icon_size, 24)
        self.assertEqual(icon.icon_name, "")

    def test_button_click(self):
        calls = []
        button = build({"type": "button", "child": "ok", "onClick": lambda w: calls.append(w)})
        self.assertIsInstance(button, QPushButton)
        button.click()
        self.assertEqual(calls, [button])

    def test_entry_callbacks(self):
        changes, accepted = [], []
        entry = build({
            "type": "entry",
            "placeholderText": "search",
            "visibility": False,
            "onChange": lambda w, text: changes.append(text),
            "onAccept": lambda w, text: accepted.append(text),
        })
        self.assertIsInstance(entry, QLineEdit)
        self.assertEqual(entry.placeholderText(), "search")
        self.assertEqual(entry.echoMode(), QLineEdit.EchoMode.Password)

        entry.setText("abc")
        entry.returnPressed.emit()
        self.assertEqual(changes, ["abc"])
        self.assertEqual(accepted, ["abc"])

    def test_slider_value_and_change(self):
        values = []
        slider = build({"type": "slider", "min": 0, "max": 200, "value": 50,
                        "onChange": lambda w, value: values.append(value)})
        self.assertIsInstance(slider, Slider)
        self.assertAlmostEqual(slider.real_value(), 50.0)

        slider.set_real_value(100)
        self.assertEqual(values, [100.0])

    def test_slider_wheel_steps_once_per_notch(self):
        slider = build({"type": "slider", "min": 0, "max": 100, "value": 10})
        QApplication.sendEvent(slider, wheel(120))
        self.assertAlmostEqual(slider.real_value(), 11.0)
        QApplication.sendEvent(slider, wheel(-240))
        self.assertAlmostEqual(slider.real_value(), 10.0)

    def test_slider_scroll_slot_can_stop_wheel(self):
        calls = []
        slider = build({"type": "slider", "min": 0, "max": 100, "value": 10,
                        "onScroll": lambda w, dx, dy: calls.append(dy) or False})
        QApplication.sendEvent(slider, wheel(120))
        self.assertEqual(calls, [-1.0])
        self.assertAlmostEqual(slider.real_value(), 10.0)
        self.assertEqual(len(controllers_of(slider, ScrollController)), 1)

    def test_label_alignment_fractions(self):
        label = build({"type": "label", "label": "x", "justify": "right", "xalign": 0, "yalign": 1})
        self.assertTrue(label.alignment() & Qt.AlignmentFlag.AlignLeft)
        self.assertTrue(label.alignment() & Qt.AlignmentFlag.AlignBottom)

        label = build({"type": "label", "label": "x"})
        self.assertEqual(label.alignment(), Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignVCenter)

    def test_slider_draw_value(self):
        with self.assertNoLogs("qlayer", level="WARNING"):
            slider = build({"type": "slider", "min": 0, "max": 10, "value": 5, "drawValue": True})
        plain = build({"type": "slider", "min": 0, "max": 10, "value": 5})
        self.assertTrue(slider.draw_value)
        self.assertEqual(slider.value_text(), "5.0")
        self.assertGreater(slider.sizeHint().height(), plain.sizeHint().height())
        self.assertFalse(slider.grab().isNull())

    def test_popover(self):
        popover = build({"type": "popover", "child": "x", "hasArrow": True})
        self.assertIsInstance(popover, Popover)
        self.assertEqual(popover.windowType(), Qt.WindowType.Popup)
        self.assertEqual(popover.child().text(), "x")
        self.assertEqual(popover.contentsMargins().top(), ARROW_SIZE)
        self.assertFalse(popover.isVisible())

        popover = build({"type": "popover", "autohide": False})
        self.assertEqual(popover.windowType(), Qt.WindowType.Tool)

    def test_menubutton_toggles_popover(self):
        calls = []
        button = build({
            "type": "menubutton",
            "child": "menu",
            "popover": {"type": "popover", "autohide": False, "child": "x"},
            "onActivate": lambda w, active: calls.append(active),
        })
        self.assertIsInstance(button, MenuButton)
        popover = button.popover()
        self.assertIs(popover.parent(), button)
        self.assertTrue(popover.isWindow())

        button.setChecked(True)
        self.assertTrue(popover.isVisible())
        popover.popdown()
        self.assertFalse(button.isChecked())
        self.assertEqual(calls, [True, False])

    def test_menubutton_wraps_plain_popover_child(self):
        button = build({"type": "menubutton", "popover": "x"})
        self.assertIsInstance(button.popover(), Popover)
        self.assertEqual(button.popover().child().text(), "x")

    def test_levelbar(self):
        bar = build({"type": "levelbar", "value": 0.25})
        self.assertIsInstance(bar, LevelBar)
        self.assertAlmostEqual(bar.level(), 0.25)

        bar = build({"type": "levelbar", "mode": "discrete", "maxValue": 5, "value": 3, "orientation": "v"})
        self.assertEqual(bar.value(), 3)
        self.assertEqual(bar.orientation(), Qt.Orientation.Vertical)

    def test_levelbar_wrong_mode(self):
        with self.assertLogs("qlayer", level="WARNING") as cm:
            bar = build({"type": "levelbar", "mode": "stepped"})
        self.assertIn('wrong levelbar mode value "stepped"', cm.output[0])
        self.assertFalse(bar.discrete)

    def test_switch(self):
        calls = []
        switch = build({"type": "switch", "active": False, "onActivate": lambda w, active: calls.append(active)})
        self.assertIsInstance(switch, QCheckBox)
        switch.setChecked(True)
        self.assertEqual(calls, [True])


if __name__ == "__main__":
    unittest.main()
