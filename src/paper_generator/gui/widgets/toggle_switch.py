"""
Animated on/off switch used for the header and math-paper options.
"""
from PySide6.QtCore import Property, QEasingCurve, QPropertyAnimation, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from paper_generator.gui.styles.theme import get_colors


class ToggleSwitch(QWidget):
    """
    Pill-shaped switch with a sliding thumb.

    `toggled` fires only on real state changes, whether from a click or
    from setChecked().
    """

    toggled = Signal(bool)

    def __init__(self, checked: bool = False, parent=None):
        super().__init__(parent)
        self._checked = checked
        # 0.0 = left (off), 1.0 = right (on)
        self._thumb_pos = 1.0 if checked else 0.0

        self.setFixedSize(44, 24)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.update_theme()

        self._animation = QPropertyAnimation(self, b"thumb_pos", self)
        self._animation.setDuration(200)
        self._animation.setEasingCurve(QEasingCurve.Type.InOutQuad)

    @Property(float)
    def thumb_pos(self):
        return self._thumb_pos

    @thumb_pos.setter
    def thumb_pos(self, pos):
        self._thumb_pos = pos
        self.update()

    def isChecked(self):
        return self._checked

    def setChecked(self, checked: bool):
        if self._checked == checked:
            return
        self._checked = checked
        self._start_animation()
        self.toggled.emit(checked)

    def _start_animation(self):
        self._animation.stop()
        self._animation.setStartValue(self._thumb_pos)
        self._animation.setEndValue(1.0 if self._checked else 0.0)
        self._animation.start()

    def mouseReleaseEvent(self, event):
        if not self.isEnabled():
            return
        # Ignore releases dragged off the widget
        if event.button() == Qt.MouseButton.LeftButton and self.rect().contains(event.pos()):
            self.setChecked(not self._checked)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        w, h = self.width(), self.height()
        thumb_size = h - 4

        if not self.isEnabled():
            color = self._track_color_disabled
        elif self._checked:
            color = self._track_color_on
        else:
            color = self._track_color_off
        painter.setBrush(QBrush(color))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.drawRoundedRect(QRectF(0, 0, w, h), h / 2, h / 2)

        padding = 2
        max_x = w - thumb_size - padding
        thumb_x = padding + (max_x - padding) * self._thumb_pos
        painter.setBrush(QBrush(self._thumb_color))
        painter.setPen(QPen(QColor(0, 0, 0, 20), 1))
        painter.drawEllipse(QRectF(thumb_x, padding, thumb_size, thumb_size))

    def update_theme(self):
        """Update colors when theme changes."""
        C = get_colors()
        self._track_color_off = QColor(C.BORDER)
        self._track_color_on = QColor(C.PRIMARY)
        self._thumb_color = QColor(C.SURFACE)
        self._track_color_disabled = QColor(C.DISABLED_BG)
        self.update()
