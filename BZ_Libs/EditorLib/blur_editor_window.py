"""
PyQt5 window for drawing blur zones over one gallery image.

ZoneCanvas paints the image scaled to fit and forwards pointer events to a
BlurEditorController in image-surface coordinates. The side panel lists the
zones and edits the selected zone's blur amount and rotation.
"""

from io import BytesIO
from pathlib import Path
from typing import Dict, Optional

from PIL import Image
from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QBrush, QColor, QCursor, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import (
    QDoubleSpinBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from BZ_Libs.constants import (
    MIN_BLUR_AMOUNT,
    MAX_BLUR_AMOUNT,
    CURSOR_DEFAULT,
    CURSOR_CROSSHAIR,
    CURSOR_MOVE,
    CURSOR_GRAB,
    CURSOR_NWSE_RESIZE,
    CURSOR_NESW_RESIZE,
    HANDLE_ROTATION,
    STATE_IDLE,
)
from BZ_Libs.EditorLib.editor_controller import BlurEditorController
from BZ_Libs.ZoneLib.geometry import handle_box, handle_positions

QT_CURSORS: Dict[str, Qt.CursorShape] = {
    CURSOR_DEFAULT: Qt.ArrowCursor,
    CURSOR_CROSSHAIR: Qt.CrossCursor,
    CURSOR_MOVE: Qt.SizeAllCursor,
    CURSOR_GRAB: Qt.OpenHandCursor,
    CURSOR_NWSE_RESIZE: Qt.SizeFDiagCursor,
    CURSOR_NESW_RESIZE: Qt.SizeBDiagCursor,
}

ZONE_FILL = QColor(60, 120, 220, 90)
ZONE_OUTLINE = QColor("#3c78dc")
SELECTED_OUTLINE = QColor("#ff9f1a")
HANDLE_FILL = QColor("#ffffff")


class ZoneCanvas(QWidget):
    def __init__(self, controller: BlurEditorController, pixmap: Optional[QPixmap], parent=None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.pixmap = pixmap
        self.image_rect = QRectF()
        self.on_zones_changed = None
        self.setMouseTracking(True)
        self.setMinimumSize(480, 360)

    def _layout_image(self) -> None:
        if self.pixmap is None or self.pixmap.isNull():
            self.image_rect = QRectF(0, 0, self.width(), self.height())
        else:
            scaled = self.pixmap.size().scaled(self.size(), Qt.KeepAspectRatio)
            left = (self.width() - scaled.width()) / 2.0
            top = (self.height() - scaled.height()) / 2.0
            self.image_rect = QRectF(left, top, scaled.width(), scaled.height())
        self.controller.set_surface_size(self.image_rect.width(), self.image_rect.height())

    def _to_surface(self, pos) -> QPointF:
        return QPointF(pos.x() - self.image_rect.left(), pos.y() - self.image_rect.top())

    def _changed(self) -> None:
        self.update()
        if self.on_zones_changed is not None:
            self.on_zones_changed()

    def resizeEvent(self, event) -> None:
        self._layout_image()
        super().resizeEvent(event)

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        point = self._to_surface(event.pos())
        self.controller.pointer_down(point.x(), point.y())
        self.setCursor(QCursor(QT_CURSORS[self.controller.cursor_hint()]))
        self._changed()

    def mouseMoveEvent(self, event) -> None:
        point = self._to_surface(event.pos())
        if self.controller.state != STATE_IDLE:
            if self.controller.pointer_move(point.x(), point.y()):
                if self.controller.state == STATE_IDLE:
                    # left the image mid-gesture
                    self._changed()
                else:
                    self.update()
        self.setCursor(QCursor(QT_CURSORS[self.controller.cursor_hint(point.x(), point.y())]))

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        point = self._to_surface(event.pos())
        self.controller.pointer_up(point.x(), point.y())
        self._changed()

    def leaveEvent(self, event) -> None:
        self.controller.pointer_leave()
        self.unsetCursor()
        self._changed()
        super().leaveEvent(event)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor("#2b2b2b"))

        if self.pixmap is not None and not self.pixmap.isNull():
            painter.drawPixmap(self.image_rect, self.pixmap, QRectF(self.pixmap.rect()))
        else:
            painter.setPen(QColor("#cccccc"))
            painter.drawText(self.rect(), Qt.AlignCenter, "Image failed to load")

        painter.translate(self.image_rect.topLeft())
        selected_id = self.controller.selected_id
        settings = self.controller.settings

        for zone in self.controller.zones:
            self._paint_zone(painter, zone, zone.id == selected_id)

        if selected_id is not None and settings.show_handles:
            zone = self.controller.selected_zone
            if zone is not None:
                self._paint_handles(painter, zone)

        provisional = self.controller.provisional
        if provisional is not None:
            painter.setPen(QPen(ZONE_OUTLINE, 1.5, Qt.DashLine))
            painter.setBrush(QBrush(ZONE_FILL))
            painter.drawRect(QRectF(provisional.x, provisional.y, provisional.width, provisional.height).normalized())

        painter.end()

    def _paint_zone(self, painter: QPainter, zone, selected: bool) -> None:
        cx, cy = zone.center
        painter.save()
        painter.translate(cx, cy)
        painter.rotate(zone.rotation)
        painter.setPen(QPen(SELECTED_OUTLINE if selected else ZONE_OUTLINE, 2.0))
        painter.setBrush(QBrush(ZONE_FILL))
        rect = QRectF(-zone.width / 2.0, -zone.height / 2.0, zone.width, zone.height)
        painter.drawRect(rect)
        painter.drawText(rect, Qt.AlignCenter, f"blur {zone.blur_amount}")
        painter.restore()

    def _paint_handles(self, painter: QPainter, zone) -> None:
        size = self.controller.settings.handle_size
        positions = handle_positions(zone, self.controller.settings.rotation_handle_offset)
        painter.save()
        painter.setPen(QPen(SELECTED_OUTLINE, 1.5))
        painter.setBrush(QBrush(HANDLE_FILL))
        for name, (hx, hy) in positions.items():
            if name == HANDLE_ROTATION:
                # knob only, its hit box is larger
                painter.drawEllipse(QPointF(hx, hy), size * 0.75, size * 0.75)
            else:
                painter.drawRect(QRectF(*handle_box((hx, hy), size)))
        painter.restore()


class BlurEditorWindow(QMainWindow):
    def __init__(self, controller: BlurEditorController, image_path: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle(f"Blur Zones - {controller.canonical_key}")
        self.resize(1200, 800)

        self.controller = controller
        self._syncing = False

        pixmap = self._load_pixmap(image_path)
        self._build_ui(pixmap)
        self._connect_signals()
        self.controller.load()
        self.refresh_zone_list()

    def _load_pixmap(self, image_path: Optional[Path]) -> Optional[QPixmap]:
        if image_path is None:
            self.controller.mark_image_failed()
            return None
        try:
            with Image.open(image_path) as image:
                self.controller.set_natural_size(*image.size)
                buffer = BytesIO()
                image.convert("RGBA").save(buffer, format="PNG")
        except OSError:
            self.controller.mark_image_failed()
            return None

        pixmap = QPixmap()
        if not pixmap.loadFromData(buffer.getvalue(), "PNG"):
            self.controller.mark_image_failed()
            return None
        return pixmap

    def _build_ui(self, pixmap: Optional[QPixmap]) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        root = QHBoxLayout(central)

        self.canvas = ZoneCanvas(self.controller, pixmap, self)
        self.canvas.on_zones_changed = self.refresh_zone_list

        controls_col = QVBoxLayout()
        self.zones_list = QListWidget()

        self.spin_blur = QSpinBox()
        self.spin_blur.setRange(MIN_BLUR_AMOUNT, MAX_BLUR_AMOUNT)
        self.spin_blur.setSuffix(" px")

        self.spin_rotation = QDoubleSpinBox()
        self.spin_rotation.setRange(0.0, 359.9)
        self.spin_rotation.setDecimals(1)
        self.spin_rotation.setWrapping(True)
        self.spin_rotation.setSuffix(" °")

        self.btn_add_zone = QPushButton("Add Zone")
        self.btn_remove_zone = QPushButton("Remove Selected")
        self.btn_save = QPushButton("Save")
        self.label_status = QLabel("")
        self.label_status.setWordWrap(True)

        controls_col.addWidget(QLabel("Zones"))
        controls_col.addWidget(self.zones_list)
        controls_col.addWidget(QLabel("Blur amount"))
        controls_col.addWidget(self.spin_blur)
        controls_col.addWidget(QLabel("Rotation"))
        controls_col.addWidget(self.spin_rotation)
        controls_col.addWidget(self.btn_add_zone)
        controls_col.addWidget(self.btn_remove_zone)
        controls_col.addWidget(self.btn_save)
        controls_col.addWidget(self.label_status)

        root.addWidget(self.canvas, stretch=3)
        root.addLayout(controls_col, stretch=1)

    def _connect_signals(self) -> None:
        self.zones_list.currentRowChanged.connect(self.on_zone_selected)
        self.spin_blur.valueChanged.connect(self.on_blur_changed)
        self.spin_rotation.valueChanged.connect(self.on_rotation_changed)
        self.btn_add_zone.clicked.connect(self.add_zone)
        self.btn_remove_zone.clicked.connect(self.remove_selected)
        self.btn_save.clicked.connect(self.save)

    def refresh_zone_list(self) -> None:
        self._syncing = True
        self.zones_list.clear()
        selected_row = -1
        for index, zone in enumerate(self.controller.zones):
            self.zones_list.addItem(
                f"Zone {index + 1}: {zone.width:.0f}x{zone.height:.0f}, blur {zone.blur_amount}, {zone.rotation:g}°"
            )
            if zone.id == self.controller.selected_id:
                selected_row = index
        self.zones_list.setCurrentRow(selected_row)

        zone = self.controller.selected_zone
        self.spin_blur.setEnabled(zone is not None)
        self.spin_rotation.setEnabled(zone is not None)
        self.btn_remove_zone.setEnabled(zone is not None)
        if zone is not None:
            self.spin_blur.setValue(zone.blur_amount)
            self.spin_rotation.setValue(zone.rotation)
        self._syncing = False
        self._show_status()

    def _show_status(self) -> None:
        event = self.controller.diagnostics.last()
        self.label_status.setText(event.describe() if event else "")

    def on_zone_selected(self, row: int) -> None:
        if self._syncing:
            return
        self.controller.select(row if row >= 0 else None)
        self.refresh_zone_list()
        self.canvas.update()

    def on_blur_changed(self, value: int) -> None:
        if self._syncing or self.controller.selected_id is None:
            return
        self.controller.set_blur_amount(self.controller.selected_id, value)
        self.refresh_zone_list()
        self.canvas.update()

    def on_rotation_changed(self, value: float) -> None:
        if self._syncing or self.controller.selected_id is None:
            return
        self.controller.set_rotation(self.controller.selected_id, value)
        self.refresh_zone_list()
        self.canvas.update()

    def add_zone(self) -> None:
        self.controller.add_centered_zone()
        self.refresh_zone_list()
        self.canvas.update()

    def remove_selected(self) -> None:
        if self.controller.selected_id is None:
            return
        self.controller.remove_zone(self.controller.selected_id)
        self.refresh_zone_list()
        self.canvas.update()

    def save(self) -> None:
        try:
            saved = self.controller.save()
        except OSError as exc:
            QMessageBox.warning(self, "Save failed", str(exc))
            return
        self._show_status()
        QMessageBox.information(self, "Saved", f"Saved {len(saved)} blur zone(s)")

    def closeEvent(self, event) -> None:
        self.controller.close()
        super().closeEvent(event)
