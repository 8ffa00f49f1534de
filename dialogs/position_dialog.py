"""
Position Dialog for PDF Batch Signer.

Numeric entry of the signature anchor (x, y in points from the top-left
corner, 1-based page) for one document or for every selected document.
"""

from __future__ import annotations
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QGridLayout, QGroupBox,
    QLabel, QPushButton, QDoubleSpinBox, QSpinBox, QRadioButton,
    QButtonGroup, QLayout, QWidget,
)

from core.constants import POSITION_SPIN_MAX, PAGE_SPIN_MAX
from core.models import Position


class PositionDialog(QDialog):
    """
    Dialog for entering a signature position.

    After ``exec()`` returns Accepted, read ``get_position()`` and
    ``apply_to_selected()``.
    """

    def __init__(
        self,
        document_name: str,
        position: Optional[Position] = None,
        selected_count: int = 0,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Set Signature Position")
        self.setModal(True)

        self._document_name = document_name
        self._selected_count = selected_count

        self._setup_ui(position or Position())

    def _setup_ui(self, position: Position):
        main_layout = QVBoxLayout(self)
        main_layout.setSizeConstraint(QLayout.SetFixedSize)

        # --- Group: Coordinates ---
        coords_group = QGroupBox("Position (points from top-left)")
        grid = QGridLayout(coords_group)

        self.x_spin = QDoubleSpinBox()
        self.x_spin.setRange(0, POSITION_SPIN_MAX)
        self.x_spin.setDecimals(1)
        self.x_spin.setValue(position.x)

        self.y_spin = QDoubleSpinBox()
        self.y_spin.setRange(0, POSITION_SPIN_MAX)
        self.y_spin.setDecimals(1)
        self.y_spin.setValue(position.y)

        self.page_spin = QSpinBox()
        self.page_spin.setRange(1, PAGE_SPIN_MAX)
        self.page_spin.setValue(position.page)

        grid.addWidget(QLabel("X:"), 0, 0)
        grid.addWidget(self.x_spin, 0, 1)
        grid.addWidget(QLabel("Y:"), 1, 0)
        grid.addWidget(self.y_spin, 1, 1)
        grid.addWidget(QLabel("Page:"), 2, 0)
        grid.addWidget(self.page_spin, 2, 1)

        main_layout.addWidget(coords_group)

        # --- Group: Target ---
        target_group = QGroupBox("Apply To")
        target_layout = QVBoxLayout(target_group)

        self.target_group = QButtonGroup(self)
        self.radio_current = QRadioButton(f"This document ({self._document_name})")
        self.radio_selected = QRadioButton(f"All selected documents ({self._selected_count})")
        self.radio_selected.setEnabled(self._selected_count > 0)
        self.radio_current.setChecked(True)
        self.target_group.addButton(self.radio_current)
        self.target_group.addButton(self.radio_selected)

        target_layout.addWidget(self.radio_current)
        target_layout.addWidget(self.radio_selected)
        main_layout.addWidget(target_group)

        # --- Action Buttons ---
        button_layout = QHBoxLayout()
        button_layout.addStretch()

        ok_button = QPushButton("OK")
        ok_button.setDefault(True)
        ok_button.clicked.connect(self.accept)

        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(self.reject)

        button_layout.addWidget(ok_button)
        button_layout.addWidget(cancel_button)
        main_layout.addLayout(button_layout)

    def get_position(self) -> Position:
        return Position(
            x=self.x_spin.value(),
            y=self.y_spin.value(),
            page=self.page_spin.value(),
        )

    def apply_to_selected(self) -> bool:
        return self.radio_selected.isChecked()
