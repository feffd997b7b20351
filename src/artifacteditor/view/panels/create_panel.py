"""
Create Panel
Layer pickers for the trigger image and the 3D model.
"""
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QPushButton, QGroupBox, QFileDialog
)
from PySide6.QtCore import Signal, Qt

from artifacteditor.model.assets import LayerSlot, picker_filter
from artifacteditor.model.composite import ArtifactComposite


class CreatePanel(QWidget):
    # (path, slot)
    file_picked = Signal(str, object)

    def __init__(self) -> None:
        super().__init__()
        layout = QVBoxLayout(self)

        grp = QGroupBox("Create")
        grp_layout = QVBoxLayout(grp)

        self.btn_2d = QPushButton("🖼 2D Layer")
        self.btn_2d.setMinimumHeight(40)
        self.btn_2d.clicked.connect(lambda: self._pick(LayerSlot.TWO_D))
        grp_layout.addWidget(self.btn_2d)

        self.lbl_2d = QLabel("No image")
        self.lbl_2d.setStyleSheet("color: gray;")
        grp_layout.addWidget(self.lbl_2d)

        self.btn_3d = QPushButton("🧊 3D Layer")
        self.btn_3d.setMinimumHeight(40)
        self.btn_3d.clicked.connect(lambda: self._pick(LayerSlot.THREE_D))
        grp_layout.addWidget(self.btn_3d)

        self.lbl_3d = QLabel("No model")
        self.lbl_3d.setStyleSheet("color: gray;")
        grp_layout.addWidget(self.lbl_3d)

        layout.addWidget(grp)

        self.lbl_status = QLabel("")
        self.lbl_status.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.lbl_status)

        layout.addStretch()

    def _pick(self, slot: LayerSlot) -> None:
        title = "Select Trigger Image" if slot is LayerSlot.TWO_D else "Select 3D Model"
        fname, _ = QFileDialog.getOpenFileName(self, title, "", picker_filter(slot))
        if fname:
            self.file_picked.emit(fname, slot)

    def load_from_composite(self, composite: ArtifactComposite) -> None:
        """Refresh labels from the current composite."""
        if composite.asset_2d is not None:
            self.lbl_2d.setText(composite.asset_2d.filename)
            self.lbl_2d.setStyleSheet("color: green;")
        else:
            self.lbl_2d.setText("No image")
            self.lbl_2d.setStyleSheet("color: gray;")

        if composite.asset_3d is not None:
            self.lbl_3d.setText(composite.asset_3d.filename)
            self.lbl_3d.setStyleSheet("color: green;")
        else:
            self.lbl_3d.setText("No model")
            self.lbl_3d.setStyleSheet("color: gray;")

        if composite.is_complete():
            self.lbl_status.setText("Ready to save or publish ✓")
            self.lbl_status.setStyleSheet("color: green; font-weight: bold;")
        else:
            self.lbl_status.setText("")
