"""
Saved Drafts Panel
==================
Read-only grid of the drafts returned by the backend.

Each cell downloads its image and model on a GatewayWorker, then shows them
in a small preview with the same normalization as the live composite plus the
draft's own transform. When a new list arrives, the previous list's files are
deleted and downloads still running for it are dropped on arrival.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QScrollArea, QGridLayout, QFrame
)
from PySide6.QtCore import Qt

from artifacteditor.controller.downloads import DraftDownloads
from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.controller.normalizer import ModelNormalizer
from artifacteditor.controller.workers import GatewayWorker
from artifacteditor.errors import ArtifactError
from artifacteditor.model.drafts import Draft
from artifacteditor.view.widgets.preview import PreviewWidget

logger = logging.getLogger(__name__)

GRID_COLUMNS = 3


class DraftCell(QFrame):
    def __init__(self, draft: Draft, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.draft = draft
        self.setFrameShape(QFrame.StyledPanel)
        self.setMinimumSize(260, 260)

        layout = QVBoxLayout(self)
        self.preview = PreviewWidget(self, interactive=False)
        layout.addWidget(self.preview, stretch=1)

        self.lbl_status = QLabel(f"Draft {draft.id}: loading...")
        self.lbl_status.setAlignment(Qt.AlignCenter)
        self.lbl_status.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_status)

    def show_assets(self, image_path: str, model_path: str, normalizer: ModelNormalizer) -> None:
        try:
            scene = normalizer.load_normalized(model_path)
        except ArtifactError as e:
            self.show_error(str(e))
            self.preview.show_composite(image_path, None)
            return
        scene.transform = self.draft.transform
        self.preview.show_composite(image_path, scene)
        self.lbl_status.setText(f"Draft {self.draft.id}")

    def show_error(self, message: str) -> None:
        self.lbl_status.setText(f"Draft {self.draft.id}: {message}")
        self.lbl_status.setStyleSheet("color: red;")

    def release(self) -> None:
        self.preview.close_plotter()


class DraftsPanel(QWidget):
    def __init__(self, gateway: BackendGateway, normalizer: ModelNormalizer) -> None:
        super().__init__()
        self.downloads = DraftDownloads(gateway)
        self.normalizer = normalizer

        self._cells: list[DraftCell] = []
        self._workers: list[GatewayWorker] = []

        layout = QVBoxLayout(self)

        title = QLabel("Saved Drafts")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self.lbl_empty = QLabel("No drafts saved")
        self.lbl_empty.setAlignment(Qt.AlignCenter)
        self.lbl_empty.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_empty)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        container = QWidget()
        self.grid = QGridLayout(container)
        scroll.setWidget(container)
        layout.addWidget(scroll, stretch=1)

    def set_loading(self) -> None:
        self.lbl_empty.setText("Loading drafts...")
        self.lbl_empty.show()

    def show_error(self, message: str) -> None:
        self.lbl_empty.setText(f"Could not load drafts: {message}")
        self.lbl_empty.show()

    def show_drafts(self, drafts: list[Draft]) -> None:
        self._clear_cells()
        generation = self.downloads.new_round()

        if not drafts:
            self.lbl_empty.setText("No drafts saved")
            self.lbl_empty.show()
            return
        self.lbl_empty.hide()

        for i, draft in enumerate(drafts):
            cell = DraftCell(draft)
            self.grid.addWidget(cell, i // GRID_COLUMNS, i % GRID_COLUMNS)
            self._cells.append(cell)
            self._fetch(cell, generation)

    def _fetch(self, cell: DraftCell, generation: int) -> None:
        worker = GatewayWorker((generation, cell.draft.id), self.downloads.fetch, cell.draft)
        worker.succeeded.connect(
            lambda ticket, paths: self._on_fetched(cell, ticket[0], paths)
        )
        worker.failed.connect(
            lambda ticket, error: self._on_fetch_failed(cell, ticket[0], error)
        )
        worker.finished.connect(lambda: self._release_worker(worker))
        self._workers.append(worker)
        worker.start()

    def _on_fetched(self, cell: DraftCell, generation: int, paths: tuple[str, str]) -> None:
        if not self.downloads.accept(generation, paths):
            return
        image_path, model_path = paths
        cell.show_assets(image_path, model_path, self.normalizer)

    def _on_fetch_failed(self, cell: DraftCell, generation: int, error: Exception) -> None:
        if generation != self.downloads.generation:
            return
        logger.warning(f"Could not fetch draft {cell.draft.id}: {error}")
        cell.show_error(str(error))

    def _release_worker(self, worker: GatewayWorker) -> None:
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def _clear_cells(self) -> None:
        for cell in self._cells:
            self.grid.removeWidget(cell)
            cell.release()
            cell.deleteLater()
        self._cells = []

    def shutdown(self) -> None:
        for worker in list(self._workers):
            worker.wait()
        self._clear_cells()
        self.downloads.release_all()
