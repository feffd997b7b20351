"""
Main Application Window
=======================
The primary GUI container that holds the Toolbar, the icon sidebar and the
two workspaces (compose / saved drafts).

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects toolbar and sidebar actions to the EditorController
   and reflects controller signals back into the widgets.
"""
from __future__ import annotations

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QStackedWidget,
    QToolBar, QMessageBox, QLabel, QToolButton, QButtonGroup
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from artifacteditor.controller.editor import EditorController
from artifacteditor.errors import ArtifactError, IncompleteCompositeError
from artifacteditor.model.assets import LayerSlot
from artifacteditor.model.session import EditorMode, EditorSession, RequestKind
from artifacteditor.view.panels.create_panel import CreatePanel
from artifacteditor.view.panels.drafts_panel import DraftsPanel
from artifacteditor.view.messages import upload_error_message
from artifacteditor.view.widgets.preview import PreviewWidget


VISIBLE_APP_NAME = "ARtifact"

COMPOSE_PAGE = 0
DRAFTS_PAGE = 1


class MainWindow(QMainWindow):
    def __init__(self, controller: EditorController) -> None:
        super().__init__()
        self.controller = controller

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)

        main_layout = QHBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # --- 1. ICON SIDEBAR ---
        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setContentsMargins(4, 8, 4, 8)

        self.btn_create = QToolButton()
        self.btn_create.setText("➕")
        self.btn_create.setToolTip("Create")
        self.btn_create.setCheckable(True)
        self.btn_create.setChecked(True)

        self.btn_drafts = QToolButton()
        self.btn_drafts.setText("⬛")
        self.btn_drafts.setToolTip("Saved drafts")
        self.btn_drafts.setCheckable(True)

        self.sidebar_group = QButtonGroup(self)
        self.sidebar_group.setExclusive(True)
        self.sidebar_group.addButton(self.btn_create)
        self.sidebar_group.addButton(self.btn_drafts)

        sidebar_layout.addWidget(self.btn_create)
        sidebar_layout.addWidget(self.btn_drafts)
        sidebar_layout.addStretch()
        main_layout.addWidget(sidebar)

        # --- 2. WORKSPACES ---
        self.pages = QStackedWidget()
        main_layout.addWidget(self.pages, stretch=1)

        # Compose page: create panel + live preview
        splitter = QSplitter(Qt.Horizontal)
        self.create_panel = CreatePanel()
        self.preview = PreviewWidget()
        splitter.addWidget(self.create_panel)
        splitter.addWidget(self.preview)
        splitter.setSizes([300, 1100])
        self.pages.addWidget(splitter)  # Index 0

        # Drafts page
        self.drafts_panel = DraftsPanel(controller.gateway, controller.normalizer)
        self.pages.addWidget(self.drafts_panel)  # Index 1

        # --- ACTIONS & TOOLBAR ---
        self._create_actions()
        self._create_toolbar()

        # --- SIGNAL CONNECTIONS ---
        self.btn_create.clicked.connect(self.on_select_create)
        self.btn_drafts.clicked.connect(self.on_select_drafts)
        self.create_panel.file_picked.connect(self.on_file_picked)

        self.controller.session_changed.connect(self.on_session_changed)
        self.controller.scene_changed.connect(self.on_scene_changed)
        self.controller.busy_changed.connect(self.on_busy_changed)
        self.controller.draft_saved.connect(self.on_draft_saved)
        self.controller.published.connect(self.on_published)
        self.controller.drafts_loaded.connect(self.drafts_panel.show_drafts)
        self.controller.request_failed.connect(self.on_request_failed)
        self.controller.stale_result.connect(self.on_stale_result)

        self.on_session_changed(self.controller.session)

    def _create_actions(self) -> None:
        self.act_publish = QAction("Publish", self)
        self.act_publish.triggered.connect(self.on_publish)

        self.act_save = QAction("Save", self)
        self.act_save.setShortcut("Ctrl+S")
        self.act_save.triggered.connect(self.on_save)

        self.act_reset = QAction("Reset", self)
        self.act_reset.triggered.connect(self.on_reset)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        logo = QLabel(f"  {VISIBLE_APP_NAME}  ")
        logo.setStyleSheet("font-weight: bold; font-size: 16px;")
        toolbar.addWidget(logo)
        toolbar.addSeparator()
        toolbar.addAction(self.act_publish)
        toolbar.addAction(self.act_save)
        toolbar.addAction(self.act_reset)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

    # --- SLOTS: USER ACTIONS ---

    def on_select_create(self) -> None:
        self.controller.select_create()

    def on_select_drafts(self) -> None:
        self.drafts_panel.set_loading()
        self.controller.select_drafts()

    def on_file_picked(self, path: str, slot: LayerSlot) -> None:
        try:
            self.controller.upload(path, slot)
        except ArtifactError as e:
            QMessageBox.warning(self, *upload_error_message(e, slot))
            return

        if slot is LayerSlot.TWO_D:
            asset = self.controller.session.composite.asset_2d
            self.preview.set_trigger_image(asset.handle.path)

    def on_save(self) -> None:
        try:
            self.controller.save_draft_async()
        except IncompleteCompositeError:
            QMessageBox.warning(self, "Save", "Please add 2D and 3D layers before saving")
        except ArtifactError as e:
            QMessageBox.warning(self, "Save", str(e))

    def on_publish(self) -> None:
        try:
            self.controller.publish_async()
        except IncompleteCompositeError:
            QMessageBox.warning(self, "Publish", "Please add 2D and 3D layers")
        except ArtifactError as e:
            QMessageBox.warning(self, "Publish", str(e))

    def on_reset(self) -> None:
        try:
            self.controller.reset()
        except ArtifactError as e:
            QMessageBox.warning(self, "Reset", str(e))
            return
        self.preview.clear()

    # --- SLOTS: CONTROLLER ---

    def on_session_changed(self, session: EditorSession) -> None:
        composing = session.mode is EditorMode.COMPOSE
        self.pages.setCurrentIndex(COMPOSE_PAGE if composing else DRAFTS_PAGE)
        self.btn_create.setChecked(composing)
        self.btn_drafts.setChecked(not composing)

        self.act_reset.setEnabled(composing)
        self._update_transfer_actions(session)

        self.create_panel.load_from_composite(session.composite)
        if session.composite.asset_2d is None:
            self.preview.set_trigger_image(None)

    def on_scene_changed(self, scene) -> None:
        self.preview.set_model(scene)

    def on_busy_changed(self, kind: str, busy: bool) -> None:
        if kind != RequestKind.LIST.value:
            self._update_transfer_actions(self.controller.session)

    def _update_transfer_actions(self, session: EditorSession) -> None:
        # Save and publish share one guard per composite
        idle = not session.is_transferring()
        self.act_save.setEnabled(idle)
        self.act_publish.setEnabled(idle)

    def on_draft_saved(self) -> None:
        QMessageBox.information(self, "Save", "Draft saved ✔")

    def on_published(self, json_url: str) -> None:
        QMessageBox.information(self, "Publish", f"Published!\n{json_url}")
        self.preview.clear()

    def on_request_failed(self, kind: str, message: str) -> None:
        if kind == RequestKind.LIST.value:
            self.drafts_panel.show_error(message)
            return
        QMessageBox.critical(self, "Error", f"{kind.capitalize()} failed:\n{message}")

    def on_stale_result(self, kind: str, message: str) -> None:
        if kind == RequestKind.LIST.value:
            return
        self.statusBar().showMessage(message, 8000)

    def closeEvent(self, event, /) -> None:
        """Wait for pending requests and clean up temporary files."""
        self.controller.shutdown()
        self.drafts_panel.shutdown()
        self.controller.session.composite.reset()
        self.preview.close_plotter()
        event.accept()
