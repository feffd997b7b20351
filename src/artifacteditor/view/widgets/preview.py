"""
AR Preview Widget (PyVista Wrapper)
Shows the trigger image as a textured plane with the normalized model on top.
"""
from __future__ import annotations

import logging
from typing import Optional

import pyvista as pv
from pyvistaqt import QtInteractor
from PySide6.QtWidgets import QWidget, QVBoxLayout

from artifacteditor.config import CAMERA_POSITION, CAMERA_VIEW_ANGLE
from artifacteditor.controller.normalizer import LoadedScene, iter_datasets

logger = logging.getLogger(__name__)

TRIGGER_HEIGHT = 2.0


class PreviewWidget(QWidget):
    def __init__(self, parent: Optional[QWidget] = None, interactive: bool = True) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._trigger_actor: Optional[pv.Actor] = None
        self._model_actors: list[pv.Actor] = []
        self._interactive = interactive

        self._init_plotter()

    def _init_plotter(self) -> None:
        self.plotter.set_background("black")
        self.plotter.add_light(pv.Light(position=(3, 3, 3), light_type="scene light"))
        if not self._interactive:
            self.plotter.disable()
        self._reset_camera()

    def _reset_camera(self) -> None:
        camera = self.plotter.camera
        camera.position = CAMERA_POSITION
        camera.focal_point = (0.0, 0.0, 0.0)
        camera.up = (0.0, 1.0, 0.0)
        camera.view_angle = CAMERA_VIEW_ANGLE

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_trigger_image(self, image_path: Optional[str], render: bool = True) -> None:
        """Replaces the 2D layer. None clears it."""
        if self._trigger_actor is not None:
            self.plotter.remove_actor(self._trigger_actor)
            self._trigger_actor = None

        if image_path:
            try:
                texture = pv.read_texture(image_path)
                width, height = texture.dimensions[:2]
                aspect = width / height if height else 1.0
                plane = pv.Plane(
                    center=(0.0, 0.0, 0.0),
                    direction=(0.0, 0.0, 1.0),
                    i_size=TRIGGER_HEIGHT * aspect,
                    j_size=TRIGGER_HEIGHT,
                )
                self._trigger_actor = self.plotter.add_mesh(plane, texture=texture, lighting=False)
            except Exception as e:
                logger.error(f"Could not display trigger image '{image_path}': {e}")

        if render:
            self.plotter.render()

    def set_model(self, scene: Optional[LoadedScene], render: bool = True) -> None:
        """Replaces the 3D layer, applying the normalized placement and edit transform."""
        for actor in self._model_actors:
            self.plotter.remove_actor(actor)
        self._model_actors = []

        if scene is not None:
            placement = scene.placement()
            for dataset in iter_datasets(scene.data):
                if dataset.n_points == 0:
                    continue
                actor = self.plotter.add_mesh(dataset, color="lightgray", smooth_shading=True)
                actor.origin = placement.origin
                actor.scale = placement.scale
                actor.orientation = placement.orientation
                actor.position = placement.position
                self._model_actors.append(actor)

        if render:
            self.plotter.render()

    def show_composite(self, image_path: Optional[str], scene: Optional[LoadedScene]) -> None:
        self.set_trigger_image(image_path, render=False)
        self.set_model(scene, render=False)
        self._reset_camera()
        self.plotter.render()

    def clear(self) -> None:
        self.show_composite(None, None)

    def close_plotter(self) -> None:
        self.plotter.close()
