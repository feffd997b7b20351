"""
3D Scene Loading & Normalization (PyVista Adapter)
==================================================
This module loads glb/gltf containers and places them in a canonical frame.

Why is this file needed?
------------------------
1. Consistency: Source models come in wildly different sizes and origins.
   Every scene is centered on its bounding box and given the same uniform
   scale so it previews inside a predictable volume.
2. Safety: A container that fails to load is reported as a SceneLoadError and
   never reaches normalization half-loaded.

The placement is stored next to the geometry (like an actor transform), and
the bounding box is always measured on the untouched geometry. Normalizing
twice therefore gives the same result and the scale never compounds.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Union

import numpy as np
import numpy.typing as npt
import pyvista as pv

from artifacteditor.config import NORMALIZED_SCALE
from artifacteditor.errors import SceneLoadError
from artifacteditor.model.composite import Transform, Vector3

logger = logging.getLogger(__name__)

SceneData = Union[pv.DataSet, pv.MultiBlock]


def iter_datasets(scene: SceneData) -> Iterator[pv.DataSet]:
    """Yields every leaf dataset of a (possibly nested) scene graph."""
    if isinstance(scene, pv.MultiBlock):
        for block in scene:
            if block is None:
                continue
            yield from iter_datasets(block)
    else:
        yield scene


@dataclass(frozen=True)
class ActorPlacement:
    """Origin, position, orientation (degrees) and scale of every actor of a scene."""
    origin: Vector3
    position: Vector3
    orientation: Vector3
    scale: Vector3


@dataclass
class LoadedScene:
    """A loaded scene graph plus its placement in the preview frame."""
    data: SceneData
    source: str = ""
    position: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    scale: float = 1.0
    transform: Transform = field(default_factory=Transform)

    @property
    def n_points(self) -> int:
        return sum(ds.n_points for ds in iter_datasets(self.data))

    def raw_bounds(self) -> npt.NDArray[np.float64]:
        """
        Axis-aligned box of the untransformed geometry.

        Returns:
            (2, 3) array: [[xmin, ymin, zmin], [xmax, ymax, zmax]].

        Raises:
            SceneLoadError: If the scene has no points.
        """
        lows, highs = [], []
        for ds in iter_datasets(self.data):
            if ds.n_points == 0:
                continue
            b = ds.bounds
            lows.append((b[0], b[2], b[4]))
            highs.append((b[1], b[3], b[5]))

        if not lows:
            raise SceneLoadError(f"Scene '{self.source}' contains no geometry.")

        return np.array([np.min(lows, axis=0), np.max(highs, axis=0)], dtype=np.float64)

    def world_bounds(self) -> npt.NDArray[np.float64]:
        """Box after normalization (scale then translate), before the edit transform."""
        return self.raw_bounds() * self.scale + self.position

    def placement(self) -> ActorPlacement:
        """
        Actor placement for the normalized scene with its edit transform on top.

        A point p ends up at
            transform.position + R(transform.rotation) * (transform.scale * (scale * p + position))
        VTK actors rotate and scale about their origin, so the origin is put on
        the pre-normalization center and the rotation angles (degrees) pass
        through unchanged.
        """
        origin = -self.position / self.scale if self.scale else np.zeros(3)
        t = self.transform
        return ActorPlacement(
            origin=tuple(origin.tolist()),
            position=tuple((np.asarray(t.position) - origin).tolist()),
            orientation=t.rotation,
            scale=tuple((np.asarray(t.scale) * self.scale).tolist()),
        )


class ModelNormalizer:
    def __init__(self, scale: float = NORMALIZED_SCALE) -> None:
        self.scale = scale

    @staticmethod
    def load_scene(path: str) -> LoadedScene:
        """
        Reads a glb/gltf container.

        Raises:
            SceneLoadError: If the reader fails or the scene is empty.
        """
        logger.info(f"Loading 3D scene from: {path}")
        try:
            data = pv.read(path)
        except Exception as e:
            logger.error(f"Failed to load 3D scene '{path}': {e}")
            raise SceneLoadError(f"Could not load 3D model '{path}': {e}") from e

        if data is None:
            raise SceneLoadError(f"Could not load 3D model '{path}'.")

        scene = LoadedScene(data=data, source=path)
        if scene.n_points == 0:
            logger.error(f"3D scene '{path}' loaded without any geometry.")
            raise SceneLoadError(f"3D model '{path}' contains no geometry.")

        logger.debug(f"Loaded scene with {scene.n_points} points.")
        return scene

    def normalize(self, scene: LoadedScene) -> LoadedScene:
        """
        Centers the scene on its bounding box and applies the fixed scale.

        Places the scene so that world = scale * (p - center). Returns the same
        scene object.
        """
        bounds = scene.raw_bounds()
        center = bounds.mean(axis=0)

        scene.scale = self.scale
        scene.position = -center * self.scale

        logger.debug(f"Normalized '{scene.source}': center={center.tolist()}, scale={self.scale}")
        return scene

    def load_normalized(self, path: str) -> LoadedScene:
        return self.normalize(self.load_scene(path))
