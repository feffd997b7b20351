"""
Artifact Composite (Data Model)
===============================
The editable pairing of one trigger image and one 3D model plus a spatial
transform.

Why is this file needed?
------------------------
1. Ownership: The composite owns its assets. Replacing or clearing a slot
   revokes the released asset's display copy.
2. Persistence: This object is what gets serialized when a draft is saved
   or an artifact is published.

Classes:
    Transform: Position / rotation / scale triple.
    TransferForm: Serialized composite ready for upload.
    ArtifactComposite: The main container class.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from artifacteditor.errors import IncompleteCompositeError
from artifacteditor.model.assets import Asset2D, Asset3D

logger = logging.getLogger(__name__)

Vector3 = Tuple[float, float, float]


def _as_vector3(values, name: str) -> Vector3:
    vec = tuple(float(v) for v in values)
    if len(vec) != 3:
        raise ValueError(f"'{name}' must have exactly 3 components, got {len(vec)}.")
    return vec


@dataclass(frozen=True)
class Transform:
    position: Vector3 = (0.0, 0.0, 0.0)
    rotation: Vector3 = (0.0, 0.0, 0.0)
    scale: Vector3 = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vector3(self.position, "position"))
        object.__setattr__(self, "rotation", _as_vector3(self.rotation, "rotation"))
        object.__setattr__(self, "scale", _as_vector3(self.scale, "scale"))

    def to_fields(self) -> dict[str, str]:
        """JSON-encoded arrays as sent in the multipart body."""
        return {
            "position": json.dumps(list(self.position)),
            "rotation": json.dumps(list(self.rotation)),
            "scale": json.dumps(list(self.scale)),
        }


@dataclass(frozen=True)
class TransferForm:
    """A complete composite flattened for upload."""
    image: Tuple[str, bytes, str]
    model: Tuple[str, bytes, str]
    position: Vector3
    rotation: Vector3
    scale: Vector3

    def files(self) -> dict[str, Tuple[str, bytes, str]]:
        return {"image": self.image, "model": self.model}

    def transform_fields(self) -> dict[str, str]:
        return Transform(self.position, self.rotation, self.scale).to_fields()


@dataclass
class ArtifactComposite:
    asset_2d: Optional[Asset2D] = None
    asset_3d: Optional[Asset3D] = None
    transform: Transform = field(default_factory=Transform)
    id: Optional[str] = None

    def set_layer_2d(self, asset: Asset2D) -> None:
        """Install the trigger image, releasing any previous one."""
        asset.handle.claim(self)
        previous = self.asset_2d
        self.asset_2d = asset
        if previous is not None and previous.handle is not asset.handle:
            previous.handle.revoke()
        logger.debug(f"2D layer set to '{asset.filename}'.")

    def set_layer_3d(self, asset: Asset3D) -> None:
        """Install the 3D model, releasing any previous one."""
        asset.handle.claim(self)
        previous = self.asset_3d
        self.asset_3d = asset
        if previous is not None and previous.handle is not asset.handle:
            previous.handle.revoke()
        logger.debug(f"3D layer set to '{asset.filename}'.")

    def set_transform(self, transform: Transform) -> None:
        """Replaces the placement of the 3D layer relative to the trigger image."""
        self.transform = transform

    def is_complete(self) -> bool:
        return self.asset_2d is not None and self.asset_3d is not None

    def reset(self) -> None:
        """Discard both layers and restore the default transform."""
        for asset in (self.asset_2d, self.asset_3d):
            if asset is not None:
                asset.handle.revoke()
        self.asset_2d = None
        self.asset_3d = None
        self.transform = Transform()
        self.id = None
        logger.info("Composite has been reset.")

    def to_transfer_form(self) -> TransferForm:
        if not self.is_complete():
            raise IncompleteCompositeError()
        return TransferForm(
            image=(self.asset_2d.filename, self.asset_2d.data, self.asset_2d.media_type),
            model=(self.asset_3d.filename, self.asset_3d.data, self.asset_3d.media_type),
            position=self.transform.position,
            rotation=self.transform.rotation,
            scale=self.transform.scale,
        )
