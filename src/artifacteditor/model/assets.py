"""
Layer Assets & Validation
=========================
This module gates files picked for the 2D and 3D layer slots.

Why is this file needed?
------------------------
1. Validation: It enforces the media-type rule for the trigger image and the
   container-format whitelist for the 3D model.
2. Preview: A validated asset carries a transient local copy (DisplayHandle)
   so the preview can show it before anything is sent to the backend.

Classes:
    LayerSlot: Which slot a file is meant for.
    DisplayHandle: Transient local reference to the asset bytes.
    Asset2D / Asset3D: Immutable validated assets.
    AssetValidator: The gate itself.
"""
from __future__ import annotations

import logging
import mimetypes
import os
import tempfile
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from artifacteditor.config import MODEL_EXTENSIONS, PICKER_IMAGE_EXTENSIONS, PICKER_MODEL_EXTENSIONS
from artifacteditor.errors import ValidationError

logger = logging.getLogger(__name__)

NOT_AN_IMAGE = "not an image"
UNSUPPORTED_3D_FORMAT = "unsupported 3D format"
FILE_NOT_FOUND = "file not found"

MODEL_MEDIA_TYPES: dict[str, str] = {
    "glb": "model/gltf-binary",
    "gltf": "model/gltf+json",
}


class LayerSlot(str, Enum):
    TWO_D = "2d"
    THREE_D = "3d"


class DisplayHandle:
    """
    A private temporary copy of an asset used for live preview.

    A handle belongs to at most one composite at a time. Once revoked the
    copy is gone and the handle cannot be claimed again.
    """

    def __init__(self, data: bytes, suffix: str) -> None:
        unique_name = f"artifact_{uuid.uuid4().hex}{suffix}"
        self.path: str = os.path.join(tempfile.gettempdir(), unique_name)
        with open(self.path, "wb") as f:
            f.write(data)
        self._owner: Optional[int] = None
        self._revoked: bool = False
        logger.debug(f"Created display handle: {self.path}")

    @property
    def is_revoked(self) -> bool:
        return self._revoked

    @property
    def owner(self) -> Optional[int]:
        return self._owner

    def claim(self, owner: object) -> None:
        """Bind the handle to its owning composite."""
        if self._revoked:
            raise ValueError("Display handle has already been revoked.")
        if self._owner is not None and self._owner != id(owner):
            raise ValueError("Display handle is already owned by another composite.")
        self._owner = id(owner)

    def revoke(self) -> None:
        """Delete the local copy. Safe to call more than once."""
        if self._revoked:
            return
        self._revoked = True
        self._owner = None
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
                logger.debug(f"Revoked display handle: {self.path}")
        except OSError as e:
            logger.warning(f"Could not delete display copy '{self.path}': {e}")

    def __repr__(self) -> str:
        state = "revoked" if self._revoked else "live"
        return f"DisplayHandle({self.path!r}, {state})"


@dataclass(frozen=True)
class Asset2D:
    """Validated trigger image."""
    filename: str
    media_type: str
    data: bytes = field(repr=False)
    handle: DisplayHandle = field(compare=False)


@dataclass(frozen=True)
class Asset3D:
    """Validated 3D model container (glb or gltf)."""
    filename: str
    extension: str
    data: bytes = field(repr=False)
    handle: DisplayHandle = field(compare=False)

    @property
    def media_type(self) -> str:
        return MODEL_MEDIA_TYPES[self.extension]


Asset = Union[Asset2D, Asset3D]


def file_extension(filename: str) -> str:
    """Text after the last dot, lower-cased. Empty if there is no dot."""
    name = os.path.basename(filename)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def picker_filter(slot: LayerSlot) -> str:
    """File-dialog filter advertised for a slot."""
    if slot is LayerSlot.TWO_D:
        patterns = " ".join(f"*.{ext}" for ext in PICKER_IMAGE_EXTENSIONS)
        return f"Images ({patterns})"
    patterns = " ".join(f"*.{ext}" for ext in PICKER_MODEL_EXTENSIONS)
    return f"3D Models ({patterns})"


class AssetValidator:
    @staticmethod
    def validate(path: str, slot: LayerSlot) -> Asset:
        """
        Checks a picked file against the rules of its slot.

        Args:
            path: Path of the picked file.
            slot: Target layer slot.

        Returns:
            Asset2D or Asset3D with a live DisplayHandle.

        Raises:
            ValidationError: With reason "not an image", "unsupported 3D format"
                or "file not found".
        """
        filename = os.path.basename(path)

        if slot is LayerSlot.TWO_D:
            media_type, _ = mimetypes.guess_type(filename)
            if not media_type or not media_type.startswith("image/"):
                logger.warning(f"Rejected 2D layer '{filename}': {NOT_AN_IMAGE}")
                raise ValidationError(NOT_AN_IMAGE, filename)
            data = AssetValidator._read(path, filename)
            handle = DisplayHandle(data, os.path.splitext(filename)[1])
            logger.info(f"Accepted 2D layer '{filename}' ({media_type}).")
            return Asset2D(filename=filename, media_type=media_type, data=data, handle=handle)

        ext = file_extension(filename)
        if ext not in MODEL_EXTENSIONS:
            logger.warning(f"Rejected 3D layer '{filename}': {UNSUPPORTED_3D_FORMAT}")
            raise ValidationError(UNSUPPORTED_3D_FORMAT, filename)
        data = AssetValidator._read(path, filename)
        handle = DisplayHandle(data, f".{ext}")
        logger.info(f"Accepted 3D layer '{filename}'.")
        return Asset3D(filename=filename, extension=ext, data=data, handle=handle)

    @staticmethod
    def _read(path: str, filename: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Could not read '{path}': {e}")
            raise ValidationError(FILE_NOT_FOUND, filename) from e
