"""
Configuration & Constants
=========================
This module serves as the central registry for backend endpoints and global
constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded URLs and limits scattered throughout
   the code.
2. Deployment: The backend location and timeout can be overridden through
   environment variables without touching the code.

Exports:
    BACKEND_URL (str): Base URL of the draft/publish backend.
    REQUEST_TIMEOUT (float): Timeout in seconds for backend requests.
    LOG_LEVEL (str): Level name for the package logger.
    LOG_FILE (str | None): Optional log file path.
"""
import os
from typing import Optional

# --- Backend ---
BACKEND_URL: str = os.environ.get("ARTIFACT_BACKEND_URL", "http://localhost:5000").rstrip("/")
REQUEST_TIMEOUT: float = float(os.environ.get("ARTIFACT_REQUEST_TIMEOUT", "30"))

# --- Layer formats ---
# The validator whitelist is authoritative. The picker list still advertises
# fbx, which the validator rejects.
MODEL_EXTENSIONS: frozenset[str] = frozenset({"glb", "gltf"})
PICKER_MODEL_EXTENSIONS: tuple[str, ...] = ("glb", "gltf", "fbx")
PICKER_IMAGE_EXTENSIONS: tuple[str, ...] = ("png", "jpg", "jpeg", "gif", "bmp", "webp")

# --- Normalization & preview ---
NORMALIZED_SCALE: float = 0.8
CAMERA_POSITION: tuple[float, float, float] = (0.0, 0.0, 3.0)
CAMERA_VIEW_ANGLE: float = 50.0

# --- Logging ---
LOG_LEVEL: str = os.environ.get("ARTIFACT_LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.environ.get("ARTIFACT_LOG_FILE") or None
