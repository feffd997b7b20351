"""
Saved Drafts
Read-only views of composites persisted on the backend.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

from artifacteditor.model.composite import Transform, Vector3


def _vector_field(data: Dict[str, Any], key: str, default: Vector3) -> Vector3:
    # The backend may echo the multipart field verbatim (a JSON string)
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        value = json.loads(value)
    return value


@dataclass(frozen=True)
class Draft:
    id: str
    image_url: str
    model_url: str
    transform: Transform = field(default_factory=Transform)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Draft:
        """
        Builds a draft from the backend payload.

        Raises:
            KeyError: If 'id', 'imageUrl' or 'modelUrl' is missing.
            ValueError: If a transform field is not a 3-component array.
        """
        defaults = Transform()
        transform = Transform(
            position=_vector_field(data, "position", defaults.position),
            rotation=_vector_field(data, "rotation", defaults.rotation),
            scale=_vector_field(data, "scale", defaults.scale),
        )
        return cls(
            id=str(data["id"]),
            image_url=data["imageUrl"],
            model_url=data["modelUrl"],
            transform=transform,
        )


@dataclass(frozen=True)
class PublishResult:
    """Public descriptor reference of a published artifact."""
    json_url: str
