"""
User-facing message texts shared by the window and its panels.
"""
from artifacteditor.errors import ArtifactError, ValidationError
from artifacteditor.model.assets import LayerSlot


def upload_error_message(error: ArtifactError, slot: LayerSlot) -> tuple[str, str]:
    """Title and text of the warning shown when a layer cannot be set."""
    title = "3D Layer" if slot is LayerSlot.THREE_D else "2D Layer"
    if isinstance(error, ValidationError) and slot is LayerSlot.THREE_D:
        return title, f"{error}\n\nOnly .glb or .gltf files are supported."
    return title, str(error)
