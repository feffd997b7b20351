from artifacteditor.errors import SceneLoadError, ValidationError
from artifacteditor.model.assets import UNSUPPORTED_3D_FORMAT, LayerSlot
from artifacteditor.view.messages import upload_error_message


def test_unsupported_model_format_gets_format_hint():
    title, text = upload_error_message(ValidationError(UNSUPPORTED_3D_FORMAT, "chair.fbx"), LayerSlot.THREE_D)
    assert title == "3D Layer"
    assert "Only .glb or .gltf files are supported." in text


def test_broken_model_has_no_format_hint():
    error = SceneLoadError("Could not load 3D model 'broken.glb': bad header")
    title, text = upload_error_message(error, LayerSlot.THREE_D)
    assert title == "3D Layer"
    assert text == str(error)
    assert ".gltf" not in text


def test_image_error_message():
    title, text = upload_error_message(ValidationError("not an image", "notes.txt"), LayerSlot.TWO_D)
    assert title == "2D Layer"
    assert "supported" not in text
