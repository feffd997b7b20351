import os

import pytest

from artifacteditor.errors import ValidationError
from artifacteditor.model.assets import (
    Asset2D, Asset3D, AssetValidator, DisplayHandle, LayerSlot, file_extension, picker_filter
)


def _write(tmp_path, name, data=b"data"):
    path = tmp_path / name
    path.write_bytes(data)
    return str(path)


@pytest.mark.parametrize("name", ["trigger.png", "photo.JPG", "scan.jpeg", "anim.gif"])
def test_image_accepted_for_2d(tmp_path, name):
    asset = AssetValidator.validate(_write(tmp_path, name), LayerSlot.TWO_D)
    try:
        assert isinstance(asset, Asset2D)
        assert asset.media_type.startswith("image/")
        assert asset.data == b"data"
        assert os.path.exists(asset.handle.path)
    finally:
        asset.handle.revoke()


@pytest.mark.parametrize("name", ["notes.txt", "model.glb", "clip.mp4", "noextension"])
def test_non_image_rejected_for_2d(tmp_path, name):
    with pytest.raises(ValidationError) as exc:
        AssetValidator.validate(_write(tmp_path, name), LayerSlot.TWO_D)
    assert exc.value.reason == "not an image"


@pytest.mark.parametrize("name", ["model.glb", "model.gltf", "MODEL.GLB", "scene.v2.gltf"])
def test_whitelisted_extension_accepted_for_3d(tmp_path, name):
    asset = AssetValidator.validate(_write(tmp_path, name), LayerSlot.THREE_D)
    try:
        assert isinstance(asset, Asset3D)
        assert asset.extension in {"glb", "gltf"}
        assert asset.media_type.startswith("model/gltf")
    finally:
        asset.handle.revoke()


@pytest.mark.parametrize("name", ["model.fbx", "model.obj", "image.png", "model"])
def test_other_extensions_rejected_for_3d(tmp_path, name):
    with pytest.raises(ValidationError) as exc:
        AssetValidator.validate(_write(tmp_path, name), LayerSlot.THREE_D)
    assert exc.value.reason == "unsupported 3D format"


def test_picker_still_advertises_fbx():
    # The picker filter and the validator disagree on fbx; validation wins
    assert "*.fbx" in picker_filter(LayerSlot.THREE_D)
    assert "*.glb" in picker_filter(LayerSlot.THREE_D)
    assert picker_filter(LayerSlot.TWO_D).startswith("Images (")


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ValidationError) as exc:
        AssetValidator.validate(str(tmp_path / "gone.glb"), LayerSlot.THREE_D)
    assert exc.value.reason == "file not found"


def test_file_extension():
    assert file_extension("a/b/Model.GLTF") == "gltf"
    assert file_extension("archive.tar.glb") == "glb"
    assert file_extension("README") == ""


def test_display_handle_revoke_is_idempotent():
    handle = DisplayHandle(b"abc", ".png")
    assert os.path.exists(handle.path)

    handle.revoke()
    handle.revoke()

    assert handle.is_revoked
    assert not os.path.exists(handle.path)


def test_display_handle_single_owner():
    handle = DisplayHandle(b"abc", ".png")
    first, second = object(), object()
    try:
        handle.claim(first)
        handle.claim(first)
        with pytest.raises(ValueError):
            handle.claim(second)
    finally:
        handle.revoke()

    with pytest.raises(ValueError):
        handle.claim(first)
