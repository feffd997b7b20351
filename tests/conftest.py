import pytest
import pyvista as pv
from unittest.mock import MagicMock
from PySide6.QtCore import QCoreApplication

from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.controller.normalizer import LoadedScene, ModelNormalizer
from artifacteditor.model.assets import AssetValidator, LayerSlot


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture(autouse=True)
def downloaded_files():
    """Deletes draft files a test leaves tracked by the gateway."""
    yield
    BackendGateway.cleanup_temp_files()


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "image.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake-png-body")
    return str(path)


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "model.glb"
    path.write_bytes(b"glTF\x02\x00\x00\x00fake-glb-body")
    return str(path)


@pytest.fixture
def asset_2d(image_file):
    asset = AssetValidator.validate(image_file, LayerSlot.TWO_D)
    yield asset
    asset.handle.revoke()


@pytest.fixture
def asset_3d(model_file):
    asset = AssetValidator.validate(model_file, LayerSlot.THREE_D)
    yield asset
    asset.handle.revoke()


class CubeNormalizer(ModelNormalizer):
    """Skips the file reader and hands back an off-center cube."""

    def __init__(self):
        super().__init__()
        self.loaded = []

    def load_scene(self, path):
        self.loaded.append(path)
        return LoadedScene(data=pv.Cube(center=(1.0, 2.0, 3.0)), source=path)


@pytest.fixture
def cube_normalizer():
    return CubeNormalizer()


def make_response(status_code=200, payload=None, content=b""):
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    response.content = content
    return response
