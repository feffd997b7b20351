import json
import os
from unittest.mock import MagicMock

import pytest
import requests

from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.errors import IncompleteCompositeError, TransportError
from artifacteditor.model.composite import ArtifactComposite
from artifacteditor.model.drafts import Draft

from conftest import make_response


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def gateway(http):
    return BackendGateway(base_url="http://backend.test/", session=http, timeout=5)


@pytest.fixture
def complete_composite(asset_2d, asset_3d):
    composite = ArtifactComposite()
    composite.set_layer_2d(asset_2d)
    composite.set_layer_3d(asset_3d)
    return composite


def test_save_draft_incomplete_makes_no_call(gateway, http, asset_2d):
    composite = ArtifactComposite()
    composite.set_layer_2d(asset_2d)

    with pytest.raises(IncompleteCompositeError):
        gateway.save_draft(composite)
    http.request.assert_not_called()


def test_publish_incomplete_makes_no_call(gateway, http):
    with pytest.raises(IncompleteCompositeError):
        gateway.publish(ArtifactComposite())
    http.request.assert_not_called()


def test_save_draft_sends_multipart_form(gateway, http, complete_composite):
    http.request.return_value = make_response(201, {"id": "abc"})

    gateway.save_draft(complete_composite)

    args, kwargs = http.request.call_args
    assert args == ("POST", "http://backend.test/save-draft")
    assert kwargs["timeout"] == 5
    assert set(kwargs["files"]) == {"image", "model"}
    assert kwargs["files"]["image"][0] == "image.png"
    assert json.loads(kwargs["data"]["position"]) == [0, 0, 0]
    assert json.loads(kwargs["data"]["rotation"]) == [0, 0, 0]
    assert json.loads(kwargs["data"]["scale"]) == [1, 1, 1]
    # The assigned id is not kept locally
    assert complete_composite.id is None


def test_publish_returns_json_url(gateway, http, complete_composite):
    http.request.return_value = make_response(200, {"jsonUrl": "http://cdn.test/a.json"})

    result = gateway.publish(complete_composite)

    assert result.json_url == "http://cdn.test/a.json"
    args, kwargs = http.request.call_args
    assert args == ("POST", "http://backend.test/publish")
    assert set(kwargs["files"]) == {"image", "model"}
    assert "data" not in kwargs


@pytest.mark.parametrize("payload", [{}, {"jsonUrl": ""}, {"jsonUrl": 42}, ["x"]])
def test_publish_without_json_url_fails(gateway, http, complete_composite, payload):
    http.request.return_value = make_response(200, payload)
    with pytest.raises(TransportError):
        gateway.publish(complete_composite)


def test_publish_non_json_response_fails(gateway, http, complete_composite):
    http.request.return_value = make_response(200, ValueError("no json"))
    with pytest.raises(TransportError):
        gateway.publish(complete_composite)


def test_list_drafts(gateway, http):
    http.request.return_value = make_response(200, [
        {"id": 1, "imageUrl": "http://x/1.png", "modelUrl": "http://x/1.glb"},
        {"id": "2", "imageUrl": "http://x/2.png", "modelUrl": "http://x/2.gltf",
         "position": "[1, 2, 3]", "scale": [2, 2, 2]},
    ])

    drafts = gateway.list_drafts()

    http.request.assert_called_once_with("GET", "http://backend.test/drafts", timeout=5)
    assert [d.id for d in drafts] == ["1", "2"]
    assert drafts[0] == Draft(id="1", image_url="http://x/1.png", model_url="http://x/1.glb")
    assert drafts[1].transform.position == (1.0, 2.0, 3.0)
    assert drafts[1].transform.scale == (2.0, 2.0, 2.0)


def test_list_drafts_empty(gateway, http):
    http.request.return_value = make_response(200, [])
    assert gateway.list_drafts() == []


@pytest.mark.parametrize("payload", [{"drafts": []}, [{"id": 1, "imageUrl": "x"}]])
def test_list_drafts_malformed(gateway, http, payload):
    http.request.return_value = make_response(200, payload)
    with pytest.raises(TransportError):
        gateway.list_drafts()


def test_http_error_status(gateway, http, complete_composite):
    http.request.return_value = make_response(500, {"detail": "boom"})
    with pytest.raises(TransportError) as exc:
        gateway.save_draft(complete_composite)
    assert exc.value.status_code == 500


def test_connection_error(gateway, http):
    http.request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(TransportError) as exc:
        gateway.list_drafts()
    assert exc.value.status_code is None


def test_download_and_cleanup(gateway, http):
    http.get.return_value = make_response(200, content=b"glb-bytes")

    path = gateway.download("http://x/files/model.glb?sig=1")

    assert path.endswith(".glb")
    with open(path, "rb") as f:
        assert f.read() == b"glb-bytes"

    BackendGateway.cleanup_temp_files()
    assert not os.path.exists(path)


def test_download_failure(gateway, http):
    http.get.return_value = make_response(404)
    with pytest.raises(TransportError):
        gateway.download("http://x/files/missing.png")


def test_discard_deletes_and_untracks(gateway, http):
    http.get.return_value = make_response(200, content=b"png-bytes")
    kept = gateway.download("http://x/files/a.png")
    dropped = gateway.download("http://x/files/a.png")

    BackendGateway.discard(dropped)

    assert not os.path.exists(dropped)
    assert BackendGateway._TEMP_FILES == [kept]
    BackendGateway.cleanup_temp_files()
    assert not os.path.exists(kept)
