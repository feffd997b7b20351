import os
from unittest.mock import MagicMock

import pytest

from artifacteditor.controller.downloads import DraftDownloads
from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.errors import TransportError
from artifacteditor.model.drafts import Draft

from conftest import make_response


@pytest.fixture
def http():
    http = MagicMock()
    http.get.return_value = make_response(200, content=b"asset-bytes")
    return http


@pytest.fixture
def downloads(http):
    return DraftDownloads(BackendGateway(base_url="http://backend.test", session=http, timeout=5))


def _draft(i):
    return Draft(id=str(i), image_url=f"http://x/{i}.png", model_url=f"http://x/{i}.glb")


def _show(downloads, drafts):
    """One visit of the drafts browser: new round, then every fetch accepted."""
    generation = downloads.new_round()
    for draft in drafts:
        assert downloads.accept(generation, downloads.fetch(draft))
    return downloads.held_files


def test_refresh_deletes_previous_round_files(downloads):
    first = _show(downloads, [_draft(0), _draft(1)])
    assert len(first) == 4
    assert all(os.path.exists(p) for p in first)

    second = _show(downloads, [_draft(0), _draft(1)])

    assert not any(os.path.exists(p) for p in first)
    assert all(os.path.exists(p) for p in second)
    assert sorted(BackendGateway._TEMP_FILES) == sorted(second)


def test_repeated_visits_do_not_accumulate_files(downloads):
    for _ in range(3):
        _show(downloads, [_draft(0)])
    assert len(BackendGateway._TEMP_FILES) == 2


def test_fetch_for_superseded_round_is_deleted(downloads):
    old = downloads.new_round()
    paths = downloads.fetch(_draft(0))
    downloads.new_round()

    assert not downloads.accept(old, paths)
    assert not any(os.path.exists(p) for p in paths)
    assert downloads.held_files == ()


def test_failed_model_download_deletes_image(downloads, http):
    http.get.side_effect = [make_response(200, content=b"png"), make_response(500)]
    downloads.new_round()

    with pytest.raises(TransportError):
        downloads.fetch(_draft(0))
    assert BackendGateway._TEMP_FILES == []


def test_release_all_on_shutdown(downloads):
    held = _show(downloads, [_draft(0)])
    downloads.release_all()
    assert not any(os.path.exists(p) for p in held)
    assert downloads.held_files == ()
