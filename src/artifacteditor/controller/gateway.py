"""
Backend Gateway (Drafts & Publishing)
=====================================
The editor ONLY talks to the storage backend through this client.

Why is this file needed?
------------------------
1. Transfer: It serializes a composite into the multipart body the backend
   expects for '/save-draft' and '/publish'.
2. Retrieval: It reads the saved drafts from '/drafts' and fetches their
   assets so the preview can load them.
3. Errors: Every network or backend failure is raised as a TransportError.
   Nothing is retried automatically.
"""
from __future__ import annotations

import logging
import os
import tempfile
import uuid
from typing import Any, Optional
from urllib.parse import urlparse

import requests

from artifacteditor.config import BACKEND_URL, REQUEST_TIMEOUT
from artifacteditor.errors import IncompleteCompositeError, TransportError
from artifacteditor.model.composite import ArtifactComposite, TransferForm
from artifacteditor.model.drafts import Draft, PublishResult

logger = logging.getLogger(__name__)


class BackendGateway:
    # Track temporary files created for draft previews
    _TEMP_FILES: list[str] = []

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or BACKEND_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Cannot reach backend at {self.base_url}: {e}") from e

        if response.status_code >= 400:
            logger.error(f"{method} {url} returned HTTP {response.status_code}")
            raise TransportError(f"Backend rejected {method} {path}", response.status_code)
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Backend returned a response that is not JSON", response.status_code) from e

    @staticmethod
    def _require_complete(composite: ArtifactComposite) -> None:
        if not composite.is_complete():
            logger.warning("Refusing to send an incomplete composite.")
            raise IncompleteCompositeError()

    # ==================== DRAFTS ====================

    def save_draft(self, composite: ArtifactComposite) -> None:
        """
        Persists a complete composite as a draft.

        The backend only acknowledges; the draft id it assigns is not kept.

        Raises:
            IncompleteCompositeError: Before any network call, if a layer is missing.
            TransportError: On network or backend failure.
        """
        self._require_complete(composite)
        self.post_draft(composite.to_transfer_form())

    def post_draft(self, form: TransferForm) -> None:
        logger.info(f"Saving draft ({form.image[0]}, {form.model[0]})")
        self._request("POST", "/save-draft", files=form.files(), data=form.transform_fields())
        logger.info("Draft saved.")

    def list_drafts(self) -> list[Draft]:
        """
        Fetches the full current set of drafts.

        Raises:
            TransportError: On network failure or a malformed payload.
        """
        response = self._request("GET", "/drafts")
        payload = self._json(response)

        if not isinstance(payload, list):
            raise TransportError("Drafts payload is not a list", response.status_code)

        try:
            drafts = [Draft.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed draft in payload: {e}")
            raise TransportError(f"Malformed draft in backend response: {e}", response.status_code) from e

        logger.info(f"Loaded {len(drafts)} drafts.")
        return drafts

    # ==================== PUBLISHING ====================

    def publish(self, composite: ArtifactComposite) -> PublishResult:
        """
        Publishes a complete composite. Only the two binaries are sent.

        Returns:
            PublishResult with the public descriptor URL.

        Raises:
            IncompleteCompositeError: Before any network call, if a layer is missing.
            TransportError: On failure or when 'jsonUrl' is missing.
        """
        self._require_complete(composite)
        return self.post_publish(composite.to_transfer_form())

    def post_publish(self, form: TransferForm) -> PublishResult:
        logger.info(f"Publishing artifact ({form.image[0]}, {form.model[0]})")
        response = self._request("POST", "/publish", files=form.files())
        payload = self._json(response)

        json_url = payload.get("jsonUrl") if isinstance(payload, dict) else None
        if not isinstance(json_url, str) or not json_url:
            raise TransportError("Publish response has no 'jsonUrl'", response.status_code)

        logger.info(f"Published: {json_url}")
        return PublishResult(json_url=json_url)

    # ==================== ASSET DOWNLOAD ====================

    def download(self, url: str) -> str:
        """
        Fetches a draft asset into a tracked temporary file.

        Returns:
            Path of the temporary file (keeps the URL's extension).
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Download of {url} failed: {e}")
            raise TransportError(f"Cannot download {url}: {e}") from e
        if response.status_code >= 400:
            raise TransportError(f"Cannot download {url}", response.status_code)

        ext = os.path.splitext(urlparse(url).path)[1]
        temp_path = os.path.join(tempfile.gettempdir(), f"draft_{uuid.uuid4().hex}{ext}")
        with open(temp_path, "wb") as f:
            f.write(response.content)

        BackendGateway._TEMP_FILES.append(temp_path)
        logger.debug(f"Downloaded {url} to {temp_path}")
        return temp_path

    @staticmethod
    def discard(*paths: str) -> None:
        """Deletes downloaded files that are no longer displayed."""
        for temp_path in paths:
            if temp_path in BackendGateway._TEMP_FILES:
                BackendGateway._TEMP_FILES.remove(temp_path)
            try:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
            except OSError as e:
                logger.warning(f"Could not delete temp file '{temp_path}': {e}")

    @staticmethod
    def cleanup_temp_files() -> None:
        """Deletes all temporary files downloaded during the session."""
        logger.info(f"Cleaning up {len(BackendGateway._TEMP_FILES)} downloaded draft files.")
        BackendGateway.discard(*BackendGateway._TEMP_FILES)
