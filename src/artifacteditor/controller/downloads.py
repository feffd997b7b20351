"""
Draft Asset Downloads
=====================
Keeps the downloaded files of the drafts currently on screen.

Each list refresh starts a new round. Starting a round deletes the files of
the previous one, and files that arrive for an old round are deleted as soon
as they are handed back. Only the drafts shown right now keep files on disk.
"""
from __future__ import annotations

import logging

from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.errors import ArtifactError
from artifacteditor.model.drafts import Draft

logger = logging.getLogger(__name__)


class DraftDownloads:
    def __init__(self, gateway: BackendGateway) -> None:
        self.gateway = gateway
        self.generation = 0
        self._held: list[str] = []

    @property
    def held_files(self) -> tuple[str, ...]:
        return tuple(self._held)

    def new_round(self) -> int:
        """Releases the previous round's files. Returns the new generation."""
        self.release_all()
        self.generation += 1
        return self.generation

    def fetch(self, draft: Draft) -> tuple[str, str]:
        """
        Downloads the image and model of a draft. Runs on a worker thread.

        Raises:
            TransportError: If either download fails. A finished image download
                is deleted again.
        """
        image_path = self.gateway.download(draft.image_url)
        try:
            model_path = self.gateway.download(draft.model_url)
        except ArtifactError:
            self.gateway.discard(image_path)
            raise
        return image_path, model_path

    def accept(self, generation: int, paths: tuple[str, ...]) -> bool:
        """
        Keeps the files of a finished fetch if its round is still current.

        Returns:
            False if the round was superseded; the files are deleted.
        """
        if generation != self.generation:
            logger.debug(f"Dropping {len(paths)} files of superseded round {generation}.")
            self.gateway.discard(*paths)
            return False
        self._held.extend(paths)
        return True

    def release_all(self) -> None:
        if self._held:
            logger.debug(f"Releasing {len(self._held)} draft files.")
        self.gateway.discard(*self._held)
        self._held = []
