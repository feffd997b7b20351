"""
Editor Controller
=================
Mediates between the view, the editor session and the backend gateway.

Why is this file needed?
------------------------
1. Orchestration: Uploads are validated (and 3D scenes loaded and normalized)
   before they touch the composite. Mode switches and resets go through the
   state machine.
2. Requests: Save, publish and list run on GatewayWorker threads. Each request
   carries a RequestTicket. A duplicate save or publish is refused while one
   is pending, and a result that arrives after the session moved on is
   reported as stale instead of being applied.

The begin_* / complete_* / fail_* methods are synchronous so the request
bookkeeping can be driven without threads.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from PySide6.QtCore import QObject, Signal

from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.controller.normalizer import LoadedScene, ModelNormalizer
from artifacteditor.controller.workers import GatewayWorker
from artifacteditor.errors import IncompleteCompositeError, RequestInFlightError, SceneLoadError
from artifacteditor.model.assets import Asset, Asset2D, Asset3D, AssetValidator, LayerSlot
from artifacteditor.model.composite import TransferForm
from artifacteditor.model.drafts import Draft, PublishResult
from artifacteditor.model.session import EditorMode, EditorSession, EditorStateMachine, RequestKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestTicket:
    kind: RequestKind
    epoch: int
    serial: int


class EditorController(QObject):
    session_changed = Signal(object)        # EditorSession
    scene_changed = Signal(object)          # Optional[LoadedScene]
    busy_changed = Signal(str, bool)        # (RequestKind value, busy)
    draft_saved = Signal()
    published = Signal(str)                 # public descriptor URL
    drafts_loaded = Signal(object)          # list[Draft]
    request_failed = Signal(str, str)       # (RequestKind value, message)
    stale_result = Signal(str, str)         # (RequestKind value, message)

    def __init__(
        self,
        gateway: Optional[BackendGateway] = None,
        normalizer: Optional[ModelNormalizer] = None,
    ) -> None:
        super().__init__()
        self.gateway = gateway or BackendGateway()
        self.normalizer = normalizer or ModelNormalizer()

        self._session = EditorSession()
        self._scene: Optional[LoadedScene] = None
        self._serial = 0
        self._latest_list_serial = 0
        self._workers: list[GatewayWorker] = []

    # --- PROPERTIES ---

    @property
    def session(self) -> EditorSession:
        return self._session

    @property
    def scene(self) -> Optional[LoadedScene]:
        """Normalized scene of the current 3D layer, if any."""
        return self._scene

    def _set_session(self, session: EditorSession) -> None:
        self._session = session
        self.session_changed.emit(session)

    def _next_ticket(self, kind: RequestKind) -> RequestTicket:
        self._serial += 1
        return RequestTicket(kind=kind, epoch=self._session.epoch, serial=self._serial)

    # --- LAYERS ---

    def upload(self, path: str, slot: LayerSlot) -> Asset:
        """
        Validates a picked file and installs it in the current composite.

        Raises:
            ValidationError: The file is rejected; the slot keeps its old value.
            SceneLoadError: The 3D container cannot be loaded; the slot keeps
                its old value.
        """
        asset = AssetValidator.validate(path, slot)
        composite = self._session.composite

        if isinstance(asset, Asset2D):
            composite.set_layer_2d(asset)
        else:
            self._commit_model(asset)

        self._set_session(self._session)
        return asset

    def _commit_model(self, asset: Asset3D) -> None:
        try:
            scene = self.normalizer.load_normalized(asset.handle.path)
        except SceneLoadError:
            asset.handle.revoke()
            raise
        self._session.composite.set_layer_3d(asset)
        scene.transform = self._session.composite.transform
        self._scene = scene
        self.scene_changed.emit(scene)

    # --- MODES ---

    def select_create(self) -> None:
        self._set_session(EditorStateMachine.select_create(self._session).session)

    def select_drafts(self) -> Optional[RequestTicket]:
        """Switches to the drafts browser and starts a list refresh."""
        transition = EditorStateMachine.select_drafts(self._session)
        self._set_session(transition.session)
        if transition.refresh_drafts:
            return self.refresh_drafts_async()
        return None

    def reset(self) -> None:
        """
        Discards the current composite.

        Raises:
            InvalidTransitionError: If not in compose mode.
        """
        dropped = self._session.in_flight - {RequestKind.LIST}
        self._set_session(EditorStateMachine.reset(self._session).session)
        self._clear_scene()
        for kind in dropped:
            self.busy_changed.emit(kind.value, False)

    def _discard_after_publish(self) -> None:
        # Publish may complete while browsing drafts; keep the mode
        mode = self._session.mode
        transition = EditorStateMachine.reset(replace(self._session, mode=EditorMode.COMPOSE))
        self._set_session(replace(transition.session, mode=mode))
        self._clear_scene()

    def _clear_scene(self) -> None:
        if self._scene is not None:
            self._scene = None
            self.scene_changed.emit(None)

    # --- REQUEST BOOKKEEPING ---

    def _begin(self, kind: RequestKind) -> tuple[RequestTicket, Optional[TransferForm]]:
        form = None
        if kind is not RequestKind.LIST:
            if self._session.is_transferring():
                raise RequestInFlightError("A save or publish of this artifact is already in progress.")
            if not self._session.composite.is_complete():
                raise IncompleteCompositeError()
            # Serialize on the main thread; the composite may be reset meanwhile
            form = self._session.composite.to_transfer_form()

        ticket = self._next_ticket(kind)
        if kind is RequestKind.LIST:
            self._latest_list_serial = ticket.serial

        self._set_session(self._session.with_request(kind))
        self.busy_changed.emit(kind.value, True)
        logger.debug(f"Started request {ticket}.")
        return ticket, form

    def _is_current(self, ticket: RequestTicket) -> bool:
        if ticket.kind is RequestKind.LIST:
            return ticket.serial == self._latest_list_serial
        return ticket.epoch == self._session.epoch

    def _finish(self, ticket: RequestTicket) -> bool:
        """Clears the busy flag of a current ticket. Returns whether it was current."""
        if not self._is_current(ticket):
            return False
        self._set_session(self._session.without_request(ticket.kind))
        self.busy_changed.emit(ticket.kind.value, False)
        return True

    def begin_save(self) -> tuple[RequestTicket, TransferForm]:
        """
        Raises:
            IncompleteCompositeError: If a layer is missing.
            RequestInFlightError: If a save or publish is already pending.
        """
        return self._begin(RequestKind.SAVE)

    def begin_publish(self) -> tuple[RequestTicket, TransferForm]:
        """
        Raises:
            IncompleteCompositeError: If a layer is missing.
            RequestInFlightError: If a save or publish is already pending.
        """
        return self._begin(RequestKind.PUBLISH)

    def begin_list(self) -> RequestTicket:
        ticket, _ = self._begin(RequestKind.LIST)
        return ticket

    def complete_save(self, ticket: RequestTicket) -> None:
        if not self._finish(ticket):
            logger.info("Draft saved for a session that has since been reset.")
            self.stale_result.emit(ticket.kind.value, "A draft from a discarded session was saved.")
            return
        self.draft_saved.emit()

    def complete_publish(self, ticket: RequestTicket, result: PublishResult) -> None:
        if not self._finish(ticket):
            logger.info(f"Publish finished for a discarded session: {result.json_url}")
            self.stale_result.emit(
                ticket.kind.value,
                f"An artifact from a discarded session was published:\n{result.json_url}",
            )
            return
        self.published.emit(result.json_url)
        self._discard_after_publish()

    def complete_list(self, ticket: RequestTicket, drafts: list[Draft]) -> None:
        if not self._finish(ticket):
            logger.debug(f"Ignoring superseded draft list ({len(drafts)} drafts).")
            return
        self._set_session(EditorStateMachine.apply_drafts(self._session, drafts).session)
        self.drafts_loaded.emit(list(self._session.drafts))

    def fail(self, ticket: RequestTicket, error: Exception) -> None:
        if not self._finish(ticket):
            logger.info(f"Ignoring failure of stale request {ticket}: {error}")
            self.stale_result.emit(ticket.kind.value, str(error))
            return
        logger.warning(f"Request {ticket.kind.value} failed: {error}")
        self.request_failed.emit(ticket.kind.value, str(error))

    # --- ASYNC ENTRY POINTS ---

    def save_draft_async(self) -> RequestTicket:
        ticket, form = self.begin_save()
        self._start_worker(ticket, self.gateway.post_draft, form)
        return ticket

    def publish_async(self) -> RequestTicket:
        ticket, form = self.begin_publish()
        self._start_worker(ticket, self.gateway.post_publish, form)
        return ticket

    def refresh_drafts_async(self) -> RequestTicket:
        ticket = self.begin_list()
        self._start_worker(ticket, self.gateway.list_drafts)
        return ticket

    def _start_worker(self, ticket: RequestTicket, call, *args) -> None:
        worker = GatewayWorker(ticket, call, *args)
        worker.succeeded.connect(self._on_worker_succeeded)
        worker.failed.connect(self._on_worker_failed)
        worker.finished.connect(lambda: self._release_worker(worker))
        self._workers.append(worker)
        worker.start()

    def _release_worker(self, worker: GatewayWorker) -> None:
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def _on_worker_succeeded(self, ticket: RequestTicket, result: object) -> None:
        if ticket.kind is RequestKind.SAVE:
            self.complete_save(ticket)
        elif ticket.kind is RequestKind.PUBLISH:
            self.complete_publish(ticket, result)
        else:
            self.complete_list(ticket, result)

    def _on_worker_failed(self, ticket: RequestTicket, error: Exception) -> None:
        self.fail(ticket, error)

    def shutdown(self) -> None:
        """Waits for pending requests and removes downloaded files."""
        for worker in list(self._workers):
            worker.wait()
        BackendGateway.cleanup_temp_files()
