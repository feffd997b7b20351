"""
Editor Session (State Machine)
==============================
This module defines the explicit state of a running editing session and the
transitions between editor modes.

Why is this file needed?
------------------------
1. State Management: Mode, current composite, reset epoch, last draft
   snapshot and pending requests live in one value instead of being spread
   over widgets.
2. Determinism: Transitions take a session and return a new one, so they can
   be tested and replayed without a GUI.

Classes:
    EditorMode: Compose or browse drafts.
    RequestKind: Kinds of backend requests a session can have pending.
    EditorSession: The session value.
    Transition: Result of a transition (new session + requested effects).
    EditorStateMachine: The transition rules.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from artifacteditor.errors import InvalidTransitionError
from artifacteditor.model.composite import ArtifactComposite
from artifacteditor.model.drafts import Draft

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    COMPOSE = "compose"
    BROWSE_DRAFTS = "browse_drafts"


class RequestKind(str, Enum):
    SAVE = "save"
    PUBLISH = "publish"
    LIST = "list"


TRANSFER_KINDS = frozenset({RequestKind.SAVE, RequestKind.PUBLISH})


@dataclass(frozen=True)
class EditorSession:
    mode: EditorMode = EditorMode.COMPOSE
    composite: ArtifactComposite = field(default_factory=ArtifactComposite)
    epoch: int = 0
    drafts: tuple[Draft, ...] = ()
    in_flight: frozenset[RequestKind] = frozenset()

    def is_busy(self, kind: RequestKind) -> bool:
        return kind in self.in_flight

    def is_transferring(self) -> bool:
        """True while a save or publish of the current composite is pending."""
        return bool(self.in_flight & TRANSFER_KINDS)

    def with_request(self, kind: RequestKind) -> EditorSession:
        return replace(self, in_flight=self.in_flight | {kind})

    def without_request(self, kind: RequestKind) -> EditorSession:
        return replace(self, in_flight=self.in_flight - {kind})


@dataclass(frozen=True)
class Transition:
    session: EditorSession
    refresh_drafts: bool = False


class EditorStateMachine:
    @staticmethod
    def select_create(session: EditorSession) -> Transition:
        """Back to composing. The in-progress composite is kept."""
        if session.mode is not EditorMode.COMPOSE:
            logger.debug("Switching to compose mode.")
        return Transition(replace(session, mode=EditorMode.COMPOSE))

    @staticmethod
    def select_drafts(session: EditorSession) -> Transition:
        """Enter the drafts browser. Entering always asks for a fresh list."""
        logger.debug("Switching to drafts mode.")
        return Transition(replace(session, mode=EditorMode.BROWSE_DRAFTS), refresh_drafts=True)

    @staticmethod
    def reset(session: EditorSession) -> Transition:
        """
        Discards the current composite and starts a new one.

        Raises:
            InvalidTransitionError: If the editor is not in compose mode.
        """
        if session.mode is not EditorMode.COMPOSE:
            raise InvalidTransitionError("Reset is only available while composing.")
        session.composite.reset()
        # Pending save/publish requests belong to the discarded composite
        new_session = replace(
            session,
            composite=ArtifactComposite(),
            epoch=session.epoch + 1,
            in_flight=session.in_flight & {RequestKind.LIST},
        )
        logger.info(f"Editor session reset (epoch {new_session.epoch}).")
        return Transition(new_session)

    @staticmethod
    def apply_drafts(session: EditorSession, drafts: list[Draft]) -> Transition:
        return Transition(replace(session, drafts=tuple(drafts)))
