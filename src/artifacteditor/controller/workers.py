"""
Background Workers (Threading)
==============================
This module contains the QThread subclass that runs backend requests.

Why is this file needed?
------------------------
1. Responsiveness: Saving, publishing and listing go over the network. Running
   them on the main thread would freeze the GUI.
2. Signals: The worker hands the outcome back to the main thread through Qt
   Signals, tagged with the ticket it was started for.

Classes:
    GatewayWorker: Runs one gateway call.
"""
import logging
from typing import Any, Callable

from PySide6.QtCore import QThread, Signal

logger = logging.getLogger(__name__)


class GatewayWorker(QThread):
    # (ticket, result)
    succeeded = Signal(object, object)
    # (ticket, exception)
    failed = Signal(object, object)

    def __init__(self, ticket: Any, call: Callable[..., Any], *args: Any) -> None:
        super().__init__()
        self.ticket = ticket
        self._call = call
        self._args = args

    def run(self) -> None:
        try:
            logger.debug(f"Worker started for {self.ticket}.")
            result = self._call(*self._args)
        except Exception as e:
            logger.error(f"Error in GatewayWorker ({self.ticket}): {e}")
            self.failed.emit(self.ticket, e)
            return
        self.succeeded.emit(self.ticket, result)
