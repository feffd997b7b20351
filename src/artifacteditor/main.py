"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the Backend Gateway and the Editor Controller (which owns the
   EditorSession).
2. Instantiates the Main Window (View).
3. Passes the Controller into the View so they can communicate.
"""
import sys

from PySide6.QtWidgets import QApplication

from artifacteditor.config import BACKEND_URL
from artifacteditor.controller.editor import EditorController
from artifacteditor.controller.gateway import BackendGateway
from artifacteditor.logging_config import setup_logging
from artifacteditor.view.main_window import MainWindow, VISIBLE_APP_NAME


def main() -> None:
    # ARTIFACT_LOG_LEVEL=DEBUG shows everything during development
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName(VISIBLE_APP_NAME)

    gateway = BackendGateway(base_url=BACKEND_URL)
    controller = EditorController(gateway=gateway)

    window = MainWindow(controller)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
