"""Application entry point for Waai Classroom."""

from __future__ import annotations

import os
from pathlib import Path
import socket
import sys

from PySide6.QtWidgets import QApplication

from waai_app.constants.about import APP_NAME
from waai_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.gateway import InMemoryGateway, JsonFileGateway, PersistenceGateway
from waai_app.server.api_server import start_api_server
from waai_app.ui.teacher_main_window import TeacherMainWindow
from waai_app.utils.logging_config import configure_logging

DATA_FILE_ENV_VAR = "WAAI_DATA_FILE"


def _determine_child_url(port: int) -> str:
    """Best-effort determination of the local IP for the child-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def _create_gateway() -> PersistenceGateway:
    data_file = os.environ.get(DATA_FILE_ENV_VAR)
    if data_file:
        return JsonFileGateway(Path(data_file).expanduser())
    return InMemoryGateway()


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting %s…", APP_NAME)

    gateway = _create_gateway()
    if isinstance(gateway, JsonFileGateway):
        logger.info("Storing data in %s", os.environ[DATA_FILE_ENV_VAR])
    else:
        logger.info("No %s set; data is kept in memory only", DATA_FILE_ENV_VAR)

    classroom_manager = ClassroomManager(gateway)
    start_api_server(classroom_manager=classroom_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    child_url = _determine_child_url(DEFAULT_PORT)
    logger.info("Child page available at %s", child_url)

    app = QApplication(sys.argv)
    window = TeacherMainWindow(classroom_manager=classroom_manager, child_url=child_url)
    window.resize(1100, 750)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
