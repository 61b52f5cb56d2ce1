"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

API_PORT = int(os.getenv("PORT", "8000"))
UI_PORT = 8080


def run_integrated() -> None:
    """Serve the API and the chat page from one uvicorn process."""
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    ui.run_with(
        app,
        title="Chat AI Demo",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret"),
    )

    logger.info(f"Starting integrated server on http://localhost:{API_PORT}")
    logger.info(f"Health check at http://localhost:{API_PORT}/health")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=API_PORT,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Supervise the API and the UI as two child processes.

    Stops both as soon as either exits or on Ctrl+C.
    """
    import subprocess
    import time

    logger.info(f"Starting API on http://localhost:{API_PORT}")
    api_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "src.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            str(API_PORT),
        ]
    )

    logger.info(f"Starting chat UI on http://localhost:{UI_PORT}")
    ui_proc = subprocess.Popen(
        [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
    )

    try:
        while api_proc.poll() is None and ui_proc.poll() is None:
            time.sleep(1)
        logger.warning("A child process exited, stopping the other")
    except KeyboardInterrupt:
        logger.info("Shutting down services...")
    finally:
        for proc in (ui_proc, api_proc):
            if proc.poll() is None:
                proc.terminate()
            proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the UI on different ports.
    Default is integrated mode (both on one port).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Chat Relay in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
