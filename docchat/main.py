"""Entry point for the docchat server.

Serves the chat API on one port and mounts the NiceGUI page on it, or runs
the API and the page as two processes. Settings come from the environment
and an optional .env file.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

# .env must be loaded before the config modules read the environment
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def _host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def _port() -> int:
    return int(os.getenv("PORT", "8000"))


def run_integrated() -> None:
    """Serve the API and the chat page from a single uvicorn process."""
    import uvicorn
    from nicegui import ui

    from docchat.api.app import create_app
    from docchat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="docchat",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "docchat-secret"),
    )

    logger.info(f"Chat page on http://localhost:{_port()}/, API docs on /docs")
    uvicorn.run(
        app,
        host=_host(),
        port=_port(),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the API (PORT) and the NiceGUI page (8080) as child processes.

    Stops both as soon as either exits.
    """
    api_cmd = [
        sys.executable, "-m", "uvicorn", "docchat.api.app:app",
        "--host", _host(), "--port", str(_port()),
    ]
    ui_cmd = [sys.executable, "-c", "from docchat.ui.chat_page import main; main()"]

    logger.info(f"Starting API on port {_port()} and chat page on port 8080")
    procs = [subprocess.Popen(api_cmd), subprocess.Popen(ui_cmd)]
    try:
        while all(proc.poll() is None for proc in procs):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in procs:
            proc.terminate()
        for proc in procs:
            proc.wait()


def main() -> None:
    """Start docchat; RUN_MODE=separate splits API and page into two processes."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting docchat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
