"""
project: Delve
module: server.py
License: MIT

Server bootstrap: logging setup and the development server entry point.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from . import create_app

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Build the app, configure logging and serve it with Flask's server."""
    app = create_app()
    configure_logging(app)
    try:
        print(f"[INFO] Starting Delve API on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def configure_logging(app, level=logging.INFO) -> str:
    """Configure logging to both console and a rotating file in instance/.

    The file path is instance/delve.log with a few backups. Safe to call
    repeatedly; existing root handlers are replaced. Returns the log path.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "delve.log")

    root = logging.getLogger()
    root.setLevel(level)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
