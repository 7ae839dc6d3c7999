#!/usr/bin/env python3
"""Address book WSGI wrapper.

Responsibilities:
    1. Build the Flask ``app`` through the application factory (DB, seeding,
       routes, i18n, security context).
    2. Expose it for production WSGI servers and run the development server
       when executed directly.
"""

from __future__ import annotations

import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from addressbook.startup import create_app  # noqa: E402

_APP_SINGLETON = None  # module-level cache


def main():  # pragma: no cover - thin wrapper
    """Create and return the Flask application (idempotent)."""
    global _APP_SINGLETON
    if _APP_SINGLETON is None:
        _APP_SINGLETON = create_app()
        print("[MAINWRAP] Address book app wiring complete.")
    return _APP_SINGLETON


# Expose WSGI application object for gunicorn: "gunicorn entrypoint.entrypoint_mainwrap:app"
app = main()
application = app


if __name__ == "__main__":  # Development server only (Flask built-in)
    host = os.getenv("ADDRESSBOOK_HOST", "127.0.0.1")
    port_raw = os.getenv("ADDRESSBOOK_PORT") or os.getenv("PORT") or "8080"
    try:
        port = int(port_raw)
    except ValueError:
        print(f"[MAINWRAP] Invalid port value '{port_raw}', falling back to 8080")
        port = 8080
    debug_raw = os.getenv("ADDRESSBOOK_DEBUG", "")
    debug = debug_raw.lower() in {"1", "true", "yes", "on"}
    app.run(host=host, port=port, debug=debug)
