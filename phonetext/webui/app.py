from __future__ import annotations

import atexit
import logging
import os
from typing import Any, Optional

from flask import Flask

from phonetext.constants import PROGRAM_NAME, VERSION
from phonetext.phoneme_backend import reset_default_registry

logger = logging.getLogger(__name__)


class _SuppressSuccessfulAccessFilter(logging.Filter):
    """Filter out successful (HTTP 2xx) werkzeug access logs."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - small utility
        message = record.getMessage()
        # Werkzeug access logs end with the status code, e.g. "POST /api/phonemize HTTP/1.1" 200 -
        return " 200 " not in message and " 201 " not in message and " 204 " not in message


_access_log_filter_attached = False
_registry_cleanup_registered = False


def create_app(config: Optional[dict[str, Any]] = None, *, backend: Optional[Any] = None) -> Flask:
    """Build the HTTP front end.

    ``backend`` replaces the default espeak converter for every request,
    which is how tests and alternative G2P engines plug in.
    """

    app = Flask(__name__)
    base_config = {
        "MAX_CONTENT_LENGTH": 1024 * 1024,
    }
    if config:
        base_config.update(config)
    app.config.update(base_config)
    app.json.ensure_ascii = False

    app.extensions["phoneme_backend"] = backend

    from phonetext.webui.routes import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    global _access_log_filter_attached, _registry_cleanup_registered
    if backend is None and not _registry_cleanup_registered:
        atexit.register(reset_default_registry)
        _registry_cleanup_registered = True

    if not _access_log_filter_attached:
        logging.getLogger("werkzeug").addFilter(_SuppressSuccessfulAccessFilter())
        _access_log_filter_attached = True

    return app


def main() -> None:
    app = create_app()
    host = os.environ.get("PHONETEXT_HOST", "127.0.0.1")
    port = int(os.environ.get("PHONETEXT_PORT", "8809"))
    debug = os.environ.get("PHONETEXT_DEBUG", "false").lower() == "true"
    logger.info("Starting %s %s on http://%s:%d", PROGRAM_NAME, VERSION, host, port)
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    main()
