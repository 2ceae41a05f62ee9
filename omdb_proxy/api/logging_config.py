# logger del proxy: nivel, consola de respaldo y fichero opcional
from __future__ import annotations

import logging
from pathlib import Path

from omdb_proxy.api.settings import Settings

LOGGER_NAME = "omdb_proxy"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# marca los handlers que instala el proxy (evita duplicarlos en cada create_app)
_OWNED_HANDLER_ATTR = "_omdb_proxy_handler"


class ApiKeyMaskFilter(logging.Filter):
    """Sustituye la API key de OMDb por `***` en el mensaje ya formateado."""

    def __init__(self, secret: str | None) -> None:
        super().__init__()
        self.secret = secret or ""

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secret:
            return True
        message = record.getMessage()
        if self.secret in message:
            record.msg = message.replace(self.secret, "***")
            record.args = None
        return True


def _owned_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if getattr(h, _OWNED_HANDLER_ATTR, None)]


def _adopt(handler: logging.Handler, *, kind: str, settings: Settings) -> None:
    setattr(handler, _OWNED_HANDLER_ATTR, kind)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    for old in [f for f in handler.filters if isinstance(f, ApiKeyMaskFilter)]:
        handler.removeFilter(old)
    handler.addFilter(ApiKeyMaskFilter(settings.omdb_api_key))


def _ensure_file_handler(root: logging.Logger, settings: Settings) -> None:
    if not settings.log_file_path:
        return

    path = Path(settings.log_file_path).expanduser().resolve()
    for handler in _owned_handlers(root):
        if getattr(handler, _OWNED_HANDLER_ATTR) == "file" and Path(handler.baseFilename) == path:  # type: ignore[attr-defined]
            _adopt(handler, kind="file", settings=settings)
            return

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logging.getLogger(LOGGER_NAME).warning("log_file_unavailable path=%s error=%r", path, exc)
        return

    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    _adopt(handler, kind="file", settings=settings)
    root.addHandler(handler)


def configure_logging(settings: Settings) -> logging.Logger:
    """
    - Respetamos handlers/format de quien ejecute (uvicorn, gunicorn, etc.).
    - Sin handlers en root -> consola propia (si no, las líneas INFO por request se pierden).
    - LOGGER_FILE_PATH -> además un FileHandler (una sola vez por ruta).
    - Los handlers propios enmascaran la API key de OMDb.
    """
    root = logging.getLogger()
    if not root.handlers:
        console = logging.StreamHandler()
        _adopt(console, kind="console", settings=settings)
        root.addHandler(console)
    else:
        for handler in _owned_handlers(root):
            if getattr(handler, _OWNED_HANDLER_ATTR) == "console":
                _adopt(handler, kind="console", settings=settings)

    root.setLevel(settings.log_level)
    _ensure_file_handler(root, settings)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level)
    return logger
