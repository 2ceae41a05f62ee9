from __future__ import annotations

from omdb_proxy.api.middleware.errors import build_exception_handler, build_proxy_error_handler
from omdb_proxy.api.middleware.request_id import build_request_id_middleware

__all__ = ["build_exception_handler", "build_proxy_error_handler", "build_request_id_middleware"]
