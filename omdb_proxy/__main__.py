from __future__ import annotations

import os

import uvicorn


def main() -> None:
    """
    Runner para poder ejecutar:
      omdb-proxy
      python -m omdb_proxy
    (configurable por env vars)
    """
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "8000"))

    # Default seguro: sin env var -> no reload
    reload = os.getenv("API_RELOAD", "0") == "1"

    # una sola línea por request: la del middleware de request id
    uvicorn.run("omdb_proxy.api.app:app", host=host, port=port, reload=reload, access_log=False)


if __name__ == "__main__":
    main()
