import os

import uvicorn

from assetshare.core.config import settings


def main() -> None:
    """Serve the asset sharing API with uvicorn."""

    reload_enabled = os.getenv("RELOAD", "false").strip().lower() in {"1", "true", "yes", "y"}
    uvicorn.run(
        "assetshare.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload_enabled,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
