"""admingate entrypoint.

Run with:
  python -m admingate
"""

import uvicorn

from admingate.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "admingate.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )

if __name__ == "__main__":
    main()
