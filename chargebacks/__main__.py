"""Run the API server: `python -m chargebacks` (HOST / PORT / DB_PATH from env)."""

import uvicorn

from chargebacks.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "chargebacks.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
