"""Run the Transaction API with uvicorn."""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "transaction_api.app:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
