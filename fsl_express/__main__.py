import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "fsl_express.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # structlog owns the root logger
    )


if __name__ == "__main__":
    main()
