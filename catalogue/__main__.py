import uvicorn

from catalogue.core.config import settings


def main() -> None:
    """Run the catalogue API with uvicorn on the configured host and port."""
    uvicorn.run(
        "catalogue.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
