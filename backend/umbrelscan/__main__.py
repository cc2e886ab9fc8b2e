import uvicorn

from .core.config import settings


def main():
    """Serve the API with uvicorn."""
    uvicorn.run(
        "umbrelscan.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
