import uvicorn

from .settings import get_settings


def main() -> None:
    """Run the API under uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(
        "todo_api.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
