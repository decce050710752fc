import uvicorn

from frontdesk.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("frontdesk.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
