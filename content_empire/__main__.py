import uvicorn

from content_empire.config import settings


def main() -> None:
    uvicorn.run("content_empire.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
