import uvicorn

from server.api.deps import get_settings


def main():
    settings = get_settings()

    uvicorn.run(
        "server.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
