"""Process entry point: `python -m person_api` serves the app on settings.addr."""

import uvicorn

from person_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "person_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
