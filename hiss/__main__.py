"""Run the API with uvicorn: `python -m hiss`."""

import uvicorn

from hiss.config import settings


def main() -> None:
    uvicorn.run(
        "hiss.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
