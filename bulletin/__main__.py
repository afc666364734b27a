"""Start the board with uvicorn, using HOST/PORT from the environment."""

import uvicorn

from bulletin.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(
        "bulletin.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
