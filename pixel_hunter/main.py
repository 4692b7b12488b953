import uvicorn

from .app import create_app
from .config import get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    logger.info(f"Starting Pixel Hunter relay on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
