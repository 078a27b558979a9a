import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure le logging racine une seule fois, au démarrage de l'API."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # httpx logge chaque requête en INFO, y compris l'URL avec le store_id
    logging.getLogger("httpx").setLevel(logging.WARNING)
