from contextlib import contextmanager
from typing import Dict, Iterator, Optional
import httpx

from app.core.config import settings


def api_headers(access_token: str) -> Dict[str, str]:
    # Nuvemshop lit le token dans "Authentication", pas dans "Authorization"
    return {
        "Authentication": f"bearer {access_token}",
        "User-Agent": settings.NUVEMSHOP_USER_AGENT,
        "Content-Type": "application/json",
    }


@contextmanager
def open_client(http_client: Optional[httpx.Client] = None) -> Iterator[httpx.Client]:
    """Réutilise le client injecté (tests) ou ouvre un client le temps d'un appel."""
    if http_client is not None:
        yield http_client
        return

    kwargs = {}
    if settings.NUVEMSHOP_TIMEOUT is not None:
        kwargs["timeout"] = settings.NUVEMSHOP_TIMEOUT
    with httpx.Client(**kwargs) as client:
        yield client
