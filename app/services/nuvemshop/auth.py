import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
import httpx

from app.core.config import settings
from app.models.store import Store
from app.services.credential_store import StoreCredentialStore
from app.services.errors import (
    AuthInternalError,
    RemoteRejectedError,
    StoreIdMissingError,
    TokenMissingError,
)
from app.services.nuvemshop.http import open_client

logger = logging.getLogger(__name__)


class PlatformAuthClient:
    """Échange le code d'installation Nuvemshop contre un access token."""

    def __init__(
        self,
        stores: StoreCredentialStore,
        http_client: Optional[httpx.Client] = None,
        token_url: Optional[str] = None,
    ):
        self.stores = stores
        self.http_client = http_client
        self.token_url = token_url or settings.NUVEMSHOP_TOKEN_URL

    def authorize(self, code: str) -> Store:
        logger.info("Autorisation avec le code %s...", code[:10])

        payload = {
            "client_id": settings.NUVEMSHOP_CLIENT_ID,
            "client_secret": settings.NUVEMSHOP_CLIENT_SECRET,
            "grant_type": "authorization_code",
            "code": code,
        }

        try:
            with open_client(self.http_client) as client:
                response = client.post(self.token_url, data=payload)
            if not response.is_success:
                logger.error(
                    "Autorisation refusée par Nuvemshop (%s): %s",
                    response.status_code, response.text,
                )
                raise RemoteRejectedError(response.status_code, response.text)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("Erreur pendant l'autorisation Nuvemshop")
            raise AuthInternalError(e) from e

        if not isinstance(data, dict) or not data.get("access_token"):
            logger.error("Token absent de la réponse: %s", data)
            raise TokenMissingError()

        # Nuvemshop renvoie l'identifiant de la boutique tantôt dans user_id, tantôt dans store_id
        store_id = data.get("user_id") or data.get("store_id")
        if not store_id:
            logger.error("Store ID absent de la réponse: %s", data)
            raise StoreIdMissingError()

        expires_at = None
        if data.get("expires_in") is not None:
            try:
                expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(data["expires_in"]))
            except (TypeError, ValueError) as e:
                logger.error("expires_in invalide dans la réponse: %r", data["expires_in"])
                raise AuthInternalError(e) from e

        store = self.stores.upsert(
            str(store_id),
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            token_expires_at=expires_at,
            raw_payload=data,
        )

        logger.info("Token reçu et enregistré pour la boutique %s", store.store_id)
        return store
