import logging
from typing import Any, Dict, List, Optional
import httpx

from app.core.config import settings
from app.models.store import Store
from app.services.credential_store import StoreCredentialStore, resolve_store
from app.services.errors import InternalError, NoStoreConfiguredError, RemoteError
from app.services.nuvemshop.http import api_headers, open_client

logger = logging.getLogger(__name__)

LIST_PARAMS = {
    "page": 1,
    "per_page": 100,
    "fields": "id,name,description,handle,subcategories",
}

# Pas de contenu par langue : toutes les locales reçoivent le même HTML
DESCRIPTION_LANGUAGES = ("pt", "es", "en")


class CategoryClient:
    """
    Lecture / écriture des catégories d'une boutique via l'API REST Nuvemshop.

    Pas de PATCH côté Nuvemshop : la mise à jour d'une description lit la
    catégorie, recopie `name` et renvoie le tout en PUT. Entre le GET et le
    PUT, une modification concurrente est écrasée (le dernier PUT gagne).
    """

    def __init__(
        self,
        stores: StoreCredentialStore,
        http_client: Optional[httpx.Client] = None,
        api_base: Optional[str] = None,
        single_tenant_mode: bool = True,
    ):
        self.stores = stores
        self.http_client = http_client
        self.api_base = (api_base or settings.nuvemshop_api_base).rstrip("/")
        self.single_tenant_mode = single_tenant_mode

    def _categories_url(self, store: Store, category_id: Optional[str] = None) -> str:
        url = f"{self.api_base}/{store.store_id}/categories"
        if category_id is not None:
            url += f"/{category_id}"
        return url

    def _send(self, method: str, url: str, store: Store, **kwargs) -> httpx.Response:
        try:
            with open_client(self.http_client) as client:
                return client.request(method, url, headers=api_headers(store.access_token), **kwargs)
        except httpx.HTTPError as e:
            logger.exception("Erreur réseau %s %s", method, url)
            raise InternalError(e) from e

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise InternalError(e) from e

    @classmethod
    def _decode_category(cls, response: httpx.Response, category_id: str) -> Dict[str, Any]:
        data = cls._decode(response)
        if not isinstance(data, dict):
            logger.error("Réponse inattendue pour la catégorie %s: %s", category_id, response.text)
            raise InternalError(ValueError(f"unexpected category payload ({type(data).__name__})"))
        return data

    def list_categories(self, store_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Liste les catégories de la boutique (une seule page de 100 : pas de
        boucle de pagination).
        """
        store = resolve_store(self.stores, store_id, self.single_tenant_mode)
        logger.info("Récupération des catégories de la boutique %s", store.store_id)

        response = self._send("GET", self._categories_url(store), store, params=LIST_PARAMS)
        if not response.is_success:
            logger.error(
                "Erreur à la récupération des catégories (%s): %s",
                response.status_code, response.text,
            )
            raise RemoteError(response.status_code, response.text, "Error fetching categories")

        categories = self._decode(response)
        if not isinstance(categories, list):
            logger.error("Réponse inattendue pour la liste des catégories: %s", response.text)
            raise InternalError(ValueError(f"unexpected categories payload ({type(categories).__name__})"))
        return categories

    def get_category(self, category_id: str, store_id: Optional[str] = None) -> Dict[str, Any]:
        store = resolve_store(self.stores, store_id, self.single_tenant_mode)
        return self._fetch_category(store, category_id)

    def _fetch_category(self, store: Store, category_id: str) -> Dict[str, Any]:
        response = self._send("GET", self._categories_url(store, category_id), store)
        if not response.is_success:
            logger.error(
                "Erreur à la récupération de la catégorie %s (%s): %s",
                category_id, response.status_code, response.text,
            )
            raise RemoteError(response.status_code, response.text, "Error fetching category")

        return self._decode_category(response, category_id)

    def update_category_description(
        self, store_id: str, category_id: str, html_description: str
    ) -> Dict[str, Any]:
        """
        Remplace la description d'une catégorie sans toucher à son nom.

        Exige une boutique explicite (pas de repli sur la première). Une chaîne
        vide efface la description : Nuvemshop n'a pas de suppression dédiée.
        """
        store = self.stores.find(store_id)
        if not store:
            raise NoStoreConfiguredError(store_id, status_code=404)

        logger.info("Mise à jour de la description de la catégorie %s (boutique %s)", category_id, store_id)

        # Jamais de PUT sans GET réussi : on écraserait le nom de la catégorie
        current = self._fetch_category(store, category_id)

        name = current.get("name")
        payload = {
            "name": name if name is not None else {},
            "description": {lang: html_description for lang in DESCRIPTION_LANGUAGES},
        }
        logger.debug(
            "Payload catégorie %s: name=%s description_pt=%s...",
            category_id, payload["name"], html_description[:50],
        )

        url = self._categories_url(store, category_id)
        response = self._send("PUT", url, store, json=payload)
        if not response.is_success:
            logger.error(
                "Erreur à la mise à jour de la catégorie %s (%s): %s | payload=%s",
                category_id, response.status_code, response.text, payload,
            )
            raise RemoteError(response.status_code, response.text, "Error updating category on Nuvemshop")

        logger.info("Catégorie %s mise à jour sur Nuvemshop", category_id)
        return self._decode_category(response, category_id)
