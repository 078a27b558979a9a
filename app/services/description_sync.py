import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from app.services.credential_store import resolve_store
from app.services.nuvemshop.categories import CategoryClient

logger = logging.getLogger(__name__)

# Ordre de préférence des langues pour l'affichage
DISPLAY_LANGUAGES = ("pt", "es", "en")

TAG_RE = re.compile(r"<[^<]+?>")


def strip_tags(html: str) -> str:
    return TAG_RE.sub("", html)


def _display_text(description: Any) -> str:
    # Nuvemshop renvoie soit une chaîne, soit un dict {langue: texte}
    if isinstance(description, str):
        return description
    if isinstance(description, dict):
        for lang in DISPLAY_LANGUAGES:
            if description.get(lang):
                return str(description[lang])
    return ""


def normalize_description(description: Any) -> Tuple[str, str]:
    """Retourne le couple (content, html_content) d'une description Nuvemshop."""
    html_content = _display_text(description)
    return strip_tags(html_content), html_content


def normalize_category(category: Dict[str, Any]) -> Dict[str, Any]:
    content, html_content = normalize_description(category.get("description"))
    return {
        "id": category.get("id"),
        "category_id": category.get("id"),
        "name": category.get("name"),
        "content": content,
        "html_content": html_content,
    }


class DescriptionSyncFacade:
    """
    Point d'entrée de l'API vers Nuvemshop : résout la boutique, délègue au
    CategoryClient et ramène les descriptions multilingues au format
    {content, html_content}.
    """

    def __init__(self, client: CategoryClient):
        self.client = client

    def resolve_store_id(self, store_id: Optional[str] = None, missing_status: Optional[int] = None) -> str:
        store = resolve_store(self.client.stores, store_id, self.client.single_tenant_mode, missing_status)
        return store.store_id

    def list_with_descriptions(self, store_id: Optional[str] = None) -> List[Dict[str, Any]]:
        categories = self.client.list_categories(store_id)
        return [normalize_category(category) for category in categories]

    def get_description(self, category_id: str, store_id: Optional[str] = None) -> Dict[str, Any]:
        return normalize_category(self.client.get_category(category_id, store_id))

    def set_description(
        self, store_id: str, category_id: str, content: Optional[str], html_content: str
    ) -> Dict[str, Any]:
        # Nuvemshop n'a pas de champ texte brut : `content` n'est jamais envoyé
        updated = self.client.update_category_description(store_id, category_id, html_content)
        return normalize_category(updated)

    def clear_description(self, store_id: str, category_id: str) -> None:
        logger.info("Effacement de la description de la catégorie %s", category_id)
        self.set_description(store_id, category_id, None, "")
