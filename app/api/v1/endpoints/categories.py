from typing import Optional
from fastapi import APIRouter, Depends

from app.api import deps
from app.api.responses import envelope
from app.schemas.description import CategoryDescriptionUpdate
from app.services.description_sync import DescriptionSyncFacade

# Variante "platform" : aucune donnée locale, tout passe par Nuvemshop.
# Monté sur /api/descriptions et /api/stores/{store_id}/descriptions.
router = APIRouter()

@router.get("/categories")
def list_category_descriptions(
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    data = facade.list_with_descriptions(store_scope)
    return envelope(data=data, message="Categories fetched successfully")

@router.get("/category/{category_id}")
def read_category_description(
    category_id: str,
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    data = facade.get_description(category_id, store_scope)
    return envelope(data=data, message="Description retrieved successfully")

@router.put("/category/{category_id}")
def update_category_description(
    category_id: str,
    payload: CategoryDescriptionUpdate,
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    # Une écriture exige une boutique précise : 404 si elle n'existe pas
    store_id = facade.resolve_store_id(store_scope, missing_status=404)
    data = facade.set_description(store_id, category_id, payload.content, payload.html_content)
    return envelope(data=data, message="Description synced with Nuvemshop successfully")

@router.delete("/category/{category_id}")
def delete_category_description(
    category_id: str,
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    store_id = facade.resolve_store_id(store_scope, missing_status=404)
    facade.clear_description(store_id, category_id)
    return envelope(message="Description removed from Nuvemshop successfully")
