import logging
from math import ceil
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlmodel import Session, select

from app.api import deps
from app.api.responses import envelope
from app.db.session import get_db
from app.models.description import CategoryDescription
from app.models.store import utcnow
from app.schemas.description import DescriptionCreate, DescriptionUpdate
from app.services.description_sync import DescriptionSyncFacade
from app.services.errors import (
    DescriptionAppError,
    NoStoreConfiguredError,
    NotFoundError,
    ValidationFailedError,
)
from app.services.nuvemshop.categories import CategoryClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(db: Session, description_id: int) -> CategoryDescription:
    description = db.get(CategoryDescription, description_id)
    if not description:
        raise NotFoundError("Description not found")
    return description


def _push_to_platform(
    facade: DescriptionSyncFacade,
    store_scope: Optional[str],
    category_id: str,
    html_content: str,
) -> Optional[bool]:
    """
    Pousse la description vers Nuvemshop, au mieux.
    None = aucune boutique configurée, False = échec (la base locale n'est pas annulée).
    """
    try:
        store_id = facade.resolve_store_id(store_scope)
    except NoStoreConfiguredError:
        logger.info("Aucune boutique configurée : catégorie %s non synchronisée", category_id)
        return None

    try:
        facade.set_description(store_id, category_id, None, html_content)
    except DescriptionAppError as e:
        logger.warning("Synchronisation Nuvemshop échouée pour la catégorie %s: %s", category_id, e.message)
        return False
    return True


def _sync_message(action: str, synced: Optional[bool]) -> str:
    if synced is None:
        return f"Description {action} successfully"
    if synced:
        return f"Description {action} and synced with Nuvemshop successfully"
    return f"Description {action} successfully, but Nuvemshop sync failed"


@router.get("/")
def list_descriptions(
    page: int = Query(1, ge=1),
    per_page: int = Query(15, ge=1, le=100),
    db: Session = Depends(get_db),
):
    total = db.exec(select(func.count()).select_from(CategoryDescription)).one()
    items = db.exec(
        select(CategoryDescription)
        .order_by(CategoryDescription.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
    ).all()

    first_item = (page - 1) * per_page + 1 if items else None
    return envelope(
        data=items,
        message="Descriptions retrieved successfully",
        pagination={
            "current_page": page,
            "total": total,
            "per_page": per_page,
            "last_page": max(1, ceil(total / per_page)),
            "from": first_item,
            "to": first_item + len(items) - 1 if items else None,
        },
    )


@router.get("/categories")
def list_platform_categories(
    client: CategoryClient = Depends(deps.get_category_client),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    """Catégories brutes de Nuvemshop (une page de 100)."""
    categories = client.list_categories(store_scope)
    return envelope(data=categories, message="Categories fetched successfully")


@router.post("/")
def create_description(
    payload: DescriptionCreate,
    db: Session = Depends(get_db),
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    existing = db.exec(
        select(CategoryDescription).where(CategoryDescription.category_id == payload.category_id)
    ).first()
    if existing:
        raise ValidationFailedError({"category_id": ["The category id has already been taken."]})

    description = CategoryDescription(**payload.model_dump())
    db.add(description)
    db.commit()
    db.refresh(description)

    synced = _push_to_platform(facade, store_scope, description.category_id, description.html_content)

    return envelope(
        data=description,
        message=_sync_message("created", synced),
        status_code=201,
    )


@router.get("/category/{category_id}")
def read_description_by_category(category_id: str, db: Session = Depends(get_db)):
    description = db.exec(
        select(CategoryDescription).where(CategoryDescription.category_id == category_id)
    ).first()
    if not description:
        raise NotFoundError("Description not found for this category")

    return envelope(data=description, message="Description retrieved successfully")


@router.get("/{description_id}")
def read_description(description_id: int, db: Session = Depends(get_db)):
    description = _get_or_404(db, description_id)
    return envelope(data=description, message="Description retrieved successfully")


@router.put("/{description_id}")
def update_description(
    description_id: int,
    payload: DescriptionUpdate,
    db: Session = Depends(get_db),
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    description = _get_or_404(db, description_id)

    description.content = payload.content
    description.html_content = payload.html_content
    description.updated_at = utcnow()
    db.add(description)
    db.commit()
    db.refresh(description)

    synced = _push_to_platform(facade, store_scope, description.category_id, description.html_content)

    return envelope(data=description, message=_sync_message("updated", synced))


@router.delete("/{description_id}")
def delete_description(
    description_id: int,
    db: Session = Depends(get_db),
    facade: DescriptionSyncFacade = Depends(deps.get_sync_facade),
    store_scope: Optional[str] = Depends(deps.get_store_scope),
):
    description = _get_or_404(db, description_id)
    category_id = description.category_id

    db.delete(description)
    db.commit()

    # Chaîne vide = suppression de la description côté Nuvemshop
    synced = _push_to_platform(facade, store_scope, category_id, "")

    return envelope(message=_sync_message("deleted", synced))
