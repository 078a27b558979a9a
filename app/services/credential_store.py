import logging
from typing import Any, Optional
from sqlmodel import Session, select

from app.models.store import Store, utcnow
from app.services.errors import NoStoreConfiguredError

logger = logging.getLogger(__name__)


class StoreCredentialStore:
    """Accès CRUD minimal aux crédentials des boutiques (table `stores`)."""

    def __init__(self, db: Session):
        self.db = db

    def find(self, store_id: str) -> Optional[Store]:
        statement = select(Store).where(Store.store_id == str(store_id))
        return self.db.exec(statement).first()

    def first(self) -> Optional[Store]:
        statement = select(Store).order_by(Store.id)
        return self.db.exec(statement).first()

    def upsert(self, store_id: str, **fields: Any) -> Store:
        store = self.find(store_id)
        if not store:
            logger.debug("Nouvelle boutique %s", store_id)
            store = Store(store_id=str(store_id), **fields)
        else:
            for key, value in fields.items():
                setattr(store, key, value)
            store.updated_at = utcnow()

        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        return store


def resolve_store(
    stores: StoreCredentialStore,
    store_id: Optional[str] = None,
    single_tenant_mode: bool = True,
    missing_status: Optional[int] = None,
) -> Store:
    """
    Règle unique de résolution de la boutique :
    1. store_id explicite -> recherche exacte (pas de repli)
    2. sinon, en mode mono-boutique -> première boutique installée
    3. sinon -> NoStoreConfiguredError (400 par défaut, `missing_status` sinon)
    """
    if store_id:
        store = stores.find(store_id)
        if not store:
            raise NoStoreConfiguredError(store_id, missing_status)
        return store

    if single_tenant_mode:
        store = stores.first()
        if store:
            return store

    raise NoStoreConfiguredError(status_code=missing_status)
