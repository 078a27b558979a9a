from typing import Annotated, Optional
import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.core.config import settings
from app.core.security import read_token_subject
from app.db.session import get_db
from app.services.credential_store import StoreCredentialStore
from app.services.description_sync import DescriptionSyncFacade
from app.services.nuvemshop.auth import PlatformAuthClient
from app.services.nuvemshop.categories import CategoryClient

# Le token de session est optionnel : sans lui, on retombe sur la boutique par défaut
reusable_bearer = HTTPBearer(auto_error=False)


def get_caller_store_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(reusable_bearer)],
) -> Optional[str]:
    """
    Boutique de l'appelant, lue dans le JWT de session émis à l'installation.
    Pas de token -> None. Token invalide -> 401.
    """
    if credentials is None:
        return None

    store_id = read_token_subject(credentials.credentials)
    if store_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session token",
        )
    return store_id


def get_store_scope(
    request: Request,
    caller_store_id: Annotated[Optional[str], Depends(get_caller_store_id)],
) -> Optional[str]:
    # Ordre : paramètre d'URL {store_id}, puis token de l'appelant
    return request.path_params.get("store_id") or caller_store_id


def get_http_client() -> Optional[httpx.Client]:
    """None = un client httpx par appel. Remplacé dans les tests."""
    return None


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> StoreCredentialStore:
    return StoreCredentialStore(db)


def get_auth_client(
    stores: Annotated[StoreCredentialStore, Depends(get_credential_store)],
    http_client: Annotated[Optional[httpx.Client], Depends(get_http_client)],
) -> PlatformAuthClient:
    return PlatformAuthClient(stores, http_client=http_client)


def get_category_client(
    stores: Annotated[StoreCredentialStore, Depends(get_credential_store)],
    http_client: Annotated[Optional[httpx.Client], Depends(get_http_client)],
) -> CategoryClient:
    return CategoryClient(
        stores,
        http_client=http_client,
        single_tenant_mode=settings.SINGLE_TENANT_MODE,
    )


def get_sync_facade(
    client: Annotated[CategoryClient, Depends(get_category_client)],
) -> DescriptionSyncFacade:
    return DescriptionSyncFacade(client)
