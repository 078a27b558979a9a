import logging
from fastapi import APIRouter, Depends, Query

from app.api import deps
from app.api.responses import envelope
from app.core.security import create_access_token
from app.services.nuvemshop.auth import PlatformAuthClient

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/install")
def install(
    code: str = Query(min_length=1),
    auth_client: PlatformAuthClient = Depends(deps.get_auth_client),
):
    """
    Callback d'installation de l'app Nuvemshop.
    1. Échange le code contre un access token (stocké par boutique).
    2. Renvoie un token de session pour que le panneau marchand s'identifie
       ensuite avec `Authorization: Bearer <token>`.
    """
    store = auth_client.authorize(code)

    return envelope(
        data={
            "store_id": store.store_id,
            "token_expires_at": store.token_expires_at,
            "session_token": create_access_token(subject=store.store_id),
        },
        message="Authorization completed successfully",
    )
