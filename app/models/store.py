from datetime import datetime, timezone
from typing import Any, Optional
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel, AutoString

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Store(SQLModel, table=True):
    """Crédentials d'une boutique Nuvemshop, une ligne par store_id."""
    __tablename__ = "stores"

    id: Optional[int] = Field(default=None, primary_key=True)
    store_id: str = Field(unique=True, index=True)

    # Tokens en texte brut pour l'instant (MVP).
    access_token: str = Field(sa_type=AutoString)
    # Nuvemshop n'expire pas ses tokens : jamais utilisé pour un refresh
    refresh_token: str | None = Field(default=None, sa_type=AutoString)
    # Indicatif seulement, aucun appel ne le vérifie
    token_expires_at: datetime | None = None

    # Réponse brute de l'installation (audit / debug)
    raw_payload: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
