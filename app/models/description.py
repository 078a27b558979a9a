from datetime import datetime
from typing import Optional
from sqlmodel import Field, SQLModel, AutoString

from app.models.store import utcnow

class CategoryDescription(SQLModel, table=True):
    __tablename__ = "category_descriptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    category_id: str = Field(unique=True, index=True)

    content: str = Field(sa_type=AutoString)       # texte brut
    html_content: str = Field(sa_type=AutoString)  # ce qui part chez Nuvemshop

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
