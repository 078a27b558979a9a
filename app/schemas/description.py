from typing import Optional
from pydantic import BaseModel, Field

# Ce que le panneau marchand envoie pour créer une description (variante locale)
class DescriptionCreate(BaseModel):
    category_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    html_content: str = Field(min_length=1)

class DescriptionUpdate(BaseModel):
    content: str = Field(min_length=1)
    html_content: str = Field(min_length=1)

# Variante plateforme : seul html_content part chez Nuvemshop,
# content est accepté mais ignoré (pas de champ texte brut côté Nuvemshop)
class CategoryDescriptionUpdate(BaseModel):
    content: Optional[str] = None
    html_content: str
