from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from app.api.responses import envelope
from app.db.session import get_db
from app.models.description import CategoryDescription

router = APIRouter()

# Lecture seule, pour le widget de la vitrine

@router.get("/{category_id}")
def read_public_description(category_id: str, db: Session = Depends(get_db)):
    description = db.exec(
        select(CategoryDescription).where(CategoryDescription.category_id == category_id)
    ).first()

    if not description:
        return envelope(
            message="Description not found for this category",
            status_code=404,
            category_id=category_id,
        )

    return envelope(
        data=description.model_dump(),
        message="Description retrieved successfully",
    )

@router.get("")
def read_public_descriptions(db: Session = Depends(get_db)):
    descriptions = db.exec(select(CategoryDescription).order_by(CategoryDescription.id)).all()

    organized = {
        d.category_id: d.model_dump(exclude={"created_at"})
        for d in descriptions
    }

    return envelope(
        data=organized,
        message="All descriptions retrieved successfully",
        total=len(organized),
    )
