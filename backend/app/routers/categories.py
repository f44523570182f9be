"""Category API routes — public listing, admin CRUD."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from app.services import category_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.post("/", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return category_service.create_category(db, payload.model_dump())


@router.put("/{slug}", response_model=CategoryOut)
def update_category(
    slug: str,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return category_service.update_category(db, slug, payload.model_dump(exclude_unset=True))


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(slug: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    category_service.delete_category(db, slug)
