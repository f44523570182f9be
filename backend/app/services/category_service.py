"""Event categories."""
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.models.category import Category
from app.services.errors import CategoryExists, CategoryNotFound

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"slug": "technologie", "name_fr": "Technologie", "name_en": "Technology"},
    {"slug": "culture", "name_fr": "Culture", "name_en": "Culture"},
    {"slug": "sport", "name_fr": "Sport", "name_en": "Sports"},
    {"slug": "gastronomie", "name_fr": "Gastronomie", "name_en": "Food & Drink"},
    {"slug": "musique", "name_fr": "Musique", "name_en": "Music"},
    {"slug": "art", "name_fr": "Art", "name_en": "Art"},
    {"slug": "business", "name_fr": "Business", "name_en": "Business"},
    {"slug": "nature", "name_fr": "Nature", "name_en": "Nature"},
]


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name_fr.asc()).all()


def get_category(db: Session, slug: str) -> Category:
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise CategoryNotFound()
    return category


def seed_default_categories(db: Session) -> int:
    """Insert any missing default category; returns how many were added."""
    existing = {slug for (slug,) in db.query(Category.slug).all()}
    added = 0
    for data in DEFAULT_CATEGORIES:
        if data["slug"] not in existing:
            db.add(Category(**data))
            added += 1
    db.commit()
    if added:
        logger.info("Seeded %d default categories", added)
    return added


def create_category(db: Session, data: dict[str, Any]) -> Category:
    if db.query(Category).filter(Category.slug == data["slug"]).first():
        raise CategoryExists()
    category = Category(**data)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Created category %s", category.slug)
    return category


def update_category(db: Session, slug: str, updates: dict[str, Any]) -> Category:
    category = get_category(db, slug)
    for field, value in updates.items():
        if value is not None:
            setattr(category, field, value)
    db.commit()
    db.refresh(category)
    logger.info("Updated category %s", slug)
    return category


def delete_category(db: Session, slug: str) -> None:
    category = get_category(db, slug)
    db.delete(category)
    db.commit()
    logger.info("Deleted category %s", slug)
