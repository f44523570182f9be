"""Category ORM model."""
from sqlalchemy import Column, String
from app.database import Base


class Category(Base):
    __tablename__ = "categories"

    slug = Column(String(50), primary_key=True)
    name_fr = Column(String(100), nullable=False)
    name_en = Column(String(100), nullable=False)
