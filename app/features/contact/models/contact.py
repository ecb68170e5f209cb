from sqlalchemy import Column, String

from app.platform.db.base import BaseModel


class Contact(BaseModel):
    __tablename__ = "contacts"
    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, index=True)
    website = Column(String(2048), nullable=False)
    phone = Column(String(32), nullable=False)

    def __repr__(self) -> str:
        return f"<Contact(email='{self.email}', website='{self.website}')>"
