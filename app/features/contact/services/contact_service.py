from sqlalchemy.ext.asyncio import AsyncSession

from app.features.contact.models.contact import Contact
from app.features.contact.schemas.contact import ContactCreate
from app.platform.logger import get_logger

logger = get_logger(__name__)


class ContactService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_contact(self, payload: ContactCreate) -> Contact:
        contact = Contact(
            name=payload.name.strip(),
            title=(payload.title or "").strip() or None,
            email=str(payload.email),
            website=payload.website,
            phone=payload.phone,
        )
        self.db.add(contact)
        await self.db.commit()
        await self.db.refresh(contact)
        logger.info(f"New contact request from {contact.email} for {contact.website}")
        return contact
