from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.contact.schemas.contact import ContactCreate, ContactOut
from app.features.contact.services.contact_service import ContactService
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post("/contact", status_code=status.HTTP_201_CREATED)
async def create_contact(payload: ContactCreate, db: AsyncSession = Depends(get_db)):
    """Lead-capture form shown next to poor scores."""
    contact = await ContactService(db).create_contact(payload)

    return api_response(
        message="Thank you! We'll get back to you within 24 hours.",
        data=ContactOut.model_validate(contact),
        status_code=status.HTTP_201_CREATED,
    )
