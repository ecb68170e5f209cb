from sqlalchemy import Column, String

from app.platform.db.base import BaseModel


class UrlSubmission(BaseModel):
    __tablename__ = "url_submissions"
    url = Column(String(2048), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<UrlSubmission(url='{self.url}')>"
