# marketing_site/models/contact_messages.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from marketing_site.database.database import Base, utcnow


class ContactMessage(Base):
    __tablename__ = "contact_messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    message = Column(Text, nullable=False)
    consent = Column(Boolean, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    ip_address = Column(String(64), nullable=True)
