# marketing_site/models/gdpr_requests.py
import enum

from sqlalchemy import Column, DateTime, Integer, String, Text

from marketing_site.database.database import Base, utcnow


class GdprRequestType(str, enum.Enum):
    export = "export"
    rectification = "rectification"
    erasure = "erasure"
    restriction = "restriction"


class GdprRequest(Base):
    __tablename__ = "gdpr_requests"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    request_type = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    ip_address = Column(String(64), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
