from sqlalchemy import Column, Integer, String, Text
from core.database import Base

class Email(Base):
    __tablename__ = "emails"

    id = Column(Integer, primary_key=True, index=True)
    sender = Column(String, nullable=False)
    recipient = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    body = Column(Text, nullable=True)
    html_body = Column(Text, nullable=True)
    # ISO-8601 UTC text, so lexical order is chronological order
    received_at = Column(String, nullable=False, index=True)
