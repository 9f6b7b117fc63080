from sqlalchemy import Column, Integer, String, Text, DateTime
from shortlink_app.database.connection import Base


class URL(Base):
    """
    A shortened link.

    Rows are short-lived: a link expires `link_ttl_seconds` after creation
    and the row is deleted the first time someone follows it afterwards.
    """
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    original = Column(Text, nullable=False)
    # unique=True + index=True creates a unique index on the lookup key
    short = Column(String(8), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    hits = Column(Integer, nullable=False, default=0, server_default="0")
    # Device/country hints sent by whoever created the link
    user_agent = Column(String(255), nullable=True)
    user_region = Column(String(255), nullable=True)
