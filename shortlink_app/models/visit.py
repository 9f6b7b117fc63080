from sqlalchemy import Column, Integer, String, DateTime
from shortlink_app.clock import utcnow
from shortlink_app.database.connection import Base


class Visit(Base):
    """
    One successful redirect through a short link.

    `short` is not a foreign key: visits outlive the link they point to.
    """
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    short = Column(String(8), nullable=False, index=True)
    device = Column(String(32), nullable=False)
    country = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
