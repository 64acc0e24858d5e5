from sqlalchemy import JSON, CheckConstraint, Column, Date, Integer, String, Text

from core.models import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    location = Column(String(300), nullable=False)
    pax = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    featured_image_index = Column(Integer, nullable=False, default=0)
    event_date = Column(Date, nullable=False, index=True)
    category = Column(String(20), nullable=False, index=True)
    flavors = Column(JSON, nullable=False, default=list)

    __table_args__ = (CheckConstraint("pax > 0", name="ck_events_pax_positive"),)
