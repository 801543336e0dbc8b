from sqlalchemy import Boolean, Column, DateTime, Float, Integer, Text
from sqlalchemy.orm import relationship
from jobsearch.database import Base

OPEN_STATUS = "open"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    summary = Column(Text)
    description = Column(Text)
    category = Column(Text)
    price = Column(Float)
    location = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)
    remote_ok = Column(Boolean, nullable=False, default=False)
    urgency = Column(Text)
    experience_level = Column(Text)
    materials_provided = Column(Boolean, nullable=False, default=False)
    start_date = Column(DateTime)
    status = Column(Text, nullable=False, default=OPEN_STATUS)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)

    tags = relationship("Tag", secondary="job_tags", back_populates="jobs", lazy="selectin")
