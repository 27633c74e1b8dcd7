"""
Company model - recruiting company reference data.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship

from app.db.postgres import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    logo = Column(String(512))
    website = Column(String(512))
    location = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)

    drives = relationship("PlacementDrive", back_populates="company")

    def __repr__(self):
        return f"<Company(id={self.id}, name={self.name})>"
