# Database Models for the Creator/Venue Marketplace - account tables

from sqlalchemy import Column, String, Integer, DateTime, Text, Enum, Float
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import uuid
import enum

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())

# Enums
class UserType(str, enum.Enum):
    CREATOR = "creator"
    VENUE = "venue"


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"


# Models
class Creator(Base):
    """Creator account."""
    __tablename__ = "creators"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)
    bio = Column(Text)
    avatar = Column(String(500))
    city = Column(String(100))

    instagram_handle = Column(String(100))
    instagram_followers = Column(Integer, default=0)
    tiktok_handle = Column(String(100))
    tiktok_followers = Column(Integer, default=0)
    engagement_rate = Column(Float, default=0.0)

    status = Column(Enum(AccountStatus, values_callable=lambda x: [e.value for e in x], name="accountstatus"), default=AccountStatus.ACTIVE)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    applications = relationship("Application", back_populates="creator", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="creator", cascade="all, delete-orphan")
    conversations = relationship("Conversation", back_populates="creator", cascade="all, delete-orphan")

    @property
    def display_name(self):
        return self.name


class Venue(Base):
    """Business account that posts sponsorship campaigns."""
    __tablename__ = "venues"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)
    category = Column(String(100))
    description = Column(Text)
    logo = Column(String(500))
    address = Column(String(255))
    city = Column(String(100))
    phone = Column(String(30))
    website = Column(String(500))

    instagram_handle = Column(String(100))
    facebook_handle = Column(String(100))
    tiktok_handle = Column(String(100))

    # Reputation
    rating = Column(Float, default=0.0)
    total_campaigns = Column(Integer, default=0, nullable=False)
    response_time = Column(String(50))

    status = Column(Enum(AccountStatus, values_callable=lambda x: [e.value for e in x], name="accountstatus"), default=AccountStatus.ACTIVE)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    campaigns = relationship("Campaign", back_populates="venue", cascade="all, delete-orphan")
    conversations = relationship("Conversation", back_populates="venue", cascade="all, delete-orphan")

    @property
    def display_name(self):
        return self.company_name
