#/backend/expiry_notifier/models/database.py
from sqlalchemy import create_engine, Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from datetime import datetime
from expiry_notifier.core.config import settings

Base = declarative_base()

# Create engine
engine = create_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Household(Base):
    __tablename__ = "households"

    id = Column(String(128), primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    members = relationship(
        "HouseholdMember",
        back_populates="household",
        order_by="HouseholdMember.position",
        cascade="all, delete-orphan"
    )


class HouseholdMember(Base):
    __tablename__ = "household_members"

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(String(128), ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True)
    # Not a foreign key: a member may point at a user record that no longer exists
    user_id = Column(String(128), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)

    household = relationship("Household", back_populates="members")


class User(Base):
    __tablename__ = "users"

    id = Column(String(128), primary_key=True, index=True)
    display_name = Column(String(255), nullable=True)
    fcm_token = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(128), primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    household_id = Column(String(128), nullable=True, index=True)
    expiry_date = Column(DateTime, nullable=True, index=True)  # naive UTC
    created_at = Column(DateTime, default=datetime.utcnow)
