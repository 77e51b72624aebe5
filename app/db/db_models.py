import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, Integer, Float, Boolean, Text, DateTime,
    ForeignKey, JSON,
)
from sqlalchemy.orm import relationship, DeclarativeBase


class Base(DeclarativeBase):
    pass


# ─── Helpers ─────────────────────────────────────────────────────────

def generate_uuid():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, matching the timezone-less DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ─── Document collections ────────────────────────────────────────────

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user")
    phone = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    occupation = Column(String, nullable=False, default="")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    worker_profile = relationship("WorkerProfile", back_populates="user", uselist=False)


class WorkerProfile(Base):
    __tablename__ = "worker_profiles"

    id = Column(String, ForeignKey("users.id"), primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False, default="")
    rating = Column(Float, default=0.0)
    total_ratings = Column(Integer, default=0)
    hourly_rate = Column(Float, nullable=False)
    advance_payment = Column(Float, nullable=False)
    available_times = Column(String, nullable=False)
    previous_works = Column(JSON, default=list)
    bio = Column(Text, nullable=False, default="")
    experience = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    user = relationship("User", back_populates="worker_profile")
    services = relationship(
        "WorkerService", back_populates="worker", lazy="selectin",
        cascade="all, delete-orphan", order_by="WorkerService.position",
    )
    reviews = relationship(
        "WorkerReview", back_populates="worker", lazy="selectin",
        cascade="all, delete-orphan", order_by="WorkerReview.created_at",
    )


class WorkerService(Base):
    __tablename__ = "worker_services"

    id = Column(String, primary_key=True, default=generate_uuid)
    worker_id = Column(String, ForeignKey("worker_profiles.id"), nullable=False, index=True)
    service_type = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    worker = relationship("WorkerProfile", back_populates="services")


class WorkerReview(Base):
    __tablename__ = "worker_reviews"

    id = Column(String, primary_key=True, default=generate_uuid)
    worker_id = Column(String, ForeignKey("worker_profiles.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    worker = relationship("WorkerProfile", back_populates="reviews")


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    icon = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String, nullable=False)
    user_phone = Column(String, nullable=False, default="")
    user_email = Column(String, nullable=False)
    worker_id = Column(String, ForeignKey("worker_profiles.id"), nullable=False, index=True)
    worker_name = Column(String, nullable=False)
    worker_email = Column(String, nullable=False)
    service_type = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    scheduled_time = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")
    payment_status = Column(String, nullable=False, default="pending")
    payment_method = Column(String, nullable=False)
    advance_amount = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
    accepted_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)


# ─── Key/value store ─────────────────────────────────────────────────

class KVEntry(Base):
    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
