import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .db import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    id = Column(String(32), primary_key=True, default=_new_id, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class Company(TimestampMixin, Base):
    __tablename__ = "companies"

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    icon = Column(String(100), default="")
    image_url = Column(String(500))
    color = Column(String(100), default="")  # 渐变色 token，如 from-blue-600 to-cyan-600
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)

    features = relationship(
        "CompanyFeature",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="CompanyFeature.order",
    )
    services = relationship(
        "CompanyService",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="CompanyService.order",
    )


class CompanyFeature(TimestampMixin, Base):
    __tablename__ = "company_features"

    company_id = Column(String(32), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False, default=0)

    company = relationship("Company", back_populates="features")


class CompanyService(TimestampMixin, Base):
    __tablename__ = "company_services"

    company_id = Column(String(32), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    order = Column(Integer, nullable=False, default=0)

    company = relationship("Company", back_populates="services")


class Statistic(TimestampMixin, Base):
    __tablename__ = "statistics"

    label = Column(String(255), nullable=False)
    value = Column(String(100), nullable=False)  # 展示用字符串，如 "10,000+"、"$500M+"
    icon = Column(String(100), default="")
    image_url = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)


class Testimonial(TimestampMixin, Base):
    __tablename__ = "testimonials"

    name = Column(String(255), nullable=False)
    company = Column(String(255))
    role = Column(String(255))
    content = Column(Text, nullable=False)
    # 1-5 的范围只在接口层校验，数据库不约束
    rating = Column(Integer, nullable=False, default=5)
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)


class Service(TimestampMixin, Base):
    __tablename__ = "services"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(50), nullable=False, default="property")
    icon = Column(String(100), default="")
    image_url = Column(String(500))
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)


class ContactMessage(TimestampMixin, Base):
    __tablename__ = "contact_messages"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    company = Column(String(255))
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255))
    role = Column(String(50), nullable=False, default="admin")


class WebsiteSection(TimestampMixin, Base):
    __tablename__ = "website_sections"

    title = Column(String(255), nullable=False)
    subtitle = Column(Text)
    content = Column(Text)
    type = Column(String(50), nullable=False, default="content")
    is_active = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
