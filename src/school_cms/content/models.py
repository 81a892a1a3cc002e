"""Content tables for the school website.

Attachment columns (``image`` / ``file``) hold the storage key of the blob the
row owns, or NULL.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, Text, inspect
from sqlalchemy.orm import Mapped, mapped_column

from school_cms.db.base import Base, IntIdMixin


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _ReprMixin:
    _repr_field = "id"

    def __repr__(self) -> str:
        state = inspect(self)
        if state.detached or state.expired:
            return f"<{type(self).__name__} at {hex(id(self))}>"
        value = getattr(self, self._repr_field, None)
        return f"<{type(self).__name__}(id={self.id}, {self._repr_field}={value!r})>"  # type: ignore[attr-defined]


class Hero(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "hero"
    _repr_field = "welcome_message"

    welcome_message: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class News(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "news"
    _repr_field = "title"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class Announcement(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "announcements"
    _repr_field = "title"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    published_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Extracurricular(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "extracurriculars"
    _repr_field = "name"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class CalendarFile(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "calendar_files"
    _repr_field = "title"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    file: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class Alumni(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "alumni"
    _repr_field = "title"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class GalleryItem(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "gallery_items"
    _repr_field = "title"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class Facility(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "facilities"
    _repr_field = "name"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class HeadmasterMessage(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "headmaster_message"
    _repr_field = "headmaster_name"

    message: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    headmaster_name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class HistorySlide(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "history_slides"
    _repr_field = "period"

    period: Mapped[str | None] = mapped_column(String(255), nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class VisionMission(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "vision_mission"
    _repr_field = "vision"

    vision: Mapped[str] = mapped_column(Text, nullable=False)
    # ordered list of mission statements
    mission: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class SchoolProfile(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "school_profile"
    _repr_field = "school_name"

    accreditation: Mapped[str] = mapped_column(String(16), nullable=False)
    teacher_count: Mapped[int] = mapped_column(Integer, nullable=False)
    staff_count: Mapped[int] = mapped_column(Integer, nullable=False)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False)
    school_name: Mapped[str] = mapped_column(String(255), nullable=False)
    npsn: Mapped[str] = mapped_column(String(32), nullable=False)
    education_level: Mapped[str] = mapped_column(String(255), nullable=False)
    school_status: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    rt_rw: Mapped[str] = mapped_column(String(32), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(16), nullable=False)
    district: Mapped[str] = mapped_column(String(255), nullable=False)
    regency: Mapped[str] = mapped_column(String(255), nullable=False)
    province: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(255), nullable=False)
    coordinates: Mapped[str] = mapped_column(String(255), nullable=False)


class OrganizationMember(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "organization_members"
    _repr_field = "name"

    role: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class StaffMember(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "staff_members"
    _repr_field = "name"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class ContactMessage(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "contact_messages"
    _repr_field = "email"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Admin(IntIdMixin, _ReprMixin, Base):
    __tablename__ = "admins"
    _repr_field = "username"

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
