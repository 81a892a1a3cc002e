"""Request/response models.

JSON keys are camelCase (``welcomeMessage``, ``publishedAt``); the vision and
school-profile resources keep their Indonesian keys through explicit aliases.
Read models of attachable resources carry ``imageUrl`` / ``fileUrl``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class Read(Schema):
    id: int


class ImageRead(Read):
    image: Optional[str] = None
    image_url: Optional[str] = None


# ---------- hero ----------


class HeroIn(Schema):
    welcome_message: str = Field(min_length=1)
    description: str


class HeroUpdate(Schema):
    welcome_message: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class HeroOut(ImageRead):
    welcome_message: str
    description: str


# ---------- news ----------


class NewsIn(Schema):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    published_at: datetime


class NewsUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    published_at: Optional[datetime] = None


class NewsOut(ImageRead):
    title: str
    description: Optional[str] = None
    published_at: datetime


# ---------- announcements ----------


class AnnouncementIn(Schema):
    title: str = Field(min_length=1)
    description: str
    published_date: datetime


class AnnouncementUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    published_date: Optional[datetime] = None


class AnnouncementOut(Read):
    title: str
    description: str
    published_date: datetime


# ---------- name/description pairs (extracurriculars, facilities) ----------


class NamedIn(Schema):
    name: str = Field(min_length=1)
    description: str


class NamedUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class NamedOut(ImageRead):
    name: str
    description: str


# ---------- calendar ----------


class CalendarIn(Schema):
    title: str = Field(min_length=1)


class CalendarUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1)


class CalendarOut(Read):
    title: str
    file: Optional[str] = None
    file_url: Optional[str] = None


# ---------- alumni ----------


class AlumniIn(Schema):
    title: str = Field(min_length=1)
    description: str


class AlumniUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class AlumniOut(ImageRead):
    title: str
    description: str


# ---------- gallery ----------


class GalleryIn(Schema):
    title: str = Field(min_length=1)


class GalleryUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1)


class GalleryOut(ImageRead):
    title: str


# ---------- headmaster message ----------


class HeadmasterMessageIn(Schema):
    message: str = Field(min_length=1)
    description: str
    headmaster_name: str = Field(min_length=1)


class HeadmasterMessageUpdate(Schema):
    message: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    headmaster_name: Optional[str] = Field(None, min_length=1)


class HeadmasterMessageOut(ImageRead):
    message: str
    description: str
    headmaster_name: str


# ---------- history ----------


class HistorySlideIn(Schema):
    period: Optional[str] = None
    text: str = Field(min_length=1)


class HistorySlideUpdate(Schema):
    period: Optional[str] = None
    text: Optional[str] = Field(None, min_length=1)


class HistorySlideOut(ImageRead):
    period: Optional[str] = None
    text: str


# ---------- vision & mission ----------


class VisionMissionIn(Schema):
    vision: str = Field(alias="visi", min_length=1)
    mission: list[str] = Field(alias="misi", default_factory=list)


class VisionMissionUpdate(Schema):
    vision: Optional[str] = Field(None, alias="visi", min_length=1)
    mission: Optional[list[str]] = Field(None, alias="misi")


class VisionMissionOut(Read):
    vision: str = Field(alias="visi")
    mission: list[str] = Field(alias="misi")


# ---------- school profile ----------


class SchoolProfileIn(Schema):
    accreditation: str = Field(alias="akreditasi")
    teacher_count: int = Field(alias="jumlahGuru", ge=0)
    staff_count: int = Field(alias="tenagaPendidikan", ge=0)
    student_count: int = Field(alias="jumlahSiswa", ge=0)
    school_name: str = Field(alias="namaSekolah", min_length=1)
    npsn: str = Field(alias="nspn")
    education_level: str = Field(alias="jenjangPendidikan")
    school_status: str = Field(alias="statusSekolah")
    address: str = Field(alias="alamat")
    rt_rw: str = Field(alias="rtRw")
    postal_code: str = Field(alias="kodePos")
    district: str = Field(alias="kecamatan")
    regency: str = Field(alias="kabKota")
    province: str = Field(alias="provinsi")
    country: str = Field(alias="negara")
    coordinates: str = Field(alias="posisiGeografis")


class SchoolProfileUpdate(Schema):
    accreditation: Optional[str] = Field(None, alias="akreditasi")
    teacher_count: Optional[int] = Field(None, alias="jumlahGuru", ge=0)
    staff_count: Optional[int] = Field(None, alias="tenagaPendidikan", ge=0)
    student_count: Optional[int] = Field(None, alias="jumlahSiswa", ge=0)
    school_name: Optional[str] = Field(None, alias="namaSekolah", min_length=1)
    npsn: Optional[str] = Field(None, alias="nspn")
    education_level: Optional[str] = Field(None, alias="jenjangPendidikan")
    school_status: Optional[str] = Field(None, alias="statusSekolah")
    address: Optional[str] = Field(None, alias="alamat")
    rt_rw: Optional[str] = Field(None, alias="rtRw")
    postal_code: Optional[str] = Field(None, alias="kodePos")
    district: Optional[str] = Field(None, alias="kecamatan")
    regency: Optional[str] = Field(None, alias="kabKota")
    province: Optional[str] = Field(None, alias="provinsi")
    country: Optional[str] = Field(None, alias="negara")
    coordinates: Optional[str] = Field(None, alias="posisiGeografis")


class SchoolProfileOut(SchoolProfileIn, Read):
    pass


# ---------- people (organization structure, staff & teachers) ----------


class PersonIn(Schema):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)


class PersonUpdate(Schema):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = Field(None, min_length=1)


class PersonOut(ImageRead):
    name: str
    role: str


# ---------- contact messages ----------


class ContactIn(Schema):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    message: str = Field(min_length=1)


class ContactOut(Read):
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    created_at: datetime


# ---------- admin ----------


class LoginIn(Schema):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenOut(Schema):
    token: str
