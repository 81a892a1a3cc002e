from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from school_cms.db.base import Base

from . import models as m
from . import schemas as s

COLLECTION_OPERATIONS = frozenset({"list", "get", "create", "update", "delete"})
SINGLETON_OPERATIONS = frozenset({"get", "update"})


@dataclass(frozen=True)
class CrudResource:
    """Declarative description of one REST resource.

    ``attachment_field`` names the model column holding the storage key of the
    resource's file (the multipart part uses the same name); ``None`` for
    resources without files.
    """

    name: str
    path: str
    label: str
    model: type[Base]
    create_schema: type[BaseModel]
    read_schema: type[BaseModel]
    update_schema: Optional[type[BaseModel]] = None
    attachment_field: Optional[str] = None
    singleton: bool = False
    operations: frozenset[str] = COLLECTION_OPERATIONS
    public_operations: frozenset[str] = field(default_factory=frozenset)

    @property
    def url_field(self) -> Optional[str]:
        return f"{self.attachment_field}_url" if self.attachment_field else None

    @property
    def key_prefix(self) -> str:
        return self.name

    @property
    def tag(self) -> str:
        return self.name.replace("_", " ")

    def allows(self, operation: str) -> bool:
        return operation in self.operations


HERO = CrudResource(
    name="hero",
    path="/api/hero",
    label="Hero",
    model=m.Hero,
    create_schema=s.HeroIn,
    update_schema=s.HeroUpdate,
    read_schema=s.HeroOut,
    attachment_field="image",
    singleton=True,
    operations=SINGLETON_OPERATIONS,
)

NEWS = CrudResource(
    name="news",
    path="/api/news",
    label="News",
    model=m.News,
    create_schema=s.NewsIn,
    update_schema=s.NewsUpdate,
    read_schema=s.NewsOut,
    attachment_field="image",
)

ANNOUNCEMENTS = CrudResource(
    name="announcements",
    path="/api/announcements",
    label="Announcement",
    model=m.Announcement,
    create_schema=s.AnnouncementIn,
    update_schema=s.AnnouncementUpdate,
    read_schema=s.AnnouncementOut,
)

EXTRACURRICULARS = CrudResource(
    name="extracurriculars",
    path="/api/extracurriculars",
    label="Extracurricular",
    model=m.Extracurricular,
    create_schema=s.NamedIn,
    update_schema=s.NamedUpdate,
    read_schema=s.NamedOut,
    attachment_field="image",
)

CALENDAR = CrudResource(
    name="calendar",
    path="/api/kalender",
    label="Calendar",
    model=m.CalendarFile,
    create_schema=s.CalendarIn,
    update_schema=s.CalendarUpdate,
    read_schema=s.CalendarOut,
    attachment_field="file",
)

ALUMNI = CrudResource(
    name="alumni",
    path="/api/alumni",
    label="Alumni",
    model=m.Alumni,
    create_schema=s.AlumniIn,
    update_schema=s.AlumniUpdate,
    read_schema=s.AlumniOut,
    attachment_field="image",
)

GALLERY = CrudResource(
    name="gallery",
    path="/api/galeri",
    label="Gallery item",
    model=m.GalleryItem,
    create_schema=s.GalleryIn,
    update_schema=s.GalleryUpdate,
    read_schema=s.GalleryOut,
    attachment_field="image",
)

FACILITIES = CrudResource(
    name="facilities",
    path="/api/sarana",
    label="Facility",
    model=m.Facility,
    create_schema=s.NamedIn,
    update_schema=s.NamedUpdate,
    read_schema=s.NamedOut,
    attachment_field="image",
)

HEADMASTER_MESSAGE = CrudResource(
    name="headmaster_message",
    path="/api/headmaster-message",
    label="Headmaster message",
    model=m.HeadmasterMessage,
    create_schema=s.HeadmasterMessageIn,
    update_schema=s.HeadmasterMessageUpdate,
    read_schema=s.HeadmasterMessageOut,
    attachment_field="image",
    singleton=True,
    operations=SINGLETON_OPERATIONS,
)

HISTORY = CrudResource(
    name="history",
    path="/api/sejarah",
    label="History slide",
    model=m.HistorySlide,
    create_schema=s.HistorySlideIn,
    update_schema=s.HistorySlideUpdate,
    read_schema=s.HistorySlideOut,
    attachment_field="image",
)

VISION_MISSION = CrudResource(
    name="vision_mission",
    path="/api/visi-misi",
    label="Vision and mission",
    model=m.VisionMission,
    create_schema=s.VisionMissionIn,
    update_schema=s.VisionMissionUpdate,
    read_schema=s.VisionMissionOut,
    singleton=True,
    operations=SINGLETON_OPERATIONS,
)

SCHOOL_PROFILE = CrudResource(
    name="school_profile",
    path="/api/schoolinfo",
    label="School info",
    model=m.SchoolProfile,
    create_schema=s.SchoolProfileIn,
    update_schema=s.SchoolProfileUpdate,
    read_schema=s.SchoolProfileOut,
    singleton=True,
    operations=SINGLETON_OPERATIONS,
)

ORGANIZATION = CrudResource(
    name="organization",
    path="/api/strukturOrganisasi",
    label="Organization member",
    model=m.OrganizationMember,
    create_schema=s.PersonIn,
    update_schema=s.PersonUpdate,
    read_schema=s.PersonOut,
    attachment_field="image",
)

STAFF = CrudResource(
    name="staff",
    path="/api/staffandteachers",
    label="Staff member",
    model=m.StaffMember,
    create_schema=s.PersonIn,
    update_schema=s.PersonUpdate,
    read_schema=s.PersonOut,
    attachment_field="image",
)

CONTACTS = CrudResource(
    name="contacts",
    path="/api/contacts",
    label="Contact",
    model=m.ContactMessage,
    create_schema=s.ContactIn,
    read_schema=s.ContactOut,
    operations=frozenset({"list", "get", "create", "delete"}),
    public_operations=frozenset({"create"}),
)

RESOURCES: tuple[CrudResource, ...] = (
    HERO,
    NEWS,
    ANNOUNCEMENTS,
    EXTRACURRICULARS,
    CALENDAR,
    ALUMNI,
    GALLERY,
    FACILITIES,
    HEADMASTER_MESSAGE,
    HISTORY,
    VISION_MISSION,
    SCHOOL_PROFILE,
    ORGANIZATION,
    STAFF,
    CONTACTS,
)
