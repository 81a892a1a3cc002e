"""Default content for a fresh database.

Each table is only seeded while it is empty, so running the seed twice is
harmless. Seeded rows carry no attachments.
"""

from __future__ import annotations

import logging
from typing import Any

from school_cms.content import models as m
from school_cms.db.uow import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_CONTENT: list[tuple[type, dict[str, Any]]] = [
    (m.Hero, {"welcome_message": "SMPN 1 Tamansari", "description": "lorem ipsum dolor sit amet"}),
    (m.CalendarFile, {"title": "2025"}),
    (
        m.HeadmasterMessage,
        {
            "message": "Selamat datang di tahun ajaran baru! Semoga kita semua dapat belajar dan berkembang bersama.",
            "description": "Pesan motivasi dari Kepala Sekolah untuk mengawali tahun ajaran baru.",
            "headmaster_name": "Dr. John Doe",
        },
    ),
    (
        m.HistorySlide,
        {"period": "1980", "text": "Sekolah didirikan dan menerima angkatan pertama."},
    ),
    (
        m.VisionMission,
        {
            "vision": "Menjadi sekolah unggul yang berkarakter dan berwawasan lingkungan.",
            "mission": [
                "Menyelenggarakan pembelajaran yang aktif dan menyenangkan.",
                "Menumbuhkan budi pekerti dan karakter siswa.",
                "Meningkatkan kualitas layanan pendidikan.",
            ],
        },
    ),
    (
        m.SchoolProfile,
        {
            "accreditation": "A",
            "teacher_count": 45,
            "staff_count": 12,
            "student_count": 500,
            "school_name": "SMP Negeri 1 Tamansari",
            "npsn": "123456789",
            "education_level": "Sekolah Menengah Pertama",
            "school_status": "Negeri",
            "address": "Jl. Merdeka No. 10",
            "rt_rw": "03/02",
            "postal_code": "10120",
            "district": "Tamansari",
            "regency": "Bogor",
            "province": "Jawa Barat",
            "country": "Indonesia",
            "coordinates": "6.6375 S, 106.7522 E",
        },
    ),
]


async def seed(uow: UnitOfWork) -> dict[str, bool]:
    """Insert default rows; returns ``{table: inserted}``."""
    result: dict[str, bool] = {}
    for model, values in DEFAULT_CONTENT:
        repo = uow.repo(model)
        table = model.__tablename__
        if await repo.count():
            logger.debug("Skipping %s: already has rows", table)
            result[table] = False
            continue
        await repo.create(**values)
        result[table] = True
    await uow.commit()
    logger.info("Seeded %d table(s)", sum(result.values()))
    return result
