"""Display helpers shared by the tree cards and the detail drawer."""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ..models import Gender

MONTHS_ID = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def parse_date(value: str | None) -> Optional[date]:
    """ISO date (or datetime) string -> date; malformed or empty -> None."""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def format_year(value: str | None) -> str:
    d = parse_date(value)
    return str(d.year) if d else ""


def life_span(birth_date: str | None, death_date: str | None) -> str:
    """'1950 - 2010' or '1950 - Present'."""
    end = format_year(death_date) if death_date else "Present"
    return f"{format_year(birth_date)} - {end}"


def age_years(birth_date: str | None, death_date: str | None = None, today: date | None = None) -> Optional[int]:
    """Difference of calendar years, as the cards have always shown it."""
    birth = parse_date(birth_date)
    if birth is None:
        return None
    end = parse_date(death_date) if death_date else (today or date.today())
    if end is None:
        return None
    return end.year - birth.year


def age_label(birth_date: str | None, death_date: str | None = None, today: date | None = None) -> str:
    age = age_years(birth_date, death_date, today)
    if age is None:
        return ""
    return f"({age} years)" if death_date else f"({age} years old)"


def format_date_id(value: str | None) -> str:
    """'17 Agustus 1945'; '-' when missing."""
    d = parse_date(value)
    if d is None:
        return "-"
    return f"{d.day} {MONTHS_ID[d.month - 1]} {d.year}"


def initials(fullname: str) -> str:
    parts = (fullname or "").strip().split()
    if len(parts) >= 2:
        return (parts[0][0] + parts[1][0]).upper()
    return (fullname or "").strip()[:2].upper()


def gender_label(gender: Gender) -> str:
    return "Pria" if gender is Gender.MALE else "Wanita"


def whatsapp_link(number: str | None) -> Optional[str]:
    digits = re.sub(r"\D", "", number or "")
    return f"https://wa.me/{digits}" if digits else None
