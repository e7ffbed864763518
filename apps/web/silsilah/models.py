"""Data classes for family tree entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


def _opt_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _id_tuple(values: Any) -> Tuple[str, ...]:
    if not values:
        return ()
    return tuple(str(v) for v in values)


@dataclass(frozen=True)
class Member:
    """One flat record of the member store, as sent by the backend."""

    id: str
    fullname: str
    gender: Gender
    depth: int = 0
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None
    spouse_id: str | None = None
    parent_ids: Tuple[str, ...] = ()
    children_ids: Tuple[str, ...] = ()
    domicile: str | None = None
    nickname: str | None = None
    bio: str | None = None
    photo_url: str | None = None

    @property
    def has_death_date(self) -> bool:
        return bool(self.death_date)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Member":
        """
        Build a Member from the backend's camelCase JSON.

        Raises ValueError when id, fullname or gender are missing or invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"member record must be an object, got {type(data).__name__}")
        if data.get("id") in (None, ""):
            raise ValueError("member record without id")
        if not data.get("fullname"):
            raise ValueError(f"member {data.get('id')} without fullname")
        try:
            gender = Gender(str(data.get("gender") or "").lower())
        except ValueError:
            raise ValueError(f"member {data.get('id')} has invalid gender {data.get('gender')!r}") from None

        return cls(
            id=str(data["id"]),
            fullname=str(data["fullname"]),
            gender=gender,
            depth=int(data.get("depth") or 0),
            birth_date=_opt_str(data.get("birthDate")),
            death_date=_opt_str(data.get("deathDate")),
            spouse_id=_opt_str(data.get("spouseId")),
            parent_ids=_id_tuple(data.get("parentIds")),
            children_ids=_id_tuple(data.get("childrenIds")),
            domicile=_opt_str(data.get("domicile")),
            nickname=_opt_str(data.get("nickname")),
            bio=_opt_str(data.get("bio")),
            photo_url=_opt_str(data.get("photoUrl")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fullname": self.fullname,
            "nickname": self.nickname,
            "gender": self.gender.value,
            "depth": self.depth,
            "birthDate": self.birth_date,
            "deathDate": self.death_date,
            "spouseId": self.spouse_id,
            "parentIds": list(self.parent_ids),
            "childrenIds": list(self.children_ids),
            "domicile": self.domicile,
            "bio": self.bio,
            "photoUrl": self.photo_url,
        }


@dataclass(frozen=True)
class FamilyTreeData:
    members: Tuple[Member, ...]
    root_id: str  # id of the top ancestor the tree starts from

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FamilyTreeData":
        if not isinstance(data, dict):
            raise ValueError("family tree payload must be an object")
        members = data.get("members")
        if not isinstance(members, list):
            raise ValueError("family tree payload without members list")
        root_id = data.get("rootId")
        if root_id in (None, ""):
            raise ValueError("family tree payload without rootId")
        return cls(members=tuple(Member.from_dict(m) for m in members), root_id=str(root_id))


@dataclass(frozen=True)
class TreeNode:
    member: Member
    spouse: Optional[Member] = None
    children: Tuple["TreeNode", ...] = ()
    level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member": self.member.to_dict(),
            "spouse": self.spouse.to_dict() if self.spouse else None,
            "level": self.level,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class MemberDetail:
    id: str
    fullname: str
    gender: Gender
    nickname: str | None = None
    birth_date: str | None = None
    death_date: str | None = None
    photo_url: str | None = None
    bio: str | None = None
    profession: str | None = None
    domicile: str | None = None
    full_address: str | None = None
    whatsapp_number: str | None = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemberDetail":
        if not isinstance(data, dict):
            raise ValueError("member detail payload must be an object")
        if data.get("id") in (None, "") or not data.get("fullname"):
            raise ValueError("member detail without id or fullname")
        try:
            gender = Gender(str(data.get("gender") or "").lower())
        except ValueError:
            raise ValueError(f"member detail has invalid gender {data.get('gender')!r}") from None

        extra = data.get("detail") or {}
        return cls(
            id=str(data["id"]),
            fullname=str(data["fullname"]),
            gender=gender,
            nickname=_opt_str(data.get("nickname")),
            birth_date=_opt_str(data.get("birth_date")),
            death_date=_opt_str(data.get("death_date")),
            photo_url=_opt_str(data.get("photo_url")),
            bio=_opt_str(data.get("bio")),
            profession=_opt_str(extra.get("profession")),
            domicile=_opt_str(extra.get("domicile")),
            full_address=_opt_str(extra.get("full_address")),
            whatsapp_number=_opt_str(extra.get("whatsapp_number")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Back to the wire shape, nested `detail` included."""
        return {
            "id": self.id,
            "fullname": self.fullname,
            "nickname": self.nickname,
            "gender": self.gender.value,
            "birth_date": self.birth_date,
            "death_date": self.death_date,
            "photo_url": self.photo_url,
            "bio": self.bio,
            "detail": {
                "profession": self.profession,
                "domicile": self.domicile,
                "full_address": self.full_address,
                "whatsapp_number": self.whatsapp_number,
            },
        }


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Envelope every backend endpoint answers with."""

    code: int
    message: str
    data: T
    timestamp: str | None = None
    version: str | None = None
