"""
Typed records for the portal's feature endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional

NoteType = Literal["positive", "neutral", "negative", "unknown"]


@dataclass
class Semester:
    id: int
    class_id: int
    unit_id: int
    number: int
    is_last: bool
    start_date: str
    end_date: str
    level: int


@dataclass
class DiaryInfo:
    diary_id: int
    student_id: int
    school_year: int
    is_diary: bool
    level: int
    name: str
    student_first_name: str
    student_second_name: Optional[str]
    student_surname: str
    student_full_name: str
    symbol: str
    semesters: List[Semester] = field(default_factory=list)


@dataclass
class DiaryListItem:
    """One diary found under a student-module base URL."""
    serialized: Dict[str, Any]
    """``{"info": DiaryInfo, "baseUrl": str, "host": str}``."""
    create_diary: Callable[[], Any] = field(repr=False)

    @property
    def info(self) -> DiaryInfo:
        return self.serialized["info"]

    @property
    def base_url(self) -> str:
        return self.serialized["baseUrl"]


@dataclass
class LuckyNumber:
    unit_name: str
    school_name: str
    number: int


@dataclass
class ReportingUnit:
    id: int
    unit_id: int
    short_name: str
    login_id: Optional[int] = None


@dataclass
class NoteCategory:
    name: str
    type: NoteType


@dataclass
class Note:
    category: NoteCategory
    content: str
    date_time: str
    points: Optional[float]
    show_points: bool
    teacher: str


@dataclass
class NotesAndAchievements:
    achievements: List[str] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
