"""
Mappers from the portal's JSON payloads (Polish field names) to records.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .dates import remote_iso_to_date_string, remote_iso_to_extended_iso
from .models import (
    DiaryInfo,
    LuckyNumber,
    Note,
    NoteCategory,
    NotesAndAchievements,
    NoteType,
    ReportingUnit,
    Semester,
)

logger = logging.getLogger(__name__)

_NOTE_TYPES: Dict[int, NoteType] = {1: "positive", 2: "neutral", 3: "negative"}


def parse_not_null_or_empty(value: Optional[str]) -> Optional[float]:
    if value is None or not str(value).strip():
        return None
    return float(value)


def _map_semester(data: Mapping[str, Any]) -> Semester:
    return Semester(
        id=data["Id"],
        class_id=data["IdOddzial"],
        unit_id=data["IdJednostkaSprawozdawcza"],
        number=data["NumerOkresu"],
        is_last=data["IsLastOkres"],
        start_date=remote_iso_to_date_string(data["DataOd"]),
        end_date=remote_iso_to_date_string(data["DataDo"]),
        level=data["Poziom"],
    )


def map_diary_info(data: Mapping[str, Any]) -> DiaryInfo:
    return DiaryInfo(
        diary_id=data["IdDziennik"],
        student_id=data["IdUczen"],
        school_year=data["DziennikRokSzkolny"],
        is_diary=data["IsDziennik"],
        level=data["Poziom"],
        name=data["Nazwa"],
        student_first_name=data["UczenImie"],
        student_second_name=data.get("UczenImie2"),
        student_surname=data["UczenNazwisko"],
        student_full_name=data["UczenPelnaNazwa"],
        symbol=data["Symbol"],
        semesters=[_map_semester(item) for item in data.get("Okresy") or []],
    )


def map_lucky_numbers(data: List[Mapping[str, Any]]) -> List[LuckyNumber]:
    """Flatten the start-page tile tree into lucky numbers.

    Tiles nest as ``tile → unit → school entry``; each entry's ``Nazwa``
    ends with ``": <number>"``.  Entries without a number are skipped.
    """
    numbers: List[LuckyNumber] = []
    for tile in data or []:
        for unit in tile.get("Zawartosc") or []:
            for entry in unit.get("Zawartosc") or []:
                label = entry.get("Nazwa") or ""
                school, _, raw_number = label.rpartition(": ")
                try:
                    number = int(raw_number)
                except ValueError:
                    logger.debug(f"Skipping lucky-number entry without a number: {label!r}")
                    continue
                numbers.append(LuckyNumber(
                    unit_name=unit.get("Nazwa") or "",
                    school_name=school,
                    number=number,
                ))
    return numbers


def map_reporting_units(data: List[Mapping[str, Any]]) -> List[ReportingUnit]:
    return [
        ReportingUnit(
            id=item["Id"],
            unit_id=item["IdJednostkaSprawozdawcza"],
            short_name=item.get("Skrot") or "",
            login_id=item.get("IdLogin"),
        )
        for item in data or []
    ]


def _map_note(data: Mapping[str, Any]) -> Note:
    return Note(
        category=NoteCategory(
            name=data["Kategoria"],
            type=_NOTE_TYPES.get(data.get("KategoriaTyp"), "unknown"),
        ),
        content=data["TrescUwagi"],
        date_time=remote_iso_to_extended_iso(data["DataWpisu"]),
        points=parse_not_null_or_empty(data.get("Punkty")),
        show_points=data.get("PokazPunkty", False),
        teacher=data["Nauczyciel"],
    )


def map_notes_and_achievements(data: Mapping[str, Any]) -> NotesAndAchievements:
    return NotesAndAchievements(
        achievements=list(data.get("Osiagniecia") or []),
        notes=[_map_note(item) for item in data.get("Uwagi") or []],
    )
