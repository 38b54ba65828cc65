"""Course catalogs and course-request fact extraction."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, TypeAdapter

from ..errors import ConfigurationError
from .text import normalize, stems

logger = logging.getLogger(__name__)

Track = Literal["retraining", "upskilling"]
InstitutionType = Literal["preschool", "school", "college", "additional", "driving_school"]

# Later entries win when a text mentions both tracks.
TRACK_KEYWORDS: dict[Track, tuple[str, ...]] = {
    "upskilling": ("повышени", "квалификац", "удостоверени"),
    "retraining": ("переподготов", "переобуч"),
}

# Checked in order: "автошкола" must match before "школа".
INSTITUTION_KEYWORDS: dict[InstitutionType, tuple[str, ...]] = {
    "driving_school": ("автошкол", "вождени", "инструктор"),
    "preschool": ("доу", "детский сад", "детском саду", "детсад", "воспитател", "дошкольн"),
    "additional": ("доп.образован", "доп. образован", "дополнительн", "педагог доп", "кружк"),
    "college": ("колледж", "техникум", "преподавател"),
    "school": ("школ", "учител", "классный руководител"),
}

# Words too generic to pick a program by.
NON_FOCUS_WORDS = frozenset(
    stems(
        "курс курсы программа программы подобрать подберите выбрать нужен нужна нужны "
        "переподготовка повышение квалификации профессиональная работаю работа "
        "учитель учителем школа школе колледж колледже доу детский сад саду "
        "дополнительное образование автошкола автошколе педагог педагогом какой "
        "преподаватель преподавателем"
    )
)

# Subjects and roles recognised as a program focus even when no catalog entry names them.
KNOWN_SUBJECTS = frozenset(
    stems(
        "математика алгебра геометрия информатика физика химия биология география история "
        "обществознание экономика литература русский язык английский немецкий "
        "французский иностранный музыка изобразительное искусство физкультура физическая "
        "культура технология труд ОБЖ ОБЗР логопед дефектолог психолог тьютор вожатый "
        "воспитатель методист советник библиотекарь тренер хореограф мастер инструктор "
        "вождение помощь"
    )
)

# Catalog title words that name no subject or role.
GENERIC_TITLE_WORDS = frozenset(
    stems(
        "теория методика методики преподавания образовательной организации организация "
        "деятельности детей взрослых современные условиях обновленных обновление содержания "
        "ФГОС ФОП для работников педагогических младший старший транспортных средств "
        "производственного обучения обучение дошкольной дополнительного"
    )
)

# Subjects treated as one direction.
EQUIVALENT_SUBJECTS: tuple[frozenset[str], ...] = (
    frozenset({"труд", "технол"}),
)


class CourseEntry(BaseModel):
    """One program from a catalog file."""

    course_name: str
    course_type: str
    education_level: list[str] = []
    professions: list[str] = []
    pricing_and_course_length: list[str] = []
    course_page_link: str

    def format_record(self) -> str:
        pricing = "; ".join(self.pricing_and_course_length)
        return (
            f"1) Название: {self.course_name}\n"
            f"2) Тип: {self.course_type}\n"
            f"3) Стоимость и длительность: {pricing}\n"
            f"4) Ссылка: {self.course_page_link}"
        )


_entries_adapter = TypeAdapter(list[CourseEntry])


@dataclass(frozen=True)
class CourseRequestFacts:
    """What the user told us about the program they need."""

    track: Optional[Track] = None
    institution: Optional[InstitutionType] = None
    focus: frozenset[str] = frozenset()

    @property
    def missing(self) -> list[str]:
        """Missing facts, most critical first."""
        missing = []
        if self.track is None:
            missing.append("track")
        if self.institution is None:
            missing.append("institution")
        if not self.focus:
            missing.append("focus")
        return missing

    @classmethod
    def from_texts(
        cls, texts: list[str], vocabulary: frozenset[str] = KNOWN_SUBJECTS
    ) -> "CourseRequestFacts":
        """Extract facts from user texts; later texts override earlier ones.

        Only words matching `vocabulary` count as the focus.
        """
        track: Optional[Track] = None
        institution: Optional[InstitutionType] = None
        focus: set[str] = set()
        for text in texts:
            lowered = normalize(text)
            for candidate, keywords in TRACK_KEYWORDS.items():
                if any(k in lowered for k in keywords):
                    track = candidate
            for candidate_inst, keywords in INSTITUTION_KEYWORDS.items():
                if any(k in lowered for k in keywords):
                    institution = candidate_inst
                    break
            focus |= {
                s for s in stems(text) - NON_FOCUS_WORDS if _stem_matches(s, vocabulary)
            }
        return cls(track=track, institution=institution, focus=frozenset(focus))


def _stem_matches(word: str, vocabulary: Iterable[str]) -> bool:
    return any(word.startswith(v) or v.startswith(word) for v in vocabulary)


def mentions_courses(texts: list[str]) -> bool:
    """True when the user talks about programs at all."""
    words = ("курс", "программ", "обучени", "переподготов", "повышени", "квалификац")
    return any(w in normalize(t) for t in texts for w in words)


def _expand_equivalents(focus: frozenset[str]) -> set[str]:
    expanded = set(focus)
    for group in EQUIVALENT_SUBJECTS:
        if any(any(s.startswith(g) or g.startswith(s) for g in group) for s in focus):
            expanded |= group
    return expanded


class CourseCatalog:
    """Retraining and upskilling catalogs searched together."""

    def __init__(self, entries: dict[Track, list[CourseEntry]]) -> None:
        self._entries = entries
        words: set[str] = set()
        for entry in (e for track_entries in entries.values() for e in track_entries):
            words |= stems(" ".join([entry.course_name, *entry.professions]))
        self.vocabulary = frozenset(
            KNOWN_SUBJECTS | (words - NON_FOCUS_WORDS - GENERIC_TITLE_WORDS)
        )

    @classmethod
    def from_files(cls, retraining: Path, upskilling: Path) -> "CourseCatalog":
        return cls({
            "retraining": cls._load(retraining),
            "upskilling": cls._load(upskilling),
        })

    @staticmethod
    def _load(path: Path) -> list[CourseEntry]:
        try:
            return _entries_adapter.validate_python(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValueError) as e:
            raise ConfigurationError(f"Cannot load course catalog {path}: {e}") from e

    def search(self, facts: CourseRequestFacts, limit: int = 3) -> list[CourseEntry]:
        """Rank programs by institution match and subject/role overlap."""
        tracks: list[Track] = [facts.track] if facts.track else ["retraining", "upskilling"]
        focus = _expand_equivalents(facts.focus)
        priority_subjects = set().union(*EQUIVALENT_SUBJECTS) & focus

        scored: list[tuple[float, int, CourseEntry]] = []
        order = 0
        for track in tracks:
            for entry in self._entries.get(track, []):
                order += 1
                entry_stems = stems(" ".join([entry.course_name, *entry.professions]))
                matched = {
                    f for f in focus if any(e.startswith(f) or f.startswith(e) for e in entry_stems)
                }
                if not matched:
                    continue
                score = float(len(matched))
                if facts.institution and facts.institution in entry.education_level:
                    score += 2.0
                elif facts.institution and entry.education_level:
                    continue
                name_stems = stems(entry.course_name)
                if any(n.startswith(p) for p in priority_subjects for n in name_stems):
                    score += 3.0
                scored.append((score, order, entry))

        scored.sort(key=lambda item: (-item[0], item[1]))
        return [entry for _, _, entry in scored[:limit]]
