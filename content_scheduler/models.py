"""
Модели данных: записи календаря, снимок публикации, профили проспекции
"""

from datetime import date
from enum import Enum
from typing import Optional, List, Tuple, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from content_scheduler.core.clock import parse_date


class PublicationStatus(str, Enum):
    """Статусы записи календаря (значения как в базе)"""
    PENDING = "En Attente de Validation"   # Ожидает одобрения
    SCHEDULED = "Planifiée"                # Запланирована
    DISPATCHED = "Publiée"                 # Опубликована


class ImageVote(str, Enum):
    """Голос за изображение"""
    UP = "up"
    DOWN = "down"


DEFAULT_TITLE = "Publication sans titre"


class ImageRef(BaseModel):
    """Изображение публикации с голосом"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str
    vote: Optional[str] = Field(default=None, description="up / down / None")


def _coerce_images(value) -> List[Dict[str, Any]]:
    """Картинки из базы: список dict или просто список URL"""
    if not value:
        return []
    return [{"url": item} if isinstance(item, str) else item for item in value]


class PublicationPayload(BaseModel):
    """
    Неизменяемый снимок публикации на момент постановки таймера.
    При срабатывании из базы перечитывается только статус.
    """
    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    platforms: Tuple[str, ...] = ()
    description: str = ""
    images: Tuple[ImageRef, ...] = ()
    extra_info: Optional[str] = None

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, value):
        return tuple(_coerce_images(value))


class CalendarRecord(BaseModel):
    """Запись редакционного календаря"""

    id: str
    title: str = DEFAULT_TITLE
    status: str = PublicationStatus.PENDING.value
    target_date: Optional[date] = None
    platforms: List[str] = Field(default_factory=list)
    description: str = ""
    images: List[ImageRef] = Field(default_factory=list)
    extra_info: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        return str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, value):
        return value.value if isinstance(value, Enum) else value

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, value):
        return _coerce_images(value)

    @property
    def is_scheduled(self) -> bool:
        return self.status == PublicationStatus.SCHEDULED

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CalendarRecord":
        """
        Конвертация строки таблицы editorial_calendar

        Args:
            row: Строка из базы (nom, statut, date_brute, platformes, ...)
        """
        platforms = row.get("platformes") or []
        if isinstance(platforms, str):
            platforms = [p.strip() for p in platforms.split(",") if p.strip()]

        raw_date = row.get("date_brute")

        return cls(
            id=row["id"],
            title=row.get("nom") or row.get("name") or DEFAULT_TITLE,
            status=row.get("statut") or PublicationStatus.PENDING.value,
            target_date=parse_date(raw_date) if raw_date else None,
            platforms=platforms,
            description=row.get("description") or "",
            images=row.get("images") or [],
            extra_info=row.get("informations")
        )

    def to_payload(self) -> PublicationPayload:
        """Снимок данных для отложенной публикации"""
        return PublicationPayload(
            title=self.title,
            platforms=tuple(self.platforms),
            description=self.description,
            images=tuple(self.images),
            extra_info=self.extra_info
        )


class ProspectState:
    """Состояния профиля проспекции (сравниваются без учёта регистра)"""
    PENDING_ACCEPTANCE = "en attente d'acceptation"
    CONNECTED = "connecté"
    PUBLISHED = "publié"
    REFUSED = "refusé"


class ProspectRecord(BaseModel):
    """Профиль из таблицы search_request"""

    id: str
    name: str = ""
    sector: str = ""
    company: str = ""
    profile_link: str = ""
    message: str = ""
    state: str = ProspectState.PENDING_ACCEPTANCE

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        return str(value)

    def state_is(self, state: str) -> bool:
        return (self.state or "").strip().lower() == state

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProspectRecord":
        return cls(
            id=row["id"],
            name=row.get("nom") or "",
            sector=row.get("secteur") or "",
            company=row.get("entreprise") or "",
            profile_link=row.get("profil_link") or "",
            message=row.get("message") or "",
            state=row.get("etat") or ""
        )


__all__ = [
    "PublicationStatus",
    "ImageVote",
    "ImageRef",
    "PublicationPayload",
    "CalendarRecord",
    "ProspectState",
    "ProspectRecord",
    "DEFAULT_TITLE"
]
