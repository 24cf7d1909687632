"""
Content data models for the Lessons Service.
"""

from typing import Any, Dict, List, Literal, Optional, Union
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from shared.errors import MissingParameterError, TransportError, ValidationError


PATH_SEGMENTS = ("language", "quarter", "lesson", "day")


@dataclass(frozen=True)
class LessonPath:
    """Hierarchical lesson path: language / quarter / lesson / day."""
    language: str
    quarter: Optional[str] = None
    lesson: Optional[str] = None
    day: Optional[str] = None

    def __post_init__(self):
        for name in PATH_SEGMENTS:
            value = getattr(self, name)
            if value is not None:
                value = value.strip() or None
            if value is not None and "/" in value:
                raise ValidationError(
                    f"Path segment {name} must not contain '/'",
                    details={name: value}
                )
            object.__setattr__(self, name, value)

        given = [name for name in PATH_SEGMENTS if getattr(self, name) is not None]
        if not given:
            raise MissingParameterError(["language"])

        # Every segment before the deepest one given must be present
        depth = PATH_SEGMENTS.index(given[-1]) + 1
        missing = [name for name in PATH_SEGMENTS[:depth] if getattr(self, name) is None]
        if missing:
            raise MissingParameterError(missing)

    @classmethod
    def from_segments(cls, language: Optional[str], quarter: Optional[str] = None,
                      lesson: Optional[str] = None, day: Optional[str] = None,
                      depth: int = 1) -> "LessonPath":
        """Build a path, requiring the first ``depth`` segments to be non-blank."""
        if not 1 <= depth <= len(PATH_SEGMENTS):
            raise ValidationError(f"Path depth must be between 1 and {len(PATH_SEGMENTS)}")

        values = dict(zip(PATH_SEGMENTS, (language, quarter, lesson, day)))
        for name in PATH_SEGMENTS:
            if values[name] is not None:
                values[name] = values[name].strip() or None

        missing = [name for name in PATH_SEGMENTS[:depth] if not values[name]]
        if missing:
            raise MissingParameterError(missing)

        # Drop anything past the requested depth
        for name in PATH_SEGMENTS[depth:]:
            values[name] = None
        return cls(**values)

    @classmethod
    def parse(cls, raw: str) -> "LessonPath":
        """Parse a slash-separated path such as ``en/2024-q1/``."""
        segments = [segment for segment in raw.strip().split("/") if segment.strip()]
        if len(segments) > len(PATH_SEGMENTS):
            raise ValidationError(
                f"Path has {len(segments)} segments, at most {len(PATH_SEGMENTS)} allowed",
                details={"path": raw}
            )
        if not segments:
            raise MissingParameterError(["language"])
        padded = segments + [None] * (len(PATH_SEGMENTS) - len(segments))
        return cls.from_segments(*padded, depth=len(segments))

    @property
    def segments(self) -> List[str]:
        segments = []
        for name in PATH_SEGMENTS:
            value = getattr(self, name)
            if value is None:
                break
            segments.append(value)
        return segments

    @property
    def canonical(self) -> str:
        """Canonical key: one leading slash, no trailing slash."""
        return "/" + "/".join(self.segments)

    def __str__(self) -> str:
        return self.canonical


class ContentLinks(BaseModel):
    """Link block attached to every content entry."""
    model_config = ConfigDict(extra="allow")

    self_: Optional[str] = Field(default=None, alias="self")
    git: Optional[str] = None
    html: Optional[str] = None


class ContentEntry(BaseModel):
    """A single item of a repository contents listing.

    Fields follow the order GitHub uses in directory listings. Entries
    built with ``from_payload`` keep the origin object and serialize it
    back untouched, key order included.
    """
    model_config = ConfigDict(extra="allow")

    name: str
    path: str
    sha: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None
    html_url: Optional[str] = None
    git_url: Optional[str] = None
    download_url: Optional[str] = None
    type: str
    links: Optional[ContentLinks] = Field(default=None, alias="_links")

    _raw: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_payload(cls, payload: Any) -> "ContentEntry":
        entry = cls.model_validate(payload)
        entry._raw = dict(payload)
        return entry

    def to_payload(self) -> Dict[str, Any]:
        """Serialize back to the origin's JSON shape."""
        if self._raw is not None:
            return dict(self._raw)
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class SingleContent(BaseModel):
    """Result for a file-like path: one entry."""
    kind: Literal["single"] = "single"
    entry: ContentEntry

    def to_payload(self) -> Dict[str, Any]:
        return self.entry.to_payload()


class ManyContent(BaseModel):
    """Result for a directory-like path: ordered entries."""
    kind: Literal["many"] = "many"
    entries: List[ContentEntry] = Field(default_factory=list)

    def to_payload(self) -> List[Dict[str, Any]]:
        return [entry.to_payload() for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


ContentResult = Union[SingleContent, ManyContent]


def parse_content_result(payload: Any) -> Optional[ContentResult]:
    """Validate an origin payload into a ContentResult.

    Returns None for a JSON null. A list becomes ManyContent (possibly
    empty), an object becomes SingleContent. Any other shape raises
    TransportError.
    """
    if payload is None:
        return None

    try:
        if isinstance(payload, list):
            return ManyContent(entries=[ContentEntry.from_payload(item) for item in payload])
        if isinstance(payload, dict):
            return SingleContent(entry=ContentEntry.from_payload(payload))
    except PydanticValidationError as exc:
        raise TransportError(
            f"Unexpected content shape from GitHub: {exc.error_count()} validation error(s)",
            details={"errors": exc.errors(include_url=False, include_context=False)}
        )

    raise TransportError(
        f"Unexpected content shape from GitHub: {type(payload).__name__}",
        details={"type": type(payload).__name__}
    )
