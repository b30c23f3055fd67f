"""Resource contexts and the explicit arguments that select them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.type_adapter import TypeAdapter

__all__ = [
    "AuthorArchive",
    "DateArchive",
    "FrontPage",
    "NotFound",
    "PostTypeArchive",
    "ResourceContext",
    "ResourceKind",
    "Search",
    "Singular",
    "TermArchive",
    "TrailArgs",
    "coerce_args",
]


class ResourceKind(str, Enum):
    """Enumeration of the resource kinds a trail can describe."""

    FRONT_PAGE = "front_page"
    SINGULAR = "singular"
    TERM_ARCHIVE = "term_archive"
    POST_TYPE_ARCHIVE = "post_type_archive"
    AUTHOR_ARCHIVE = "author_archive"
    DATE_ARCHIVE = "date_archive"
    SEARCH = "search"
    NOT_FOUND = "not_found"


# Identifier fields left as ``None`` mean "use the ambient request".


@dataclass(frozen=True, slots=True)
class FrontPage:
    kind: ClassVar[ResourceKind] = ResourceKind.FRONT_PAGE


@dataclass(frozen=True, slots=True)
class Singular:
    kind: ClassVar[ResourceKind] = ResourceKind.SINGULAR

    content_id: int | None = None


@dataclass(frozen=True, slots=True)
class TermArchive:
    kind: ClassVar[ResourceKind] = ResourceKind.TERM_ARCHIVE

    term_id: int | None = None
    taxonomy: str = ""


@dataclass(frozen=True, slots=True)
class PostTypeArchive:
    kind: ClassVar[ResourceKind] = ResourceKind.POST_TYPE_ARCHIVE

    post_type: str | None = None


@dataclass(frozen=True, slots=True)
class AuthorArchive:
    kind: ClassVar[ResourceKind] = ResourceKind.AUTHOR_ARCHIVE

    author_id: int | None = None


@dataclass(frozen=True, slots=True)
class DateArchive:
    kind: ClassVar[ResourceKind] = ResourceKind.DATE_ARCHIVE

    year: int = 0
    month: int = 0
    day: int = 0


@dataclass(frozen=True, slots=True)
class Search:
    kind: ClassVar[ResourceKind] = ResourceKind.SEARCH

    search_query: str = ""


@dataclass(frozen=True, slots=True)
class NotFound:
    kind: ClassVar[ResourceKind] = ResourceKind.NOT_FOUND


ResourceContext = Union[
    FrontPage,
    Singular,
    TermArchive,
    PostTypeArchive,
    AuthorArchive,
    DateArchive,
    Search,
    NotFound,
]


class TrailArgs(BaseModel):
    """Explicit trail selectors.

    Selectors are mutually exclusive; when several are set, the first
    non-empty one in the order taxonomy, post type archive, author, id wins.
    The short aliases ``tax``, ``pta`` and ``uid`` are accepted as well.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: int = 0
    taxonomy: str = Field(default="", validation_alias=AliasChoices("taxonomy", "tax"))
    post_type_archive: str = Field(
        default="", validation_alias=AliasChoices("post_type_archive", "pta")
    )
    author_id: int = Field(default=0, validation_alias=AliasChoices("author_id", "uid"))

    @field_validator("id", "author_id", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("taxonomy", "post_type_archive", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


_ARGS_ADAPTER = TypeAdapter(TrailArgs)


def coerce_args(payload: TrailArgs | Mapping[str, Any] | None) -> TrailArgs | None:
    """Validate or convert ``payload`` into ``TrailArgs``; ``None`` stays ``None``."""
    if payload is None or isinstance(payload, TrailArgs):
        return payload
    try:
        return _ARGS_ADAPTER.validate_python(dict(payload))
    except ValidationError as error:
        raise ValueError(f"Trail arguments did not validate: {error}") from error
