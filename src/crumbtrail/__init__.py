"""Breadcrumb trail construction for content sites."""

from .context import (
    AuthorArchive,
    DateArchive,
    FrontPage,
    NotFound,
    PostTypeArchive,
    ResourceContext,
    ResourceKind,
    Search,
    Singular,
    TermArchive,
    TrailArgs,
    coerce_args,
)
from .memo import MISSING, GatedMemo, MemoStore, ReadinessGate
from .query import AdminScreen, QueryClassifier, QueryState
from .terms import PrimaryTermResolver
from .trail import Crumb, Trail, TrailBuilder, trail_to_dicts

__all__ = [
    "AdminScreen",
    "AuthorArchive",
    "Crumb",
    "DateArchive",
    "FrontPage",
    "GatedMemo",
    "MISSING",
    "MemoStore",
    "NotFound",
    "PostTypeArchive",
    "PrimaryTermResolver",
    "QueryClassifier",
    "QueryState",
    "ReadinessGate",
    "ResourceContext",
    "ResourceKind",
    "Search",
    "Singular",
    "TermArchive",
    "Trail",
    "TrailArgs",
    "TrailBuilder",
    "coerce_args",
    "trail_to_dicts",
]
