from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from crumbtrail.query import QueryState  # noqa: E402
from crumbtrail.site import SiteGraph  # noqa: E402
from crumbtrail.trail import TrailBuilder  # noqa: E402


def sample_site_data() -> Dict[str, Any]:
    """Return a fresh site description shared by most tests.

    Category tree: News (10) > World (11) > Europe (12), plus Sports (13).
    Post 100 is filed under World and News; post 101 under every category.
    Pages: About (200) > Team (201), and Blog (202). Book 300 is a custom type.
    """

    return {
        "settings": {
            "name": "Example Site",
            "home_url": "https://example.com",
            "permalink_structure": "/%postname%/",
        },
        "post_types": [
            {
                "name": "book",
                "label": "Books",
                "has_archive": True,
                "rewrite_slug": "books",
            }
        ],
        "taxonomies": [
            {
                "name": "genre",
                "label": "Genres",
                "hierarchical": True,
                "rewrite_slug": "genre",
                "object_types": ["book"],
            }
        ],
        "terms": [
            {"id": 10, "taxonomy": "category", "name": "News", "slug": "news"},
            {"id": 11, "taxonomy": "category", "name": "World", "slug": "world", "parent": 10},
            {"id": 12, "taxonomy": "category", "name": "Europe", "slug": "europe", "parent": 11},
            {"id": 13, "taxonomy": "category", "name": "Sports", "slug": "sports"},
            {"id": 20, "taxonomy": "post_tag", "name": "Featured", "slug": "featured"},
            {"id": 30, "taxonomy": "genre", "name": "Science Fiction", "slug": "sci-fi"},
        ],
        "posts": [
            {
                "id": 100,
                "title": "Hello World",
                "slug": "hello-world",
                "author": 1,
                "terms": {"category": [11, 10], "post_tag": [20]},
            },
            {
                "id": 101,
                "title": "Everything",
                "slug": "everything",
                "terms": {"category": [10, 11, 12, 13]},
            },
            {"id": 200, "type": "page", "title": "About", "slug": "about"},
            {"id": 201, "type": "page", "title": "Team", "slug": "team", "parent": 200},
            {"id": 202, "type": "page", "title": "Blog", "slug": "blog"},
            {
                "id": 300,
                "type": "book",
                "title": "Dune",
                "slug": "dune",
                "author": 1,
                "terms": {"genre": [30]},
            },
        ],
        "authors": [{"id": 1, "display_name": "Jane Doe", "nicename": "jane"}],
    }


@pytest.fixture()
def site_data() -> Dict[str, Any]:
    return sample_site_data()


@pytest.fixture()
def site(site_data: Dict[str, Any]) -> SiteGraph:
    return SiteGraph.from_mapping(site_data)


@pytest.fixture()
def static_site() -> SiteGraph:
    """Same content, with About as the static front page and Blog listing posts."""

    site_data = sample_site_data()
    site_data["settings"].update(show_on_front="page", page_on_front=200, page_for_posts=202)
    return SiteGraph.from_mapping(site_data)


@pytest.fixture()
def make_builder(site: SiteGraph) -> Callable[..., TrailBuilder]:
    def factory(state: QueryState | None = None, **kwargs: Any) -> TrailBuilder:
        graph = kwargs.pop("site", site)
        return TrailBuilder.for_site(graph, state or QueryState(initialized=True), **kwargs)

    return factory


@dataclass(slots=True)
class SiteFiles:
    """Site description (and optional config) written to disk for CLI tests."""

    root: Path
    site_path: Path

    def write_config(self, data: Dict[str, Any], name: str = "crumbtrail.yaml") -> Path:
        path = self.root / name
        with path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(data, handle)
        return path


@pytest.fixture()
def site_files(tmp_path: Path, site_data: Dict[str, Any]) -> SiteFiles:
    site_path = tmp_path / "site.yaml"
    with site_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(site_data, handle)
    return SiteFiles(root=tmp_path, site_path=site_path)
