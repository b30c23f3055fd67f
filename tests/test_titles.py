from __future__ import annotations

import pytest

from crumbtrail.site import SiteGraph
from crumbtrail.titles import NOT_FOUND_TITLE, UNTITLED, SiteTitles


def test_resource_titles(site: SiteGraph) -> None:
    titles = SiteTitles(site)

    assert titles.front_page_title() == "Example Site"
    assert titles.post_title(201) == "Team"
    assert titles.term_title(30, "genre") == "Science Fiction"
    assert titles.post_type_archive_title("book") == "Books"
    assert titles.author_title(1) == "Jane Doe"
    assert titles.search_title("dune") == "Search Results for “dune”"
    assert titles.not_found_title() == NOT_FOUND_TITLE


@pytest.mark.parametrize(
    "parts, expected",
    [
        ((2024,), "2024"),
        ((2024, 3), "March 2024"),
        ((2024, 3, 5), "March 5, 2024"),
        ((2024, 13), "2024"),
        ((0,), UNTITLED),
    ],
)
def test_date_titles(site: SiteGraph, parts, expected) -> None:
    assert SiteTitles(site).date_title(*parts) == expected


def test_missing_or_empty_titles_fall_back(site_data) -> None:
    site_data["post_types"].append({"name": "note", "supports_title": False})
    site_data["posts"].append({"id": 400, "type": "note", "title": "Hidden"})
    site_data["posts"].append({"id": 401, "title": "   "})
    titles = SiteTitles(SiteGraph.from_mapping(site_data))

    assert titles.post_title(400) == UNTITLED
    assert titles.post_title(401) == UNTITLED
    assert titles.post_title(999) == UNTITLED
    assert titles.term_title(10, "post_tag") == UNTITLED
    assert titles.post_type_archive_title("note") == "note"


def test_titles_are_normalized(site_data) -> None:
    site_data["posts"][0]["title"] = "  <em>Hello</em>&nbsp;\tWorld \n"

    assert SiteTitles(SiteGraph.from_mapping(site_data)).post_title(100) == "Hello World"
