"""Title normalization applied to every crumb name."""

from __future__ import annotations

import pytest

from crumbtrail.utils.text import normalize_title


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Plain", "Plain"),
        ("  padded  ", "padded"),
        ("two\nlines", "two lines"),
        ("tab\tseparated", "tab separated"),
        ("non&nbsp;breaking", "non breaking"),
        ("non\u00a0breaking", "non breaking"),
        ("many     spaces", "many spaces"),
        ("<strong>Bold</strong> text", "Bold text"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_title(raw, expected) -> None:
    assert normalize_title(raw) == expected
