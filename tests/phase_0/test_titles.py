from __future__ import annotations

import pytest

from simnet.config import IngestionConfig, load_config
from simnet.titles import normalize_title, strip_image_extension, strip_source_prefix


@pytest.fixture(name="ingestion")
def fixture_ingestion() -> IngestionConfig:
    return load_config().ingestion


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("tue_01_a.jpg", "a"),
        ("tue_12_퇴마록 : 세계편.jpg", "퇴마록 : 세계편"),
        ("  wed_3_Mr. Kim.PNG ", "Mr. Kim"),
        ("plain title", "plain title"),
        ("tuesday_1_x.jpg", "tuesday_1_x"),
    ],
)
def test_normalize_title(ingestion: IngestionConfig, raw: str, expected: str) -> None:
    assert normalize_title(raw, ingestion) == expected


def test_strip_source_prefix_keeps_extension(ingestion: IngestionConfig) -> None:
    assert strip_source_prefix("mon_3_x.jpg", ingestion) == "x.jpg"


def test_strip_image_extension_removes_only_the_last_known_extension() -> None:
    assert strip_image_extension("a.png.jpg", ["jpg", "png"]) == "a.png"
    assert strip_image_extension("a.txt", ["jpg"]) == "a.txt"
    assert strip_image_extension("a.jpg", []) == "a.jpg"
