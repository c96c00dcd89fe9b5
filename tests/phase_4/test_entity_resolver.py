from __future__ import annotations

import logging
from typing import List

import pytest

from simnet.config import AppConfig, load_config
from simnet.contracts import EmotionRecord, TagRecord, ThumbnailRecord
from simnet.resolution import (
    EMOTION_TABLE,
    TAG_TABLE,
    THUMBNAIL_TABLE,
    EntityResolver,
    Exact,
    ResolutionEvent,
    StripChars,
)
from simnet.resolution.tables import thumbnail_table

THUMBNAILS = [
    ThumbnailRecord(title="a", image_url="https://img.example.com/a.jpg"),
    ThumbnailRecord(title="나 혼자만 레벨업 완결", image_url="https://img.example.com/solo.jpg"),
    ThumbnailRecord(title="나 혼자만 레벨업 (완결)!", image_url="https://img.example.com/solo-bang.jpg"),
    ThumbnailRecord(title="나혼자만레벨업완결", image_url="https://img.example.com/solo-fuzzy.jpg"),
    ThumbnailRecord(title="퇴마록세계편", image_url="https://img.example.com/toemarok.jpg"),
    ThumbnailRecord(title="취사병, 전설이 되다", image_url="https://img.example.com/chef.jpg"),
    ThumbnailRecord(title="여보, 나 회사 그만둘게!", image_url="https://img.example.com/quit.jpg"),
    ThumbnailRecord(title="신의 탑!", image_url="https://img.example.com/tower.jpg"),
    ThumbnailRecord(title="AI 닥터", image_url="https://img.example.com/doctor.jpg"),
    ThumbnailRecord(title="전지적 독자 시점 외전", image_url="https://img.example.com/omniscient.jpg"),
    ThumbnailRecord(title="a", image_url="https://img.example.com/duplicate.jpg"),
]
TAGS = [
    TagRecord(title="퇴마록 세계편", tags=("#판타지", "#오컬트")),
]
EMOTIONS = [
    EmotionRecord(image_key="퇴마록세계편.jpg", intensities={"fear": 0.6, "joy": 0.1}),
    EmotionRecord(image_key="a.jpg", intensities={"joy": 0.9}),
]


class _EventRecorder:
    def __init__(self) -> None:
        self.events: List[ResolutionEvent] = []

    def __call__(self, event: ResolutionEvent) -> None:
        self.events.append(event)


@pytest.fixture(name="config")
def fixture_config() -> AppConfig:
    return load_config()


@pytest.fixture(name="recorder")
def fixture_recorder() -> _EventRecorder:
    return _EventRecorder()


@pytest.fixture(name="resolver")
def fixture_resolver(config: AppConfig, recorder: _EventRecorder) -> EntityResolver:
    return EntityResolver.from_records(
        config,
        thumbnails=THUMBNAILS,
        tags=TAGS,
        emotions=EMOTIONS,
        listener=recorder,
    )


@pytest.mark.parametrize(
    ("title", "step", "rule", "key"),
    [
        ("a", 1, "exact", "a"),
        ("전지적 독자 시점 : 외전", 2, "strip_colons", "전지적 독자 시점 외전"),
        ("나 혼자만 레벨업 (완결)", 3, "strip_brackets", "나 혼자만 레벨업 완결"),
        ("A.I. 닥터", 4, "strip_periods", "AI 닥터"),
        ("취사병 전설이 되다", 5, "insert_comma", "취사병, 전설이 되다"),
        ("신의 탑", 6, "append_exclamation", "신의 탑!"),
        ("여보 나 회사 그만둘게", 7, "insert_comma_append_exclamation", "여보, 나 회사 그만둘게!"),
        ("퇴마록 : 세계편", 8, "fuzzy_strip", "퇴마록세계편"),
    ],
)
def test_cascade_reports_matching_step(resolver: EntityResolver, title: str, step: int, rule: str, key: str) -> None:
    resolution = resolver.resolve(title, THUMBNAIL_TABLE)
    assert resolution.found
    assert resolution.step == step
    assert resolution.rule == rule
    assert resolution.key == key


def test_earlier_step_always_wins_and_is_stable(resolver: EntityResolver) -> None:
    results = [resolver.resolve("나 혼자만 레벨업 (완결)", THUMBNAIL_TABLE) for _ in range(3)]
    assert {result.step for result in results} == {3}
    assert {result.value for result in results} == {"https://img.example.com/solo.jpg"}


def test_punctuation_stripped_fallback_resolves_thumbnail(resolver: EntityResolver) -> None:
    resolution = resolver.resolve("퇴마록 : 세계편", THUMBNAIL_TABLE)
    assert resolution.step == 8
    assert resolution.value == "https://img.example.com/toemarok.jpg"


def test_first_table_entry_wins(resolver: EntityResolver) -> None:
    assert resolver.resolve("a", THUMBNAIL_TABLE).value == "https://img.example.com/a.jpg"


def test_unresolved_title_is_not_an_error(resolver: EntityResolver) -> None:
    resolution = resolver.resolve("없는 제목", THUMBNAIL_TABLE)
    assert not resolution.found
    assert resolution.step is None
    assert resolution.value is None


def test_each_table_uses_its_own_key_shape(resolver: EntityResolver) -> None:
    emotions = resolver.resolve("a", EMOTION_TABLE)
    assert emotions.step == 1
    assert emotions.key == "a.jpg"
    fuzzy = resolver.resolve("퇴마록 : 세계편", EMOTION_TABLE)
    assert fuzzy.step == 8
    assert fuzzy.key == "퇴마록세계편.jpg"
    tags = resolver.resolve("퇴마록 : 세계편", TAG_TABLE)
    assert tags.step == 2
    assert tags.key == "퇴마록 세계편"


def test_enrich_collects_every_section(resolver: EntityResolver) -> None:
    enrichment = resolver.enrich("퇴마록 : 세계편")
    assert enrichment.thumbnail_url == "https://img.example.com/toemarok.jpg"
    assert enrichment.tags == ("판타지", "오컬트")
    assert enrichment.emotions == (("fear", 0.6), ("joy", 0.1))
    assert set(enrichment.resolutions) == {THUMBNAIL_TABLE, TAG_TABLE, EMOTION_TABLE}


def test_enrich_omits_unresolved_sections(resolver: EntityResolver) -> None:
    enrichment = resolver.enrich("신의 탑")
    assert enrichment.thumbnail_url == "https://img.example.com/tower.jpg"
    assert enrichment.tags == ()
    assert enrichment.emotions == ()


def test_enrich_node_normalises_raw_identifier(resolver: EntityResolver) -> None:
    enrichment = resolver.enrich_node("tue_12_퇴마록 : 세계편.jpg")
    assert enrichment.title == "퇴마록 : 세계편"
    assert enrichment.thumbnail_url == "https://img.example.com/toemarok.jpg"


def test_one_event_per_resolution(resolver: EntityResolver, recorder: _EventRecorder) -> None:
    resolver.enrich("퇴마록 : 세계편")
    assert [event.table for event in recorder.events] == [THUMBNAIL_TABLE, TAG_TABLE, EMOTION_TABLE]
    assert [event.step for event in recorder.events] == [8, 2, 8]
    assert recorder.events[0].attempts == 8
    assert recorder.events[0].matched


def test_unmatched_event_counts_every_attempt(resolver: EntityResolver, recorder: _EventRecorder) -> None:
    resolver.resolve("없는 제목", THUMBNAIL_TABLE)
    (event,) = recorder.events
    assert not event.matched
    assert event.attempts == 8
    assert event.as_dict()["rule"] is None


def test_resolution_events_are_logged(resolver: EntityResolver, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="simnet.resolution.resolver")
    resolver.resolve("퇴마록 : 세계편", THUMBNAIL_TABLE)
    records = [record for record in caplog.records if hasattr(record, "resolution")]
    assert len(records) == 1
    assert records[0].levelno == logging.DEBUG
    assert records[0].resolution["step"] == 8


def test_custom_rules_can_be_appended() -> None:
    table = thumbnail_table([ThumbnailRecord(title="spider man", image_url="https://img.example.com/s.jpg")])
    resolver = EntityResolver(
        tables=[table],
        rules=[Exact(), StripChars(chars="-", name="strip_dashes")],
        normalizer=str.strip,
    )
    resolution = resolver.resolve("spider-man", THUMBNAIL_TABLE)
    assert resolution.step is None
    resolution = resolver.resolve("spider - man", THUMBNAIL_TABLE)
    assert resolution.step == 2
    assert resolver.describe_rules() == ["1:exact", "2:strip_dashes"]
    assert resolver.resolve("spider man", EMOTION_TABLE).found is False
