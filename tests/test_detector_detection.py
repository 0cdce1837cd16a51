import pytest

from detector.detection import (
    ANIME_GENRE,
    build_write_batch,
    classify,
    combine_signals,
    extract_signals,
    path_has_anime_marker,
    tracks_have_japanese,
)
from detector.models import ClassificationInput, Signals


def _input(**kwargs) -> ClassificationInput:
    base = {"file_path": "/videos/Movie.mkv", "file_name": "Movie.mkv", "file_type": "video"}
    base.update(kwargs)
    return ClassificationInput(**base)


def test_path_marker_is_case_insensitive():
    assert path_has_anime_marker("/media/Anime/Show.mkv") is True
    assert path_has_anime_marker("/media/ANIME/Show.mkv") is True
    assert path_has_anime_marker("/media/animated/Show.mkv") is False
    assert path_has_anime_marker("") is False


def test_tracks_have_japanese_codes_and_sentinel():
    assert tracks_have_japanese(["eng", "jpn"]) is True
    assert tracks_have_japanese(["ja"]) is True
    assert tracks_have_japanese([" JPN "]) is True
    assert tracks_have_japanese(["eng", "fre"]) is False
    assert tracks_have_japanese(["eng", "", "jpn"]) is False
    assert tracks_have_japanese([]) is False


def test_tracks_have_japanese_respects_cap():
    langs = ["eng"] * 20 + ["jpn"]
    assert tracks_have_japanese(langs) is False
    assert tracks_have_japanese(langs, cap=21) is True


@pytest.mark.parametrize(
    "path",
    ["/anime/Show.mkv", "/media/Anime Movies/x.mkv", "/ANIME/y.mkv"],
)
def test_path_marker_sets_anime_and_japanese_regardless_of_rest(path):
    verdict = classify(_input(file_path=path, file_name="x.mkv", original_title="Whatever"))
    assert verdict.is_anime is True
    assert verdict.is_japanese is True


def test_keyword_match_sets_anime():
    verdict = classify(_input(file_name="[HorribleSubs] One Piece - 1000 [1080p].mkv"))
    assert verdict.signals.keyword_match is True
    assert verdict.is_anime is True
    assert verdict.is_japanese is True


def test_kana_title_uses_kana_key_only():
    verdict = classify(_input(original_title="ナルト"))
    assert verdict.is_japanese is True
    assert verdict.is_anime is False
    assert verdict.detected_title_script == "kana"
    assert verdict.localized_title is not None
    assert verdict.localized_title.property_key == "titles/jpn"

    batch = build_write_batch(verdict)
    keys = [k for k, _ in batch.sets]
    assert "titles/jpn" in keys
    assert "titles/jpl" not in keys
    assert batch.as_dict()["titles/jpn"] == "ナルト"


def test_kanji_title_uses_romaji_key_only():
    verdict = classify(_input(original_title="進撃の巨人"))
    assert verdict.detected_title_script == "other_japanese"

    batch = build_write_batch(verdict)
    assert batch.as_dict()["titles/jpl"] == "進撃の巨人"
    assert "titles/jpn" not in batch.as_dict()


def test_latin_title_with_positive_verdict_writes_no_title():
    verdict = classify(
        _input(file_path="/anime/Naruto S01E01.mkv", file_name="Naruto S01E01.mkv", original_title="Naruto")
    )
    assert verdict.localized_title is None
    batch = build_write_batch(verdict)
    assert batch.sets == (("anime", "true"),)
    assert batch.set_additions == (("genres", ANIME_GENRE),)


def test_audio_track_sets_japanese_only():
    verdict = classify(_input(audio_track_languages=("jpn",)))
    assert verdict.is_japanese is True
    assert verdict.is_anime is False
    assert build_write_batch(verdict).as_dict() == {"anime": "true"}


def test_video_track_language_is_a_signal():
    verdict = classify(_input(video_track_languages=("und", "jpn")))
    assert verdict.signals.video_japanese is True
    assert verdict.is_japanese is True


def test_no_signal_means_empty_batch():
    verdict = classify(_input(file_name="Action Movie.mkv", original_title="Action Movie"))
    assert verdict.is_anime is False
    assert verdict.is_japanese is False
    assert verdict.should_write is False
    assert build_write_batch(verdict).is_empty is True


def test_all_signal_categories_are_evaluated():
    signals = extract_signals(
        _input(
            file_path="/anime/x.mkv",
            file_name="[SubsPlease] x.mkv",
            original_title="ナルト",
            audio_track_languages=("jpn",),
            video_track_languages=("jpn",),
        )
    )
    assert signals == Signals(
        path_marker=True,
        keyword_match=True,
        title_script="kana",
        audio_japanese=True,
        video_japanese=True,
    )


def test_combine_signals_never_localizes_when_not_japanese():
    verdict = combine_signals(Signals(), original_title="ナルト")
    assert verdict.localized_title is None
    assert verdict.should_write is False


def test_custom_keyword_set():
    verdict = classify(_input(file_name="[MyGroup] Show.mkv"), keywords=frozenset({"[MyGroup]"}))
    assert verdict.is_anime is True
