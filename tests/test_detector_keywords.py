from detector.keywords import ANIME_KEYWORDS, match_anime_keyword


def test_keyword_set_is_immutable_and_not_empty():
    assert isinstance(ANIME_KEYWORDS, frozenset)
    assert len(ANIME_KEYWORDS) > 0
    assert "[HorribleSubs]" in ANIME_KEYWORDS


def test_match_is_case_sensitive_substring():
    assert match_anime_keyword("[SubsPlease] Frieren - 01 (1080p).mkv") == "[SubsPlease]"
    assert match_anime_keyword("[subsplease] Frieren - 01.mkv") is None
    assert match_anime_keyword("SubsPlease Frieren.mkv") is None
    assert match_anime_keyword("") is None


def test_match_with_custom_set_and_stable_order():
    custom = frozenset({"[B]", "[A]"})
    assert match_anime_keyword("[A][B] Show.mkv", custom) == "[A]"
    assert match_anime_keyword("[C] Show.mkv", custom) is None


def test_generic_release_tags_are_not_markers():
    for name in (
        "The Dark Knight (2008) [BDRip] [1080p].mkv",
        "Amélie (2001) [VOSTFR].mkv",
        "Dangal (2016) [Dual Audio].mkv",
        "Heat (BD 1080p).mkv",
    ):
        assert match_anime_keyword(name) is None
