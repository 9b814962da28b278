"""Tests for link classification and its precedence rules."""

import pytest

from app.bot.link_classifier import (
    CHECK_ORDER,
    INSTAGRAM_REEL,
    LAST_MATCH_WINS_PRIORITY,
    SPOTIFY_TRACK,
    TIKTOK_LONG,
    TIKTOK_SHORT,
    LinkClassifier,
)
from app.models import LinkKind, ReelLink, SpotifyLink, TikTokLink


class TestSingleCategory:
    def setup_method(self) -> None:
        self.classifier = LinkClassifier()

    @pytest.mark.parametrize(
        "key, expected_type, expected_kind",
        [
            ("tiktok_short", TikTokLink, LinkKind.TIKTOK),
            ("tiktok_long", TikTokLink, LinkKind.TIKTOK),
            ("reel", ReelLink, LinkKind.REEL),
            ("spotify", SpotifyLink, LinkKind.SPOTIFY),
        ],
    )
    def test_single_link_is_returned(self, test_urls, key, expected_type, expected_kind) -> None:
        url = test_urls[key]

        link = self.classifier.classify(f"look at this {url} lol")

        assert isinstance(link, expected_type)
        assert link.kind is expected_kind
        assert link.url == url

    def test_short_tiktok_is_flagged(self, test_urls) -> None:
        link = self.classifier.classify(test_urls["tiktok_short"])

        assert isinstance(link, TikTokLink)
        assert link.is_short is True

    def test_canonical_tiktok_is_not_flagged(self, test_urls) -> None:
        link = self.classifier.classify(test_urls["tiktok_long"])

        assert isinstance(link, TikTokLink)
        assert link.is_short is False

    def test_spotify_keeps_share_token(self) -> None:
        text = "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc123&utm=x"

        link = self.classifier.classify(text)

        assert link.url == "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc123"

    def test_spotify_without_share_token(self) -> None:
        link = self.classifier.classify("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC")

        assert link.url == "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"

    def test_reel_url_stops_at_path_separator(self) -> None:
        link = self.classifier.classify("https://www.instagram.com/reel/C1a-B_2xYz/?igsh=abc")

        assert link.url == "https://www.instagram.com/reel/C1a-B_2xYz"


class TestNoMatch:
    def setup_method(self) -> None:
        self.classifier = LinkClassifier()

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "just chatting",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "http://vm.tiktok.com/ZMabCd12",
            "https://www.instagram.com/p/C1aB2xYz",
            "https://open.spotify.com/album/4uLU6hMCjMI75M1A2tKUQC",
        ],
    )
    def test_unrecognised_text_yields_none(self, text) -> None:
        assert self.classifier.classify(text) is None


class TestPrecedence:
    """Several categories in one message: the one checked last wins."""

    def setup_method(self) -> None:
        self.classifier = LinkClassifier()

    def test_priority_constant_is_reverse_check_order(self) -> None:
        assert CHECK_ORDER == (TIKTOK_SHORT, TIKTOK_LONG, INSTAGRAM_REEL, SPOTIFY_TRACK)
        assert LAST_MATCH_WINS_PRIORITY == (SPOTIFY_TRACK, INSTAGRAM_REEL, TIKTOK_LONG, TIKTOK_SHORT)
        assert self.classifier.priority == LAST_MATCH_WINS_PRIORITY

    @pytest.mark.parametrize(
        "keys, winner",
        [
            (("tiktok_short", "tiktok_long"), "tiktok_long"),
            (("tiktok_long", "tiktok_short"), "tiktok_long"),
            (("tiktok_short", "reel"), "reel"),
            (("tiktok_long", "reel"), "reel"),
            (("spotify", "tiktok_long"), "spotify"),
            (("reel", "spotify"), "spotify"),
            (("tiktok_short", "tiktok_long", "reel", "spotify"), "spotify"),
        ],
    )
    def test_last_checked_category_wins(self, test_urls, keys, winner) -> None:
        text = " and ".join(test_urls[key] for key in keys)

        link = self.classifier.classify(text)

        assert link.url == test_urls[winner]

    def test_position_in_text_does_not_matter(self, test_urls) -> None:
        text = f"{test_urls['spotify']} then {test_urls['tiktok_short']}"

        assert self.classifier.classify(text).url == test_urls["spotify"]

    def test_first_match_wins_mode(self, test_urls) -> None:
        classifier = LinkClassifier(first_match_wins=True)
        text = f"{test_urls['spotify']} {test_urls['reel']} {test_urls['tiktok_short']}"

        link = classifier.classify(text)

        assert link.url == test_urls["tiktok_short"]
        assert classifier.priority == CHECK_ORDER

    def test_classify_all_lists_matches_in_check_order(self, test_urls) -> None:
        text = f"{test_urls['spotify']} {test_urls['tiktok_long']}"

        links = self.classifier.classify_all(text)

        assert [link.url for link in links] == [test_urls["tiktok_long"], test_urls["spotify"]]

    def test_classify_all_empty(self) -> None:
        assert self.classifier.classify_all(None) == []
