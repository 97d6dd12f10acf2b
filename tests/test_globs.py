"""Tests for glob matching."""

import pytest
from kiln.core.globs import match_glob, matches_any


class TestMatchGlob:
    """Tests for match_glob()."""

    @pytest.mark.parametrize(
        ("path", "pattern"),
        [
            ("about/index.html", "**/*.html"),
            ("index.html", "**/*.html"),
            ("index.html", "*.html"),
            ("/drafts/wip.html", "./drafts/*.html"),
            ("drafts/notes/a.html", "drafts/**"),
            ("drafts", "drafts/**"),
            ("a/b/c/d.html", "a/**/d.html"),
            ("a/d.html", "a/**/d.html"),
            ("/about/history/2024/", "/about/history/2024"),
            ("page1.html", "page[0-9].html"),
        ],
    )
    def test__matching_paths(self, path: str, pattern: str) -> None:
        """Path matches the whole pattern."""
        assert match_glob(path, pattern)

    @pytest.mark.parametrize(
        ("path", "pattern"),
        [
            ("about/index.css", "**/*.html"),
            ("about/team.html", "*.html"),
            ("about/team.html", "about?team.html"),
            ("about/index.html", "about"),
            ("/draftsman/a.html", "drafts"),
            ("pageA.html", "page[!A-Z].html"),
            ("/about/", ""),
            ("/", "drafts"),
        ],
    )
    def test__non_matching_paths(self, path: str, pattern: str) -> None:
        """Single-segment wildcards stay within one directory."""
        assert not match_glob(path, pattern)

    @pytest.mark.parametrize(
        ("path", "pattern"),
        [
            ("/drafts/wip.html", "./drafts"),
            ("/drafts/wip.html", "/drafts/"),
            ("/about/history/2024/", "/about/history"),
        ],
    )
    def test__match_parents__directory_covers_contents(self, path: str, pattern: str) -> None:
        """A directory pattern matches everything below it."""
        assert match_glob(path, pattern, match_parents=True)

    def test__match_parents__wildcards_still_segment_bound(self) -> None:
        """A file pattern doesn't match files in subdirectories through a parent."""
        assert not match_glob("/docs/b.html", "*.html", match_parents=True)
        assert match_glob("/a.html", "*.html", match_parents=True)

    def test__match_parents__similar_prefix__no_match(self) -> None:
        """Parents are matched by whole segments."""
        assert not match_glob("/draftsman/a.html", "drafts", match_parents=True)

    def test__windows_separators__normalized(self) -> None:
        """Backslashes are treated as separators."""
        assert match_glob("drafts\\wip.html", "drafts/*.html")
        assert match_glob("drafts\\wip.html", "drafts", match_parents=True)


class TestMatchesAny:
    """Tests for matches_any()."""

    def test__no_patterns__matches_nothing(self) -> None:
        """Empty or missing pattern lists never match."""
        assert not matches_any("/a", None)
        assert not matches_any("/a", [])

    def test__any_pattern__matches(self) -> None:
        """One matching pattern is enough."""
        assert matches_any("/b/c.html", ["a/*", "b/*"])

    def test__match_parents__passed_through(self) -> None:
        """Directory patterns only cover their contents when asked to."""
        assert not matches_any("/b/c.html", ["a", "b"])
        assert matches_any("/b/c.html", ["a", "b"], match_parents=True)
