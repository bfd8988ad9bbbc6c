"""Unit tests for the destination existence probe."""

from unittest.mock import Mock

from gitsite.deploy.probe import probe_destination, tracked_path_exists


class TestProbeDestination:
    """Test probe_destination() against injected existence predicates."""

    def test_nothing_exists_creates_every_segment(self):
        exists = Mock(return_value=False)

        result = probe_destination("a/b/c", exists)

        assert result.existing == ""
        assert result.pending == ["a", "b", "c"]
        assert result.destination == "a/b/c"

    def test_check_count_bounded_by_depth_plus_one(self):
        exists = Mock(return_value=False)

        result = probe_destination("a/b/c", exists)

        assert result.checks == 4
        assert exists.call_count == 3

    def test_deepest_existing_ancestor_found(self):
        existing = {"docs", "docs/api"}

        result = probe_destination("docs/api/v2/html", lambda p: p in existing)

        assert result.existing == "docs/api"
        assert result.pending == ["v2", "html"]
        assert result.checks == 3

    def test_existing_destination_needs_nothing(self):
        exists = Mock(return_value=True)

        result = probe_destination("docs/api", exists)

        assert result.existing == "docs/api"
        assert result.pending == []
        exists.assert_called_once_with("docs/api")

    def test_root_always_exists_and_is_never_queried(self):
        exists = Mock(return_value=False)

        result = probe_destination("", exists)

        assert result.existing == ""
        assert result.pending == []
        assert result.checks == 1
        exists.assert_not_called()

    def test_path_is_normalized(self):
        result = probe_destination("/docs\\api/", lambda p: False)

        assert result.pending == ["docs", "api"]


class TestTrackedPathExists:
    """Test the predicate built from a git ls-files listing."""

    def setup_method(self):
        self.tracked = ["index.html", "docs/api/index.html", "moduleA/index.html"]

    def test_tracked_file_exists(self):
        assert tracked_path_exists(self.tracked)("index.html")

    def test_ancestor_directory_exists(self):
        exists = tracked_path_exists(self.tracked)

        assert exists("docs")
        assert exists("docs/api")

    def test_untracked_path_missing(self):
        exists = tracked_path_exists(self.tracked)

        assert not exists("doc")
        assert not exists("docs/api/v2")

    def test_prefix_is_prepended(self):
        exists = tracked_path_exists(self.tracked, prefix="moduleA/")

        assert exists("index.html")
        assert not exists("docs")
        assert exists("")

    def test_root_exists_for_empty_checkout(self):
        assert tracked_path_exists([])("")
