"""Unit tests for ContentMerger.

Copies run against a real temporary directory; git add is mocked.
"""

import pytest
from unittest.mock import Mock

from gitsite.core.implementations import RealFileSystemService
from gitsite.core.protocols import Logger
from gitsite.deploy.exceptions import CommandFailedError, DeploymentError, NothingStagedError
from gitsite.deploy.git import CommandOutcome, GitCommandRunner
from gitsite.deploy.merge import ContentMerger


def ok(*args):
    return CommandOutcome(("git", *args), "", 0, "", "")


def failed(*args):
    return CommandOutcome(("git", *args), "", 1, "", "fatal: pathspec did not match")


def added_paths(runner):
    return [c[0][1][-1] for c in runner.execute.call_args_list]


class TestContentMerger:
    """Test copying and staging content in a checkout."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        self.scratch = tmp_path / "checkout"
        self.scratch.mkdir()
        (self.scratch / ".git").mkdir()
        (self.scratch / ".git" / "HEAD").write_text("ref: refs/heads/master\n")

        self.site = tmp_path / "site"
        (self.site / "css").mkdir(parents=True)
        (self.site / "index.html").write_text("<html/>")
        (self.site / "css" / "site.css").write_text("body {}")

        self.runner = Mock(spec=GitCommandRunner)
        self.runner.execute.side_effect = lambda cwd, args: ok(*args)
        self.logger = Mock(spec=Logger)
        self.merger = ContentMerger(self.runner, RealFileSystemService(), self.logger)

    def test_directory_merge_counts_files(self):
        """Test two files staged, directories added but not counted."""
        result = self.merger.merge(self.site, self.scratch, "docs")

        assert result.staged_files == 2
        assert result.already_existed is False
        assert result.relative_path == "docs"
        assert (self.scratch / "docs" / "css" / "site.css").read_text() == "body {}"

    def test_existing_branch_content_not_counted(self):
        """Test only the deployed tree is staged when merging into an existing directory."""
        (self.scratch / "docs" / "keep").mkdir(parents=True)
        (self.scratch / "docs" / "old.html").write_text("old")
        (self.scratch / "docs" / "keep" / "x.html").write_text("x")

        result = self.merger.merge(self.site, self.scratch, "docs")

        assert result.already_existed is True
        assert result.staged_files == 2
        assert added_paths(self.runner) == ["docs/css", "docs/css/site.css", "docs/index.html"]
        assert (self.scratch / "docs" / "old.html").exists()

    def test_git_directory_never_staged(self):
        """Test .git entries are skipped when staging."""
        (self.site / ".git").mkdir()
        (self.site / ".git" / "config").write_text("[core]")

        result = self.merger.merge(self.site, self.scratch, "docs")

        paths = added_paths(self.runner)
        assert paths == ["docs/css", "docs/css/site.css", "docs/index.html"]
        assert result.staged_files == 2

    def test_merge_into_checkout_root(self):
        self.merger.merge(self.site, self.scratch, "")

        assert added_paths(self.runner) == ["css", "css/site.css", "index.html"]
        assert (self.scratch / ".git" / "HEAD").exists()

    def test_single_file_merge(self):
        """Test a file lands under its target name and is staged once."""
        source = self.site / "index.html"

        result = self.merger.merge(source, self.scratch, "docs", "start.html")

        assert result.staged_files == 1
        assert result.relative_path == "docs/start.html"
        assert (self.scratch / "docs" / "start.html").exists()
        assert added_paths(self.runner) == ["docs/start.html"]

    def test_existing_file_not_restaged(self):
        """Test an overwritten tracked file is left to commit -a."""
        (self.scratch / "index.html").write_text("old")

        result = self.merger.merge(self.site / "index.html", self.scratch, "", "index.html")

        assert result.already_existed is True
        assert result.staged_files == 0
        self.runner.execute.assert_not_called()
        assert (self.scratch / "index.html").read_text() == "<html/>"

    def test_add_retried_once(self):
        """Test a failing git add is retried before giving up."""
        self.runner.execute.side_effect = [failed("add"), ok("add")]

        result = self.merger.merge(self.site / "index.html", self.scratch, "", "index.html")

        assert result.staged_files == 1
        assert self.runner.execute.call_count == 2

    def test_add_failing_twice_raises(self):
        self.runner.execute.side_effect = lambda cwd, args: failed(*args)

        with pytest.raises(CommandFailedError) as exc_info:
            self.merger.merge(self.site / "index.html", self.scratch, "", "index.html")

        assert exc_info.value.step == "git-add"
        assert self.runner.execute.call_count == 2

    def test_empty_new_directory_raises_nothing_staged(self, tmp_path):
        """Test a new destination with zero files is an error."""
        empty = tmp_path / "empty"
        empty.mkdir()

        with pytest.raises(NothingStagedError):
            self.merger.merge(empty, self.scratch, "docs")

    def test_create_directories(self):
        """Test pending segments are created below the base and staged in turn."""
        rel = self.merger.create_directories(self.scratch, "docs", ["api", "v2"])

        assert rel == "docs/api/v2"
        assert (self.scratch / "docs" / "api" / "v2").is_dir()
        assert added_paths(self.runner) == ["docs/api", "docs/api/v2"]

    def test_create_directories_nothing_pending(self):
        rel = self.merger.create_directories(self.scratch, "", [])

        assert rel == ""
        self.runner.execute.assert_not_called()

    def test_create_directories_failure(self):
        """Test a file in the way becomes a DeploymentError."""
        (self.scratch / "docs").write_text("not a directory")

        with pytest.raises(DeploymentError):
            self.merger.create_directories(self.scratch, "", ["docs", "api"])
