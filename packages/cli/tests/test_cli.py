"""Tests for the CLI entry point."""

import json
import subprocess
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from prcomments_cli.auth import ResolvedToken, resolve_github_token
from prcomments_cli.cli import main
from prcomments_core.comments import FetchResult
from prcomments_core.gh.errors import AuthenticationFailed, ResourceNotFound
from prcomments_core.gh.normalize import Comment
from prcomments_core.validation import FetchRequest

TOKEN = "ghp_" + "a" * 36
PR_URL = "https://github.com/octo/hello/pull/7"
REQUEST = FetchRequest(owner="octo", repo="hello", pr_number=7)


@pytest.fixture(autouse=True)
def _session_env(monkeypatch):
    # A valid secret keeps the insecure-default warning out of captured output.
    monkeypatch.setenv("SESSION_SECRET", "s" * 32)
    monkeypatch.delenv("PRCOMMENTS_ENV", raising=False)
    monkeypatch.delenv("PRCOMMENTS_CONFIG", raising=False)


def _make_result(n=2):
    comments = [
        Comment(path=f"src/file{i}.py", body=f"Suggestion {i}", line=i + 1, author="rev", created_at="")
        for i in range(n)
    ]
    return FetchResult(request=REQUEST, comments=comments)


def _patch_fetch(mocker, token=TOKEN, source="env", result=None, side_effect=None):
    """Patch token resolution and fetch_comments for fetch command tests."""
    resolved = ResolvedToken(token, source) if token else None
    mocker.patch("prcomments_cli.auth.resolve_github_token", return_value=resolved)
    return mocker.patch(
        "prcomments_cli.commands.fetch.fetch_comments",
        return_value=result if result is not None else _make_result(),
        side_effect=side_effect,
    )


class TestFetchValidation:
    def test_missing_github_token(self, mocker):
        mock_fetch = _patch_fetch(mocker, token=None)

        result = CliRunner().invoke(main, ["fetch", PR_URL])
        assert result.exit_code != 0
        assert "GITHUB_TOKEN" in result.output
        mock_fetch.assert_not_called()

    def test_invalid_url(self, mocker):
        mock_fetch = _patch_fetch(mocker)

        result = CliRunner().invoke(main, ["fetch", "https://github.com/octo/hello/issues/7"])
        assert result.exit_code == 2
        assert "Invalid URL format" in result.output
        mock_fetch.assert_not_called()


class TestFetchOutput:
    def test_calls_fetch_with_parsed_request(self, mocker):
        mock_fetch = _patch_fetch(mocker)

        result = CliRunner().invoke(main, ["fetch", PR_URL])

        assert result.exit_code == 0, result.output
        args = mock_fetch.call_args.args
        assert args[0] == REQUEST
        assert args[1] == TOKEN

    def test_table_lists_comments(self, mocker):
        _patch_fetch(mocker)

        result = CliRunner().invoke(main, ["fetch", PR_URL])

        assert "src/file0.py" in result.output
        assert "Suggestion 1" in result.output
        assert TOKEN not in result.output

    def test_no_comments(self, mocker):
        _patch_fetch(mocker, result=_make_result(0))
        result = CliRunner().invoke(main, ["fetch", PR_URL])
        assert result.exit_code == 0
        assert "No comments found" in result.output

    def test_json_output(self, mocker):
        _patch_fetch(mocker)

        result = CliRunner().invoke(main, ["fetch", PR_URL, "--json"])

        data = json.loads(result.output)
        assert data["total"] == 2
        assert data["comments"][0] == {
            "path": "src/file0.py",
            "body": "Suggestion 0",
            "line": 1,
            "author": "rev",
            "createdAt": "",
        }

    def test_writes_markdown_export(self, mocker, tmp_path):
        _patch_fetch(mocker)
        out = tmp_path / "review.md"

        result = CliRunner().invoke(main, ["fetch", PR_URL, "--output", str(out)])

        assert result.exit_code == 0, result.output
        content = out.read_text()
        assert "**Repository:** octo/hello" in content
        assert "## 2. src/file1.py" in content

    def test_default_export_filename(self, mocker):
        _patch_fetch(mocker)
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["fetch", PR_URL, "-o", "-"])
            assert result.exit_code == 0, result.output
            with open("comments-octo-hello-pr7.md") as f:
                assert "**Pull Request:** #7" in f.read()


class TestFetchErrors:
    def test_authentication_failure_names_token_source(self, mocker):
        _patch_fetch(mocker, source="gh", side_effect=AuthenticationFailed())

        result = CliRunner().invoke(main, ["fetch", PR_URL])

        assert result.exit_code == 1
        assert "Authentication failed" in result.output
        assert "gh CLI session" in result.output

    def test_resolved_token_passed_to_fetch(self, mocker):
        mock_fetch = _patch_fetch(mocker)

        result = CliRunner().invoke(main, ["fetch", PR_URL, "--json"])

        assert result.exit_code == 0, result.output
        assert mock_fetch.call_args.args[1] == TOKEN

    def test_not_found(self, mocker):
        _patch_fetch(mocker, side_effect=ResourceNotFound())

        result = CliRunner().invoke(main, ["fetch", PR_URL])

        assert result.exit_code == 1
        assert "Pull request not found" in result.output


class TestTokenCheck:
    def test_recognized_token(self, mocker):
        mocker.patch("prcomments_cli.auth.resolve_github_token", return_value=ResolvedToken(TOKEN, "env"))
        result = CliRunner().invoke(main, ["token", "check"])
        assert result.exit_code == 0
        assert "GITHUB_TOKEN" in result.output
        assert "recognized" in result.output
        assert TOKEN not in result.output

    def test_unrecognized_format(self, mocker):
        mocker.patch("prcomments_cli.auth.resolve_github_token", return_value=ResolvedToken("gho_" + "b" * 36, "gh"))
        result = CliRunner().invoke(main, ["token", "check"])
        assert result.exit_code == 0
        assert "not recognized" in result.output

    def test_no_token(self, mocker):
        mocker.patch("prcomments_cli.auth.resolve_github_token", return_value=None)
        result = CliRunner().invoke(main, ["token", "check"])
        assert result.exit_code == 1


class TestServe:
    def test_runs_uvicorn(self, mocker):
        mock_run = mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve", "--port", "9000"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 9000}


class TestConfig:
    def test_invalid_config_file_is_usage_error(self, tmp_path):
        cfg = tmp_path / "bad.yml"
        cfg.write_text("max_pages: 0\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "token", "check"])
        assert result.exit_code == 2
        assert "max_pages" in result.output


# ---------------------------------------------------------------------------
# resolve_github_token
# ---------------------------------------------------------------------------


class TestResolveGithubToken:
    def test_env_var_takes_precedence(self, monkeypatch, mocker):
        monkeypatch.setenv("GITHUB_TOKEN", TOKEN)
        mock_run = mocker.patch("prcomments_cli.auth.subprocess.run")

        resolved = resolve_github_token()

        assert resolved.value == TOKEN
        assert resolved.source == "env"
        mock_run.assert_not_called()

    def test_falls_back_to_gh_cli(self, monkeypatch, mocker):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        mocker.patch(
            "prcomments_cli.auth.subprocess.run",
            return_value=MagicMock(returncode=0, stdout="gho_fromgh\n"),
        )

        resolved = resolve_github_token()

        assert resolved.value == "gho_fromgh"
        assert resolved.source == "gh"

    def test_gh_not_installed(self, monkeypatch, mocker):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        mocker.patch("prcomments_cli.auth.subprocess.run", side_effect=FileNotFoundError)
        assert resolve_github_token() is None

    def test_gh_timeout(self, monkeypatch, mocker):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        mocker.patch("prcomments_cli.auth.subprocess.run", side_effect=subprocess.TimeoutExpired("gh", 5))
        assert resolve_github_token() is None

    def test_gh_not_logged_in(self, monkeypatch, mocker):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        mocker.patch("prcomments_cli.auth.subprocess.run", return_value=MagicMock(returncode=1, stdout=""))
        assert resolve_github_token() is None

    def test_repr_hides_token(self):
        assert TOKEN not in repr(ResolvedToken(TOKEN, "env"))
