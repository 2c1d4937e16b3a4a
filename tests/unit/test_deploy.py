"""Tests for blogops.deploy: rebuild, commit and push."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock

from blogops.deploy import BANNER, DeployWorkflow, commit_message, default_commit_message
from blogops.exceptions import CommandError
from blogops.models import WorkflowStatus

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_workflow(repo: AsyncMock | None = None, hugo: AsyncMock | None = None, **kwargs):
    repo = repo or AsyncMock()
    hugo = hugo or AsyncMock()
    workflow = DeployWorkflow(source_dir="/srv/blog", output_repo=repo, hugo=hugo, **kwargs)
    return workflow, repo, hugo


# ---------------------------------------------------------------------------
# Commit messages
# ---------------------------------------------------------------------------


class TestCommitMessage:
    def test_default_message_is_timestamped(self) -> None:
        msg = default_commit_message(datetime(2024, 3, 5, 14, 7, 9, tzinfo=UTC))
        assert msg == "rebuilding site Tue Mar 05 14:07:09 UTC 2024"

    def test_words_are_joined(self) -> None:
        assert commit_message(["fix", "typo", "in", "about"]) == "fix typo in about"

    def test_empty_words_fall_back_to_default(self) -> None:
        assert commit_message([]).startswith("rebuilding site ")

    def test_blank_word_is_not_empty(self) -> None:
        assert commit_message([" "]) == " "


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


class TestDeployWorkflow:
    async def test_successful_deploy_order(self) -> None:
        workflow, repo, hugo = _make_workflow()
        order: list[str] = []
        for name, mock in (
            ("pull", repo.pull),
            ("build", hugo.build),
            ("add_all", repo.add_all),
            ("commit", repo.commit),
            ("push", repo.push),
        ):
            mock.side_effect = lambda *_a, _n=name, **_k: order.append(_n)

        result = await workflow.run(["new", "post"])

        assert result.status is WorkflowStatus.SUCCESS
        assert order == ["pull", "build", "add_all", "commit", "push"]
        hugo.build.assert_awaited_once_with("hello-friend", source_dir="/srv/blog")
        repo.commit.assert_awaited_once_with("new post")
        repo.push.assert_awaited_once_with("origin", "master")
        assert result.commit_message == "new post"
        assert result.steps_completed == [
            "git_pull",
            "hugo_build",
            "git_add",
            "git_commit",
            "git_push",
        ]

    async def test_default_message_used_without_words(self) -> None:
        workflow, repo, _ = _make_workflow()
        result = await workflow.run()

        assert result.commit_message is not None
        assert result.commit_message.startswith("rebuilding site ")
        repo.commit.assert_awaited_once_with(result.commit_message)

    async def test_commit_failure_never_pushes(self) -> None:
        repo = AsyncMock()
        repo.commit = AsyncMock(
            side_effect=CommandError(["git", "commit"], 1, "nothing to commit, working tree clean")
        )
        workflow, _, _ = _make_workflow(repo=repo)

        result = await workflow.run()

        assert result.status is WorkflowStatus.FAILED
        assert result.exit_code == 1
        repo.push.assert_not_awaited()
        assert "git_push" not in result.steps_completed

    async def test_hugo_failure_stops_before_staging(self) -> None:
        hugo = AsyncMock()
        hugo.build = AsyncMock(side_effect=CommandError(["hugo", "-t", "x"], 255, "theme not found"))
        workflow, repo, _ = _make_workflow(hugo=hugo, theme="x")

        result = await workflow.run()

        assert result.exit_code == 255
        repo.add_all.assert_not_awaited()
        repo.commit.assert_not_awaited()

    async def test_push_rejected_fails_without_cleanup(self) -> None:
        repo = AsyncMock()
        repo.push = AsyncMock(side_effect=CommandError(["git", "push"], 1, "rejected"))
        workflow, _, _ = _make_workflow(repo=repo)

        result = await workflow.run(["msg"])

        assert result.status is WorkflowStatus.FAILED
        assert result.steps_completed[-1] == "git_commit"

    async def test_banner_echoed(self) -> None:
        lines: list[str] = []
        workflow, _, _ = _make_workflow(echo=lines.append)
        await workflow.run()
        assert lines == [BANNER]

    async def test_custom_remote_and_branch(self) -> None:
        workflow, repo, _ = _make_workflow(remote="upstream", branch="gh-pages")
        await workflow.run()
        repo.push.assert_awaited_once_with("upstream", "gh-pages")
