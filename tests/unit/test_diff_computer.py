"""Unit tests for DiffComputer."""

import pytest

from src.schemas.git import GitError, GitErrorCode, GitFileStatus, GitRawDiffResult
from src.services.diff_computer import DiffComputer, build_diff_result
from src.services.errors import InvalidRefError
from tests.fakes import FakeGitGateway, command_failed

UNTRACKED_QUERY = ("status", "--untracked-files=all", "--short")


def branch_diff_responses(numstat, name_status, diff, refs=("main", "feature")):
    return {
        ("diff", "--numstat", *refs): numstat,
        ("diff", "--name-status", *refs): name_status,
        ("diff", "--unified=5", *refs): diff,
    }


class TestBuildDiffResult:
    def test_summary_matches_files(self):
        result = build_diff_result(
            "5\t2\ta.ts\n10\t0\tb.ts", "M\ta.ts\nA\tb.ts", "raw", set()
        )

        assert result.summary.total_files == len(result.files) == 2
        assert result.summary.total_additions == 15
        assert result.summary.total_deletions == 2
        assert result.raw_diff == "raw"

    def test_missing_name_status_defaults_to_modified(self):
        result = build_diff_result("1\t1\tlonely.ts", "", "", set())

        assert result.files[0].status == GitFileStatus.MODIFIED
        assert result.files[0].old_file_path is None

    def test_untracked_always_wins(self):
        result = build_diff_result("3\t0\tnew.ts", "A\tnew.ts", "", {"new.ts"})

        assert result.files[0].status == GitFileStatus.UNTRACKED

    def test_files_only_in_name_status_are_ignored(self):
        result = build_diff_result("1\t0\ta.ts", "M\ta.ts\nD\tghost.ts", "", set())

        assert [f.file_path for f in result.files] == ["a.ts"]


class TestDiffComputer:
    @pytest.mark.asyncio
    async def test_diff_between_branches(self):
        raw_diff = (
            "diff --git a/src/file1.ts b/src/file1.ts\n"
            "--- a/src/file1.ts\n"
            "+++ b/src/file1.ts\n"
            "@@ -1,5 +1,8 @@\n"
            "-  old\n"
            "+  new\n"
        )
        gateway = FakeGitGateway(
            branch_diff_responses(
                "5\t2\tsrc/file1.ts\n10\t0\tsrc/file2.ts",
                "M\tsrc/file1.ts\nA\tsrc/file2.ts",
                raw_diff,
            )
        )

        result = await DiffComputer(gateway).get_diff(
            "/repo", "branch:main", "branch:feature"
        )

        assert result.success is True
        files = result.data.files
        assert [f.file_path for f in files] == ["src/file1.ts", "src/file2.ts"]
        assert files[0].status == GitFileStatus.MODIFIED
        assert (files[0].additions, files[0].deletions) == (5, 2)
        assert files[1].status == GitFileStatus.ADDED
        assert result.data.summary.total_additions == 15
        assert result.data.summary.total_deletions == 2
        assert result.data.raw_diff == raw_diff
        # No untracked staging when both sides are commits
        assert gateway.commands_starting_with("status") == []
        assert gateway.commands_starting_with("add") == []

    @pytest.mark.asyncio
    async def test_same_ref_returns_empty_without_git_calls(self):
        gateway = FakeGitGateway()

        result = await DiffComputer(gateway).get_diff(
            "/anywhere", "branch:main", "branch:main"
        )

        assert result.success is True
        assert result.data == GitRawDiffResult.empty()
        assert gateway.calls == []
        assert gateway.is_repository_calls == 0

    @pytest.mark.asyncio
    async def test_working_against_working_is_empty(self):
        gateway = FakeGitGateway()

        result = await DiffComputer(gateway).get_diff("/repo", "working", "working")

        assert result.data.summary.total_files == 0
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_working_tree_as_from_side_is_rejected(self):
        with pytest.raises(InvalidRefError, match="Invalid fromRef"):
            await DiffComputer(FakeGitGateway()).get_diff("/repo", "working", "HEAD")

    @pytest.mark.asyncio
    async def test_invalid_ref_text_raises(self):
        with pytest.raises(InvalidRefError, match="Invalid ref text"):
            await DiffComputer(FakeGitGateway()).get_diff(
                "/repo", "invalidref", "branch:feature"
            )

    @pytest.mark.asyncio
    async def test_pure_rename(self):
        gateway = FakeGitGateway(
            branch_diff_responses(
                "0\t0\told-name.ts\tnew-name.ts", "R100\told-name.ts\tnew-name.ts", ""
            )
        )

        result = await DiffComputer(gateway).get_diff(
            "/repo", "branch:main", "branch:feature"
        )

        file = result.data.files[0]
        assert file.file_path == "new-name.ts"
        assert (file.additions, file.deletions) == (0, 0)
        assert file.status == GitFileStatus.RENAMED
        assert file.old_file_path == "old-name.ts"

    @pytest.mark.asyncio
    async def test_binary_file(self):
        gateway = FakeGitGateway(
            branch_diff_responses(
                "-\t-\timage.png",
                "M\timage.png",
                "Binary files a/image.png and b/image.png differ",
            )
        )

        result = await DiffComputer(gateway).get_diff(
            "/repo", "branch:main", "branch:feature"
        )

        file = result.data.files[0]
        assert (file.additions, file.deletions) == (0, 0)
        assert file.status == GitFileStatus.MODIFIED

    @pytest.mark.asyncio
    async def test_working_diff_stages_and_resets_untracked_files(self):
        responses = branch_diff_responses(
            "1\t1\tsrc/app.ts\n4\t0\tnotes.md",
            "M\tsrc/app.ts\nA\tnotes.md",
            "raw",
            refs=("HEAD",),
        )
        responses[UNTRACKED_QUERY] = " M src/app.ts\n?? notes.md\n"
        gateway = FakeGitGateway(responses)

        result = await DiffComputer(gateway).get_diff("/repo", "HEAD", "working")

        statuses = {f.file_path: f.status for f in result.data.files}
        assert statuses == {
            "src/app.ts": GitFileStatus.MODIFIED,
            "notes.md": GitFileStatus.UNTRACKED,
        }

        commands = [call[:2] for call in gateway.calls]
        assert commands[0] == ["status", "--untracked-files=all"]
        assert commands[1] == ["add", "-N"]
        assert sorted(commands[2:5]) == [
            ["diff", "--name-status"],
            ["diff", "--numstat"],
            ["diff", "--unified=5"],
        ]
        assert gateway.calls[5] == ["reset", "HEAD", "--", "notes.md"]
        assert gateway.calls[1] == ["add", "-N", "--", "notes.md"]

    @pytest.mark.asyncio
    async def test_quoted_untracked_paths_are_staged_unquoted(self):
        responses = branch_diff_responses(
            "1\t0\tmy notes.txt\n1\t0\tplain.txt",
            "A\tmy notes.txt\nA\tplain.txt",
            "raw",
            refs=("HEAD",),
        )
        responses[UNTRACKED_QUERY] = '?? "my notes.txt"\n?? plain.txt\n'
        gateway = FakeGitGateway(responses)

        result = await DiffComputer(gateway).get_diff("/repo", "HEAD", "working")

        assert gateway.commands_starting_with("add") == [
            ["add", "-N", "--", "my notes.txt", "plain.txt"]
        ]
        assert gateway.commands_starting_with("reset") == [
            ["reset", "HEAD", "--", "my notes.txt", "plain.txt"]
        ]
        assert {f.file_path: f.status for f in result.data.files} == {
            "my notes.txt": GitFileStatus.UNTRACKED,
            "plain.txt": GitFileStatus.UNTRACKED,
        }

    @pytest.mark.asyncio
    async def test_no_untracked_files_skips_staging(self):
        responses = branch_diff_responses("1\t0\ta.ts", "M\ta.ts", "", refs=("HEAD",))
        responses[UNTRACKED_QUERY] = " M a.ts\n"
        gateway = FakeGitGateway(responses)

        await DiffComputer(gateway).get_diff("/repo", "HEAD", "working")

        assert gateway.commands_starting_with("add") == []
        assert gateway.commands_starting_with("reset") == []

    @pytest.mark.asyncio
    async def test_reset_runs_when_query_fails(self):
        responses = branch_diff_responses(
            command_failed(), "A\tnew.ts", "", refs=("HEAD",)
        )
        responses[UNTRACKED_QUERY] = "?? new.ts\n"
        gateway = FakeGitGateway(responses)

        result = await DiffComputer(gateway).get_diff("/repo", "HEAD", "working")

        assert result.success is False
        assert result.error.code == GitErrorCode.COMMAND_FAILED
        assert gateway.calls[-1] == ["reset", "HEAD", "--", "new.ts"]

    @pytest.mark.asyncio
    async def test_reset_failure_does_not_change_result(self):
        responses = branch_diff_responses("2\t0\tnew.ts", "A\tnew.ts", "raw", refs=("HEAD",))
        responses[UNTRACKED_QUERY] = "?? new.ts\n"
        responses[("reset", "HEAD", "--", "new.ts")] = command_failed()
        gateway = FakeGitGateway(responses)

        result = await DiffComputer(gateway).get_diff("/repo", "HEAD", "working")

        assert result.success is True
        assert result.data.files[0].status == GitFileStatus.UNTRACKED

    @pytest.mark.asyncio
    async def test_untracked_listing_failure_still_diffs(self):
        responses = branch_diff_responses("1\t0\ta.ts", "M\ta.ts", "", refs=("HEAD",))
        responses[UNTRACKED_QUERY] = command_failed()
        gateway = FakeGitGateway(responses)

        result = await DiffComputer(gateway).get_diff("/repo", "HEAD", "working")

        assert result.success is True
        assert gateway.commands_starting_with("reset") == []

    @pytest.mark.asyncio
    async def test_branch_not_found_is_propagated(self):
        not_found = GitError(
            code=GitErrorCode.BRANCH_NOT_FOUND,
            message="Branch or commit not found",
            command="git diff --numstat nonexistent feature",
            stderr="fatal: ambiguous argument 'nonexistent'",
        )
        gateway = FakeGitGateway(
            branch_diff_responses(
                not_found, not_found, not_found, refs=("nonexistent", "feature")
            )
        )

        result = await DiffComputer(gateway).get_diff(
            "/repo", "branch:nonexistent", "branch:feature"
        )

        assert result.success is False
        assert result.error.code == GitErrorCode.BRANCH_NOT_FOUND
        assert result.error.message == "Branch or commit not found"

    @pytest.mark.asyncio
    async def test_custom_context_lines(self):
        gateway = FakeGitGateway()

        await DiffComputer(gateway, context_lines=3).get_diff(
            "/repo", "branch:main", "HEAD"
        )

        assert ["diff", "--unified=3", "main", "HEAD"] in gateway.calls

    @pytest.mark.asyncio
    async def test_compare_branches_is_get_diff(self):
        gateway = FakeGitGateway(
            branch_diff_responses("1\t0\ta.ts", "A\ta.ts", "raw")
        )

        result = await DiffComputer(gateway).compare_branches(
            "/repo", "branch:main", "branch:feature"
        )

        assert result.data.files[0].status == GitFileStatus.ADDED

    @pytest.mark.asyncio
    async def test_many_files(self):
        numstat = "\n".join(f"1\t2\tfile{i}.ts" for i in range(200))
        name_status = "\n".join(f"M\tfile{i}.ts" for i in range(200))
        gateway = FakeGitGateway(branch_diff_responses(numstat, name_status, ""))

        result = await DiffComputer(gateway).get_diff(
            "/repo", "branch:main", "branch:feature"
        )

        assert result.data.summary.total_files == 200
        assert result.data.summary.total_additions == 200
        assert result.data.summary.total_deletions == 400

    def test_result_serializes_with_camel_case(self):
        result = build_diff_result("0\t0\ta.ts\tb.ts", "R100\ta.ts\tb.ts", "", set())

        assert result.model_dump(by_alias=True, mode="json") == {
            "rawDiff": "",
            "files": [
                {
                    "filePath": "b.ts",
                    "additions": 0,
                    "deletions": 0,
                    "status": "renamed",
                    "oldFilePath": "a.ts",
                }
            ],
            "summary": {"totalFiles": 1, "totalAdditions": 0, "totalDeletions": 0},
        }
