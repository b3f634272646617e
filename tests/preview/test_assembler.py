import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from change_preview.config.loader import ConfigError
from change_preview.config.options import DiffOptions
from change_preview.diff.models import ChangeType, Operation, OperationMetadata, OperationType
from change_preview.preview.assembler import (
    PreviewAssembler,
    estimate_review_minutes,
    generate_preview,
    is_test_path,
)
from change_preview.preview.observer import RecordingObserver
from change_preview.preview.workspace import WorkspaceReader
from change_preview.risk.models import RiskLevel


FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class DictReader:
    """In-memory reader; values that are exceptions are raised on read."""

    def __init__(self, files):
        self.files = files
        self.calls = []

    def read(self, path):
        self.calls.append(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        value = self.files[path]
        if isinstance(value, Exception):
            raise value
        return value


def op(op_id, op_type, path, content=None, source=None):
    return Operation(id=op_id, type=op_type, target_path=path, content=content, source_path=source)


class TestPreviewAssembler(unittest.TestCase):
    def make(self, files=None, **kwargs):
        self.observer = RecordingObserver()
        return PreviewAssembler(
            reader=DictReader(files or {}),
            observer=self.observer,
            clock=lambda: FIXED_TIME,
            **kwargs,
        )

    def test_update_existing_file(self) -> None:
        assembler = self.make({"f.txt": b"a\nb\nc\n"})
        diff = assembler.create_file_diff(op("1", OperationType.UPDATE, "f.txt", "a\nX\nc\n"))
        self.assertEqual(diff.original_content, "a\nb\nc\n")
        self.assertEqual(diff.modified_content, "a\nX\nc\n")
        self.assertEqual(len(diff.hunks), 1)
        self.assertEqual((diff.stats.additions, diff.stats.deletions), (1, 1))

    def test_update_missing_file_is_all_additions(self) -> None:
        assembler = self.make()
        diff = assembler.create_file_diff(op("1", OperationType.UPDATE, "new.py", "x\ny\n"))
        self.assertEqual(diff.original_content, "")
        self.assertEqual((diff.stats.additions, diff.stats.deletions), (2, 0))

    def test_create_does_not_read(self) -> None:
        assembler = self.make({"a.txt": b"old\n"})
        diff = assembler.create_file_diff(op("1", OperationType.CREATE, "a.txt", "new\n"))
        self.assertEqual(diff.original_content, "")
        self.assertEqual(assembler.reader.calls, [])

    def test_append_joins_with_newline(self) -> None:
        assembler = self.make({"log.txt": b"a\n"})
        diff = assembler.create_file_diff(op("1", OperationType.APPEND, "log.txt", "b"))
        self.assertEqual(diff.modified_content, "a\n\nb")
        self.assertEqual((diff.stats.additions, diff.stats.deletions), (2, 0))

    def test_delete_empties_file(self) -> None:
        assembler = self.make({"gone.txt": b"a\nb\n"})
        diff = assembler.create_file_diff(op("1", OperationType.DELETE, "gone.txt"))
        self.assertEqual(diff.modified_content, "")
        self.assertEqual((diff.stats.additions, diff.stats.deletions), (0, 2))
        self.assertTrue(all(c.type is ChangeType.DELETE for c in diff.hunks[0].changes))

    def test_move_reads_source(self) -> None:
        assembler = self.make({"old.py": b"x = 1\n"})
        diff = assembler.create_file_diff(op("1", OperationType.MOVE, "new.py", source="old.py"))
        self.assertEqual(diff.original_content, "x = 1\n")
        self.assertEqual(diff.modified_content, "x = 1\n")
        self.assertEqual(diff.hunks, [])
        self.assertEqual(diff.path, "new.py")

    def test_language_from_metadata_or_extension(self) -> None:
        assembler = self.make()
        diff = assembler.create_file_diff(op("1", OperationType.CREATE, "a.ts", "x"))
        self.assertEqual(diff.language, "typescript")
        hinted = Operation(
            id="2",
            type=OperationType.CREATE,
            target_path="build",
            content="x",
            metadata=OperationMetadata(language="makefile"),
        )
        self.assertEqual(assembler.create_file_diff(hinted).language, "makefile")

    def test_unreadable_files_are_skipped(self) -> None:
        assembler = self.make({"locked.txt": PermissionError("denied"), "bad.bin": b"\xff\xfe\x00"})
        preview = assembler.generate_preview(
            [
                op("1", OperationType.UPDATE, "locked.txt", "x"),
                op("2", OperationType.UPDATE, "bad.bin", "x"),
                op("3", OperationType.CREATE, "ok.txt", "x\n"),
            ]
        )
        self.assertEqual([d.path for d in preview.file_operations], ["ok.txt"])
        self.assertEqual(len(self.observer.warnings), 2)
        self.assertTrue(self.observer.warnings[0].startswith("Failed to create diff for locked.txt"))
        self.assertEqual(preview.summary.total_files, 1)

    def test_order_preserved_with_workers(self) -> None:
        operations = [op(str(i), OperationType.CREATE, f"f{i}.txt", f"{i}\n" * i) for i in range(1, 13)]
        sequential = self.make().generate_preview(operations)
        parallel = self.make(max_workers=4).generate_preview(operations)
        self.assertEqual([d.path for d in parallel.file_operations], [f"f{i}.txt" for i in range(1, 13)])
        self.assertEqual(sequential, parallel)

    def test_summary(self) -> None:
        assembler = self.make({"u.txt": b"a\n", "d.txt": b"x\ny\n", "m.txt": b"k\n"})
        preview = assembler.generate_preview(
            [
                op("1", OperationType.CREATE, "c.txt", "".join(f"{i}\n" for i in range(20))),
                op("2", OperationType.UPDATE, "u.txt", "b\n"),
                op("3", OperationType.DELETE, "d.txt"),
                op("4", OperationType.MOVE, "n.txt", source="m.txt"),
            ]
        )
        summary = preview.summary
        self.assertEqual(summary.total_files, 4)
        self.assertEqual(
            (summary.files_created, summary.files_modified, summary.files_deleted, summary.files_moved),
            (1, 1, 1, 1),
        )
        self.assertEqual(summary.total_additions, 21)
        self.assertEqual(summary.total_deletions, 3)
        self.assertEqual(summary.estimated_review_time, 2)
        self.assertEqual(summary.risk_level, RiskLevel.MEDIUM)

    def test_risk_and_summary_agree(self) -> None:
        assembler = self.make({"src/app.ts": b"let a = 1;\n", "package.json": b"{}\n"})
        preview = assembler.generate_preview(
            [
                op("1", OperationType.DELETE, "src/app.ts"),
                op("2", OperationType.UPDATE, "package.json", "{\n  \"name\": \"x\"\n}\n"),
            ]
        )
        self.assertEqual(preview.risk.level, RiskLevel.HIGH)
        self.assertEqual(preview.summary.risk_level, RiskLevel.HIGH)
        self.assertTrue(preview.risk.requires_review)

    def test_extra_critical_files(self) -> None:
        assembler = self.make(critical_files=["Dockerfile"])
        preview = assembler.generate_preview([op("1", OperationType.CREATE, "Dockerfile", "FROM x\n")])
        self.assertEqual(preview.risk.level, RiskLevel.HIGH)

    def test_warnings_and_suggestions(self) -> None:
        assembler = self.make({"a.txt": b"a\n", "b.txt": b"b\n"})
        operations = [
            op("1", OperationType.DELETE, "a.txt"),
            op("2", OperationType.DELETE, "b.txt"),
            op("3", OperationType.CREATE, "big.txt", "x" * 100_001),
            op("4", OperationType.CREATE, "tests/test_new.py", "pass\n"),
            op("5", OperationType.CREATE, "c.txt", "c"),
            op("6", OperationType.CREATE, "d.txt", "d"),
        ]
        metadata = assembler.generate_preview(operations).metadata
        self.assertEqual(metadata.warnings, ["2 files will be deleted", "1 large file operation detected"])
        self.assertEqual(
            metadata.suggestions,
            ["Run tests after applying changes", "Consider committing changes in smaller batches"],
        )

    def test_no_warnings_for_small_batch(self) -> None:
        metadata = self.make().generate_preview([op("1", OperationType.CREATE, "a.txt", "x")]).metadata
        self.assertEqual(metadata.warnings, [])
        self.assertEqual(metadata.suggestions, [])

    def test_metadata_uses_clock(self) -> None:
        preview = self.make().generate_preview([])
        self.assertEqual(preview.metadata.generated_at, FIXED_TIME)
        self.assertEqual(preview.metadata.generated_by, "change-preview")
        self.assertEqual(preview.file_operations, [])
        self.assertEqual(preview.summary.total_files, 0)
        self.assertEqual(self.observer.infos, ["Generating diff preview for 0 operations"])

    def test_deterministic(self) -> None:
        files = {"f.txt": b"a\nb\nc\n"}
        operations = [op("1", OperationType.UPDATE, "f.txt", "a\nc\nd\n")]
        self.assertEqual(
            self.make(files).generate_preview(operations),
            self.make(files).generate_preview(operations),
        )

    def test_context_option_is_applied(self) -> None:
        original = "".join(f"line{i}\n" for i in range(1, 11))
        modified = original.replace("line5\n", "X\n")
        assembler = self.make({"f.txt": original.encode()}, options=DiffOptions(context_lines=0))
        diff = assembler.create_file_diff(op("1", OperationType.UPDATE, "f.txt", modified))
        self.assertEqual(len(diff.hunks[0].changes), 2)

    def test_invalid_options_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            PreviewAssembler(reader=DictReader({}), options=DiffOptions(context_lines=-1))
        with self.assertRaises(ConfigError):
            PreviewAssembler(reader=DictReader({}), max_workers=0)


class TestWorkspaceIntegration(unittest.TestCase):
    def test_generate_preview_reads_workspace(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "f.txt").write_text("a\nb\nc\n", encoding="utf-8")
            preview = generate_preview(
                [op("1", OperationType.UPDATE, "f.txt", "a\nX\nc\n")],
                reader=WorkspaceReader(tmp),
            )
        self.assertEqual(preview.summary.total_additions, 1)
        self.assertEqual(preview.summary.total_deletions, 1)

    def test_missing_path_reads_as_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                WorkspaceReader(tmp).read("absent.txt")

    def test_directory_is_an_io_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "pkg").mkdir()
            with self.assertRaises(OSError) as ctx:
                WorkspaceReader(tmp).read("pkg")
        self.assertNotIsInstance(ctx.exception, FileNotFoundError)

    def test_directory_target_is_skipped(self) -> None:
        observer = RecordingObserver()
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "pkg").mkdir()
            assembler = PreviewAssembler(reader=WorkspaceReader(tmp), observer=observer)
            preview = assembler.generate_preview(
                [
                    op("1", OperationType.UPDATE, "pkg", "x\n"),
                    op("2", OperationType.CREATE, "ok.txt", "y\n"),
                ]
            )
        self.assertEqual([d.path for d in preview.file_operations], ["ok.txt"])
        self.assertEqual(len(observer.warnings), 1)
        self.assertTrue(observer.warnings[0].startswith("Failed to create diff for pkg"))


class TestHelpers(unittest.TestCase):
    def test_estimate_review_minutes(self) -> None:
        self.assertEqual(estimate_review_minutes(0), 0)
        self.assertEqual(estimate_review_minutes(1), 1)
        self.assertEqual(estimate_review_minutes(20), 1)
        self.assertEqual(estimate_review_minutes(25), 2)

    def test_is_test_path(self) -> None:
        self.assertTrue(is_test_path("src/app.test.ts"))
        self.assertTrue(is_test_path("src/app.spec.js"))
        self.assertTrue(is_test_path("pkg/test_mod.py"))
        self.assertTrue(is_test_path("tests/helpers.py"))
        self.assertFalse(is_test_path("src/contest.py"))


if __name__ == "__main__":
    unittest.main()
