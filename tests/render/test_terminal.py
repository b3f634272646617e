import unittest
from datetime import datetime, timezone

import click

from change_preview.diff.models import Operation, OperationMetadata, OperationType
from change_preview.preview.assembler import PreviewAssembler
from change_preview.preview.observer import RecordingObserver
from change_preview.render.terminal import format_net_change, format_number, format_summary, format_terminal


class DictReader:
    def __init__(self, files):
        self.files = files

    def read(self, path):
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]


def build(operations, files=None):
    assembler = PreviewAssembler(
        reader=DictReader(files or {}),
        observer=RecordingObserver(),
        clock=lambda: datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )
    return assembler.generate_preview(operations)


class TestFormatTerminal(unittest.TestCase):
    def test_colours(self) -> None:
        preview = build(
            [Operation(id="1", type=OperationType.UPDATE, target_path="f.txt", content="a\nX\nc\n")],
            {"f.txt": b"a\nb\nc\n"},
        )
        text = format_terminal(preview.file_operations[0])
        lines = text.splitlines()
        self.assertEqual(lines[0], click.style("--- a/f.txt", fg="cyan"))
        self.assertEqual(lines[1], click.style("+++ b/f.txt", fg="cyan"))
        self.assertEqual(lines[2], click.style("@@ -1,3 +1,3 @@", fg="blue"))
        self.assertEqual(lines[3], click.style(" a", fg="bright_black"))
        self.assertEqual(lines[4], click.style("-b", fg="red"))
        self.assertEqual(lines[5], click.style("+X", fg="green"))
        self.assertEqual(click.unstyle(text), "--- a/f.txt\n+++ b/f.txt\n@@ -1,3 +1,3 @@\n a\n-b\n+X\n c\n")

    def test_no_hunks(self) -> None:
        preview = build([Operation(id="1", type=OperationType.CREATE, target_path="e.txt", content="")])
        self.assertEqual(format_terminal(preview.file_operations[0]), "")


class TestNumbers(unittest.TestCase):
    def test_format_number(self) -> None:
        self.assertEqual(format_number(0), "0")
        self.assertEqual(format_number(1234567), "1,234,567")

    def test_net_change(self) -> None:
        self.assertEqual(format_net_change(5), "+5")
        self.assertEqual(format_net_change(0), "0")
        self.assertEqual(format_net_change(-1200), "-1,200")


class TestFormatSummary(unittest.TestCase):
    def test_summary_sections(self) -> None:
        operations = [
            Operation(
                id="1",
                type=OperationType.UPDATE,
                target_path="f.txt",
                content="a\nX\nc\n",
                metadata=OperationMetadata(description="Rename b"),
            ),
            Operation(id="2", type=OperationType.DELETE, target_path="old.txt"),
        ]
        text = format_summary(build(operations, {"f.txt": b"a\nb\nc\n", "old.txt": b"x\n"}))
        self.assertIn("CHANGE SUMMARY", text)
        self.assertIn("   Total files affected: 2", text)
        self.assertIn("   Files modified: 1", text)
        self.assertIn("   Files deleted: 1", text)
        self.assertIn("   Lines added: 1 +++", text)
        self.assertIn("   Lines deleted: 2 ---", text)
        self.assertIn("   Net change: -1", text)
        self.assertIn("   Risk level: 🟡 Medium", text)
        self.assertIn("   • [medium] Deleting 1 file", text)
        self.assertIn("📝 f.txt", text)
        self.assertIn("   📝 Rename b", text)
        self.assertIn("⚠️  Warnings:\n   • 1 file will be deleted", text)
        self.assertIn("Generated: 2024-05-01T12:30:00+00:00", text)
        self.assertTrue(text.endswith("By: change-preview\n"))

    def test_low_risk_without_extras(self) -> None:
        text = format_summary(
            build([Operation(id="1", type=OperationType.CREATE, target_path="n.txt", content="hi\n")])
        )
        self.assertIn("Risk level: 🟢 Low", text)
        self.assertIn("   1+ 0- (1% changed)", text)
        self.assertNotIn("Warnings:", text)
        self.assertNotIn("Suggestions:", text)


if __name__ == "__main__":
    unittest.main()
