import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from change_preview.config.loader import (
    CONFIG_FILENAME,
    DEFAULTS,
    ConfigError,
    find_config_file,
    load_config,
    validate_config,
)
from change_preview.config.options import DiffFormat, DiffOptions


class TestConfigLoader(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.cwd = self.tmp / "work"
        self.home = self.tmp / "home"
        self.cwd.mkdir()
        self.home.mkdir()
        self._patches = [
            patch("change_preview.config.loader.Path.cwd", return_value=self.cwd),
            patch("change_preview.config.loader._get_config_directory", return_value=self.home),
        ]
        for p in self._patches:
            p.start()

    def tearDown(self) -> None:
        for p in self._patches:
            p.stop()
        self._tmp.cleanup()

    def write(self, directory: Path, data) -> Path:
        path = directory / CONFIG_FILENAME
        path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
        return path

    def test_defaults_without_file(self) -> None:
        self.assertIsNone(find_config_file())
        self.assertEqual(load_config(), DEFAULTS)

    def test_defaults_are_not_shared(self) -> None:
        config = load_config()
        config["critical_files"].append("x")
        self.assertEqual(DEFAULTS["critical_files"], [])

    def test_working_directory_first(self) -> None:
        self.write(self.home, {"context_lines": 7})
        cwd_file = self.write(self.cwd, {"context_lines": 1})
        self.assertEqual(find_config_file(), cwd_file)
        self.assertEqual(load_config()["context_lines"], 1)

    def test_user_directory_fallback(self) -> None:
        self.write(self.home, {"format": "markdown", "critical_files": ["Dockerfile"]})
        config = load_config()
        self.assertEqual(config["format"], "markdown")
        self.assertEqual(config["critical_files"], ["Dockerfile"])
        self.assertEqual(config["context_lines"], 3)

    def test_explicit_path(self) -> None:
        path = self.write(self.tmp, {"ignore_whitespace": True, "max_workers": 4})
        config = load_config(path)
        self.assertTrue(config["ignore_whitespace"])
        self.assertEqual(config["max_workers"], 4)

    def test_explicit_path_missing(self) -> None:
        with self.assertRaises(ConfigError):
            load_config(self.tmp / "missing.json")

    def test_invalid_json(self) -> None:
        path = self.write(self.tmp, "{broken")
        with self.assertRaises(ConfigError) as ctx:
            load_config(path)
        self.assertIn("Invalid JSON", str(ctx.exception))

    def test_unknown_keys_ignored(self) -> None:
        path = self.write(self.tmp, {"colour": "always"})
        self.assertNotIn("colour", load_config(path))


class TestValidateConfig(unittest.TestCase):
    def test_rejects_bad_values(self) -> None:
        bad = [
            [],
            {"context_lines": -1},
            {"context_lines": "3"},
            {"context_lines": True},
            {"ignore_whitespace": "yes"},
            {"format": "pdf"},
            {"max_workers": 0},
            {"critical_files": "package.json"},
            {"critical_files": [1]},
        ]
        for data in bad:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    validate_config(data)

    def test_accepts_zero_context(self) -> None:
        self.assertEqual(validate_config({"context_lines": 0})["context_lines"], 0)


class TestDiffOptions(unittest.TestCase):
    def test_defaults(self) -> None:
        options = DiffOptions()
        self.assertEqual(options.context_lines, 3)
        self.assertFalse(options.ignore_whitespace)
        self.assertIs(options.format, DiffFormat.UNIFIED)
        self.assertIs(options.validate(), options)

    def test_from_config(self) -> None:
        options = DiffOptions.from_config(dict(DEFAULTS, context_lines=5, format="side-by-side"))
        self.assertEqual(options.context_lines, 5)
        self.assertIs(options.format, DiffFormat.SIDE_BY_SIDE)

    def test_invalid(self) -> None:
        with self.assertRaises(ConfigError):
            DiffOptions(context_lines=-2).validate()
        with self.assertRaises(ConfigError):
            DiffOptions(format="unified").validate()  # type: ignore[arg-type]
        with self.assertRaises(ConfigError):
            DiffOptions.from_config({"format": "pdf"})
        with self.assertRaises(ConfigError):
            DiffOptions.from_config({"context_lines": -1})


if __name__ == "__main__":
    unittest.main()
