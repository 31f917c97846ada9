import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from stats import JsonFileKeyValueStore
from stats.backends import user_data_dir


class JsonFileKeyValueStoreTests(unittest.TestCase):
    def test_missing_file_reads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = JsonFileKeyValueStore(Path(temp_dir) / "stats.json")
            self.assertIsNone(store.get("stats-2026-03-15"))
            self.assertEqual([], store.keys())

    def test_set_creates_parent_dirs_and_persists_across_instances(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "nested" / "stats.json"
            JsonFileKeyValueStore(path).set("stats-2026-03-15", '{"records": []}')

            reopened = JsonFileKeyValueStore(path)
            self.assertEqual('{"records": []}', reopened.get("stats-2026-03-15"))
            self.assertEqual(
                {"stats-2026-03-15": '{"records": []}'},
                json.loads(path.read_text(encoding="utf-8")),
            )

    def test_set_leaves_no_temporary_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            store = JsonFileKeyValueStore(path)
            store.set("a", "1")
            store.set("b", "2")

            self.assertEqual(["stats.json"], sorted(os.listdir(temp_dir)))
            self.assertEqual(["a", "b"], store.keys())

    def test_corrupt_file_is_moved_aside_before_first_write(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            original = json.dumps({"stats-2026-03-01": '{"completed": 3}'})[:-1]
            path.write_text(original, encoding="utf-8")
            store = JsonFileKeyValueStore(path)

            with self.assertLogs("stats.backend", level="WARNING"):
                self.assertIsNone(store.get("stats-2026-03-15"))

            store.set("stats-2026-03-15", "{}")

            backups = sorted(Path(temp_dir).glob("stats.json.corrupt-*"))
            self.assertEqual(1, len(backups))
            self.assertEqual(original, backups[0].read_text(encoding="utf-8"))
            self.assertEqual({"stats-2026-03-15": "{}"}, json.loads(path.read_text(encoding="utf-8")))

    def test_non_object_root_is_moved_aside(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            path.write_text("[1, 2]", encoding="utf-8")

            with self.assertLogs("stats.backend", level="WARNING"):
                self.assertEqual([], JsonFileKeyValueStore(path).keys())

            self.assertFalse(path.exists())
            self.assertEqual(1, len(list(Path(temp_dir).glob("stats.json.corrupt-*"))))

    def test_unreadable_file_refuses_writes(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            path.write_text(json.dumps({"a": "1"}), encoding="utf-8")
            store = JsonFileKeyValueStore(path)

            with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
                with self.assertLogs("stats.backend", level="WARNING"):
                    self.assertIsNone(store.get("a"))
                with self.assertRaises(OSError):
                    store.set("b", "2")

            self.assertEqual({"a": "1"}, json.loads(path.read_text(encoding="utf-8")))
            self.assertEqual("1", store.get("a"))

    def test_non_string_values_are_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stats.json"
            path.write_text(json.dumps({"a": "1", "b": 2}), encoding="utf-8")

            store = JsonFileKeyValueStore(path)
            self.assertEqual("1", store.get("a"))
            self.assertIsNone(store.get("b"))


class UserDataDirTests(unittest.TestCase):
    @unittest.skipIf(os.name != "posix", "XDG layout only applies on posix")
    def test_user_data_dir_honours_xdg_data_home(self) -> None:
        with patch.dict(os.environ, {"XDG_DATA_HOME": "/tmp/xdg-data"}):
            self.assertEqual(Path("/tmp/xdg-data") / "PomodoroTech", user_data_dir())


if __name__ == "__main__":
    unittest.main()
