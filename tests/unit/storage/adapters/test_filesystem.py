import json
import time
from pathlib import Path

import pytest

from dentalbook.domain.exceptions import StorageError
from dentalbook.storage.adapters.filesystem import FileCookieJar, FileKeyValueStore
from dentalbook.storage.service import AppointmentStore


class TestFileCookieJar:
    def test_missing_file_reads_as_unset(self, tmp_path: Path) -> None:
        assert FileCookieJar(str(tmp_path / "cookies.txt")).get_cookie("any") is None

    def test_value_survives_a_new_jar(self, tmp_path: Path) -> None:
        path = str(tmp_path / "nested" / "cookies.txt")
        FileCookieJar(path).set_cookie("list", '[{"id": "CITA-1-a b"}]')

        assert FileCookieJar(path).get_cookie("list") == '[{"id": "CITA-1-a b"}]'

    def test_file_holds_percent_encoded_value(self, tmp_path: Path) -> None:
        path = tmp_path / "cookies.txt"
        FileCookieJar(str(path)).set_cookie("list", "[1, 2]")

        content = path.read_text(encoding="utf-8")
        assert "%5B1%2C%202%5D" in content
        assert "[1, 2]" not in content

    def test_overwrites_existing_value(self, tmp_path: Path) -> None:
        jar = FileCookieJar(str(tmp_path / "cookies.txt"))
        jar.set_cookie("list", "old")
        jar.set_cookie("list", "new")

        assert jar.get_cookie("list") == "new"

    def test_sets_expiry_in_the_future(self, tmp_path: Path) -> None:
        path = tmp_path / "cookies.txt"
        FileCookieJar(str(path)).set_cookie("list", "x", days=365)

        line = next(l for l in path.read_text().splitlines() if l and not l.startswith("#"))
        expires = int(line.split("\t")[4])
        assert expires > time.time() + 364 * 86400

    def test_expired_cookie_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "cookies.txt"
        path.write_text(
            "# Netscape HTTP Cookie File\n"
            f"localhost\tFALSE\t/\tFALSE\t{int(time.time()) - 60}\tlist\tstale\n",
            encoding="utf-8",
        )

        assert FileCookieJar(str(path)).get_cookie("list") is None

    @pytest.mark.parametrize(
        "content",
        [b"this is not a cookie file\n", b"\xff\xfe garbage\n"],
        ids=["bad-header", "invalid-utf8"],
    )
    def test_unreadable_file_reads_as_unset(self, tmp_path: Path, content: bytes) -> None:
        path = tmp_path / "cookies.txt"
        path.write_bytes(content)

        assert FileCookieJar(str(path)).get_cookie("list") is None

    def test_write_failure_raises_storage_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")

        with pytest.raises(StorageError):
            FileCookieJar(str(blocker / "cookies.txt")).set_cookie("list", "x")


class TestFileKeyValueStore:
    def test_round_trip_across_instances(self, tmp_path: Path) -> None:
        path = str(tmp_path / "local.json")
        FileKeyValueStore(path).set_item("k", "v")

        assert FileKeyValueStore(path).get_item("k") == "v"

    def test_missing_key(self, tmp_path: Path) -> None:
        assert FileKeyValueStore(str(tmp_path / "local.json")).get_item("k") is None

    def test_remove_item(self, tmp_path: Path) -> None:
        kv = FileKeyValueStore(str(tmp_path / "local.json"))
        kv.set_item("a", "1")
        kv.set_item("b", "2")

        kv.remove_item("a")
        kv.remove_item("never-there")

        assert kv.get_item("a") is None
        assert kv.get_item("b") == "2"

    @pytest.mark.parametrize(
        "content",
        [b"{broken", b"[1, 2]", b'{"a": "\xff\xfe"}'],
        ids=["bad-json", "not-an-object", "invalid-utf8"],
    )
    def test_unreadable_file_reads_as_empty(self, tmp_path: Path, content: bytes) -> None:
        path = tmp_path / "local.json"
        path.write_bytes(content)

        assert FileKeyValueStore(str(path)).get_item("a") is None

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        kv = FileKeyValueStore(str(tmp_path / "local.json"))
        kv.set_item("a", "1")
        kv.set_item("b", "2")

        assert [p.name for p in tmp_path.iterdir()] == ["local.json"]
        assert json.loads((tmp_path / "local.json").read_text()) == {"a": "1", "b": "2"}

    def test_clear(self, tmp_path: Path) -> None:
        kv = FileKeyValueStore(str(tmp_path / "local.json"))
        kv.set_item("a", "1")

        kv.clear()

        assert kv.get_item("a") is None


class TestFileBackedStore:
    def test_records_survive_a_new_store(self, tmp_path: Path, make_appointment) -> None:
        def build() -> AppointmentStore:
            return AppointmentStore(
                cookies=FileCookieJar(str(tmp_path / "cookies.txt")),
                local_storage=FileKeyValueStore(str(tmp_path / "local.json")),
            )

        appt = make_appointment(notes="revisión anual; traer radiografía")
        build().upsert(appt)

        fresh = build()
        assert fresh.load_all() == [appt]
        assert fresh.get_by_id(appt.id) == appt

    def test_undecodable_files_degrade_to_empty(self, tmp_path: Path) -> None:
        (tmp_path / "cookies.txt").write_bytes(b"\xff\xfe garbage\n")
        (tmp_path / "local.json").write_bytes(b'{"CITA-1-aaaaaa": "\xff"}')
        store = AppointmentStore(
            cookies=FileCookieJar(str(tmp_path / "cookies.txt")),
            local_storage=FileKeyValueStore(str(tmp_path / "local.json")),
        )

        assert store.load_all() == []
        assert store.get_by_id("CITA-1-aaaaaa") is None
