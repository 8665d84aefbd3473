import json
from datetime import datetime, timedelta, timezone

from conftest import solid_frame
from utils.color_log import ColorLog, build_log_entry


def entry(n):
    return {"timestamp": f"2025-01-01T00:00:0{n}Z", "screen_size": "10x10", "top_colors": []}


def test_append_to_missing_file(tmp_path):
    path = tmp_path / "colorlog.json"
    ColorLog(str(path)).append(entry(1))

    assert json.loads(path.read_text(encoding="utf-8")) == [entry(1)]


def test_append_to_empty_file(tmp_path):
    path = tmp_path / "colorlog.json"
    path.write_text("  \n", encoding="utf-8")
    ColorLog(str(path)).append(entry(1))

    assert json.loads(path.read_text(encoding="utf-8")) == [entry(1)]


def test_append_to_existing_array(tmp_path):
    path = tmp_path / "colorlog.json"
    log = ColorLog(str(path))
    log.append(entry(1))
    log.append(entry(2))
    log.append(entry(3))

    assert json.loads(path.read_text(encoding="utf-8")) == [entry(1), entry(2), entry(3)]


def test_file_is_indented(tmp_path):
    path = tmp_path / "colorlog.json"
    ColorLog(str(path)).append(entry(1))

    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")


def test_legacy_lines_are_migrated_in_order(tmp_path):
    path = tmp_path / "colorlog.json"
    legacy = "\n".join(json.dumps(entry(n)) for n in (1, 2, 3)) + "\n"
    path.write_text(legacy, encoding="utf-8")

    ColorLog(str(path)).append(entry(4))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == [entry(1), entry(2), entry(3), entry(4)]


def test_single_legacy_line_is_migrated(tmp_path):
    path = tmp_path / "colorlog.json"
    path.write_text(json.dumps(entry(1)) + "\n", encoding="utf-8")

    ColorLog(str(path)).append(entry(2))

    assert json.loads(path.read_text(encoding="utf-8")) == [entry(1), entry(2)]


def test_unparseable_legacy_lines_are_dropped(tmp_path):
    path = tmp_path / "colorlog.json"
    path.write_text(
        json.dumps(entry(1)) + "\n{not json\n\n" + json.dumps(entry(2)) + "\ngarbage",
        encoding="utf-8",
    )

    ColorLog(str(path)).append(entry(3))

    assert json.loads(path.read_text(encoding="utf-8")) == [entry(1), entry(2), entry(3)]


def test_undecodable_bytes_are_dropped(tmp_path):
    path = tmp_path / "colorlog.json"
    path.write_bytes(b'{"a": 1}\n\xff\xfe garbage\n')

    ColorLog(str(path)).append(entry(2))

    assert json.loads(path.read_text(encoding="utf-8")) == [{"a": 1}, entry(2)]


def test_read_entries_missing_file(tmp_path):
    assert ColorLog(str(tmp_path / "nope.json")).read_entries() == []


def test_build_log_entry():
    ts = datetime(2025, 6, 1, 12, 30, 5, tzinfo=timezone(timedelta(hours=2)))
    stats = [{"r": 240, "g": 0, "b": 0, "name": "light red", "percent": 100.0}]

    record = build_log_entry(solid_frame((255, 0, 0), width=192, height=108), stats, ts)

    assert record == {
        "timestamp": "2025-06-01T12:30:05+02:00",
        "screen_size": "192x108",
        "top_colors": stats,
    }


def test_build_log_entry_defaults_to_now():
    record = build_log_entry(solid_frame((0, 0, 0), width=1, height=1), [])
    parsed = datetime.fromisoformat(record["timestamp"])
    assert parsed.tzinfo is not None
