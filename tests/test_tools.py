from pathlib import Path
import importlib.util
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.handlers import read_messages  # noqa: E402
from smf.messages import MetaType, MidiEvent, NoteOn, TrackChange  # noqa: E402


def _load_tool(name: str):
    module_path = REPO_ROOT / "tools" / f"{name}.py"
    spec = importlib.util.spec_from_file_location(f"{name}_tool", module_path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def test_write_example_then_dump(tmp_path, capsys) -> None:
    write_example = _load_tool("write_example")
    dump_smf = _load_tool("dump_smf")
    out = tmp_path / "nested" / "example.mid"

    assert write_example.main([str(out)]) == 0
    header, messages = read_messages(out)
    assert header.track_count == 2
    assert messages[0].event == MetaType.SET_TEMPO
    assert messages[2] == TrackChange()
    assert messages[4] == MidiEvent(192, NoteOn(0, note=0x40, velocity=0))

    capsys.readouterr()
    assert dump_smf.main([str(out)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "SMF format: 1, tracks: 2, time base: 480"
    assert "-- track 1" in lines
    assert any("NoteOn ch=0 note=64 velocity=0" in line and "192" in line for line in lines)


def test_dump_reports_decode_errors(tmp_path, capsys) -> None:
    dump_smf = _load_tool("dump_smf")
    bad = tmp_path / "bad.mid"
    bad.write_bytes(b"RIFF0000")
    assert dump_smf.main([str(bad)]) == 1
    assert "error:" in capsys.readouterr().err
