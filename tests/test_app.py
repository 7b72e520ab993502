from __future__ import annotations

from tests.utils.fakes import ScheduledLink, ScriptedKeyboard
from zenplotter import app
from zenplotter.config import RELATIVE
from zenplotter.device import MockSerialLink


def test_open_failure_exits_with_code_1():
    link = MockSerialLink(available=False)
    assert app.run(["--dry-run"], link=link, keyboard=ScriptedKeyboard()) == 1
    assert link.writes == []
    assert link.close_count == 0


def test_single_pattern_then_close():
    link = MockSerialLink()
    assert app.run(["--pattern", "border"], link=link, keyboard=ScriptedKeyboard()) == 0
    assert link.commands[:2] == ["G90", "G90"]
    assert len(link.commands) == 7
    assert link.close_count == 1


def test_demo_mode_quits_and_closes():
    keyboard = ScriptedKeyboard()
    link = ScheduledLink(keyboard, {10: "Q"})
    assert app.run([], link=link, keyboard=keyboard) == 0
    assert len(link.commands) == 10
    assert link.close_count == 1


def test_manual_mode_jogs_with_arrows():
    keyboard = ScriptedKeyboard()
    link = ScheduledLink(keyboard, {2: "UP", 3: "LEFT", 4: "Q"})
    assert app.run(["--manual"], link=link, keyboard=keyboard) == 0
    assert link.commands == ["G90", "G91", "G01 X0.000 Y5.000", "G01 X5.000 Y0.000"]
    assert link.close_count == 1


def test_manual_mode_returns_to_relative_after_pattern():
    keyboard = ScriptedKeyboard()
    link = ScheduledLink(keyboard, {2: "3", 8: "DOWN", 10: "Q"})
    assert app.run(["--manual"], link=link, keyboard=keyboard) == 0
    assert link.commands[2] == "G90"
    assert link.commands[-2:] == ["G91", "G01 X0.000 Y-5.000"]


def test_manual_mode_unknown_key_prints_help(monkeypatch):
    keyboard = ScriptedKeyboard()
    link = ScheduledLink(keyboard, {2: "Z"})
    calls = []

    def fake_help():
        calls.append(1)
        # the first call is the startup banner
        if len(calls) == 2:
            keyboard.press("Q")

    monkeypatch.setattr(app, "print_help", fake_help)
    assert app.run(["--manual"], link=link, keyboard=keyboard) == 0
    assert len(calls) == 2
    assert link.commands == ["G90", "G91"]


def test_settings_from_args():
    args = app.build_parser().parse_args(
        ["--table-size", "200", "--table-height", "150", "--relative", "--port", "/dev/ttyUSB0", "--baudrate", "115200"]
    )
    settings = app.settings_from_args(args)
    assert settings.workspace.as_tuple() == (200, 150)
    assert settings.coordinate_mode == RELATIVE
    assert settings.port == "/dev/ttyUSB0"
    assert settings.baudrate == 115200


def test_help_lists_every_pattern(capsys):
    app.print_help()
    out = capsys.readouterr().out
    for key in "1234567":
        assert f"{key} = " in out


def test_quit_while_waiting_for_device_exits_cleanly():
    link = MockSerialLink(banner=b"")
    keyboard = ScriptedKeyboard([None, "Q"])
    assert app.run([], link=link, keyboard=keyboard) == 0
    assert link.writes == []
    assert link.close_count == 1


def test_manual_mode_random_lines_stop_on_any_key():
    keyboard = ScriptedKeyboard()
    link = ScheduledLink(keyboard, {2: "7", 5: ("X", "Q")})
    assert app.run(["--manual"], link=link, keyboard=keyboard) == 0
    assert link.commands[:3] == ["G90", "G91", "G90"]
    assert len(link.commands) == 5
    assert link.close_count == 1
