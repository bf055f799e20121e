from __future__ import annotations

import logging

import pytest

import locgate.cli.main as main_mod
from locgate.app.views import MapView, OpenSettingsView, RequestPermissionView
from locgate.cli.commands import format_view
from locgate.model import AutoPanMode, LocationSessionStatus


@pytest.fixture(autouse=True)
def no_console_logging(monkeypatch):
    monkeypatch.setattr(main_mod, "configure_console_logging", lambda **kwargs: None)


def test_scenario_prints_views_and_dialog(tmp_path, capsys):
    sc = tmp_path / "start_failure.yml"
    sc.write_text(
        "initial_status: granted\n"
        "start_error: Location services disabled\n"
        "steps:\n"
        "  - location_enabled: false\n",
        encoding="utf-8",
    )

    rc = main_mod.main(["scenario", str(sc)])
    out = capsys.readouterr().out

    assert rc == 0
    assert "DIALOG: Location services disabled" in out
    assert out.count("DIALOG:") == 1
    assert "MAP [location off]" in out
    assert "OS calls: status=1 request=0 settings=0" in out


def test_scenario_with_log_file(tmp_path, capsys):
    sc = tmp_path / "sc.yml"
    sc.write_text("steps:\n  - tap: enable_location\n", encoding="utf-8")
    log_path = tmp_path / "logs" / "app.log"

    rc = main_mod.main(["scenario", str(sc), "--log-file", str(log_path)])

    assert rc == 0
    assert "MAP [ready]" in capsys.readouterr().out
    assert log_path.parent.is_dir()

    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler) and h.baseFilename == str(log_path.resolve()):
            root.removeHandler(h)
            h.close()


def test_show_config_uses_file(tmp_path, capsys):
    cfg = tmp_path / "cfg.yml"
    cfg.write_text("resume_requery: always\n", encoding="utf-8")

    rc = main_mod.main(["show-config", "--config", str(cfg)])
    out = capsys.readouterr().out

    assert rc == 0
    assert "resume_requery: always" in out
    assert "auto_pan_mode: recenter" in out


def test_config_error_maps_to_exit_code_1(tmp_path, capsys):
    cfg = tmp_path / "cfg.yml"
    cfg.write_text("auto_pan_mode: sideways\n", encoding="utf-8")

    rc = main_mod.main(["show-config", "--config", str(cfg)])
    out = capsys.readouterr().out

    assert rc == 1
    assert out.startswith("ERROR: Invalid value for 'auto_pan_mode'")
    assert "Hint: Use one of:" in out


def test_format_view_covers_all_views():
    assert format_view(RequestPermissionView()) == "BUTTON 'Enable Location'"
    assert format_view(OpenSettingsView(message="m")) == "TEXT 'm' + BUTTON 'Open App Settings'"
    assert format_view(
        MapView(ready=False, auto_pan_mode=AutoPanMode.OFF, status=LocationSessionStatus.STARTING)
    ) == "MAP [loading] status=starting pan=off"
