from __future__ import annotations

import pytest

from sortie_sim.web import __main__ as web_main


def test_main_passes_cli_options_to_uvicorn(monkeypatch: pytest.MonkeyPatch):
    calls: list[tuple[str, dict]] = []

    def fake_run(app, **kwargs):
        calls.append((app, kwargs))

    monkeypatch.setattr(web_main.uvicorn, "run", fake_run)

    assert web_main.main(["--port", "9100", "--log-level", "warning"]) == 0
    assert calls == [
        (
            "sortie_sim.web.main:app",
            {"host": "127.0.0.1", "port": 9100, "reload": False, "log_level": "warning"},
        )
    ]


def test_main_exits_cleanly_on_interrupt(monkeypatch: pytest.MonkeyPatch):
    def fake_run(app, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(web_main.uvicorn, "run", fake_run)
    assert web_main.main([]) == 0
