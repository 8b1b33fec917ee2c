import pytest

import run


class FakeServer:
    def __init__(self, config, started):
        self.config = config
        self.started = started

    def run(self):
        pass


def test_main_exits_when_startup_fails(monkeypatch):
    monkeypatch.setattr(run, "Server", lambda config: FakeServer(config, started=False))

    with pytest.raises(SystemExit) as excinfo:
        run.main()
    assert excinfo.value.code == 1


def test_main_returns_after_clean_shutdown(monkeypatch):
    servers = []

    def build(config):
        servers.append(FakeServer(config, started=True))
        return servers[-1]

    monkeypatch.setattr(run, "Server", build)

    run.main()
    assert servers[0].config.app == "nudge_api.app.main:app"
