import importlib
import runpy
import sys
from types import SimpleNamespace


def test_run_import_sets_debug(monkeypatch):
    def fake_create_app(argv):
        return SimpleNamespace(debug=False)

    monkeypatch.setattr("invoicing.create_app", fake_create_app)
    monkeypatch.setenv("DEBUG", "True")
    monkeypatch.delitem(sys.modules, "run", raising=False)
    run = importlib.import_module("run")
    assert run.app.debug is True
    monkeypatch.delitem(sys.modules, "run", raising=False)


def test_run_main_executes_server(monkeypatch):
    class FakeApp:
        def __init__(self):
            self.debug = False
            self.called_with = None

        def run(self, host, port, debug):
            self.called_with = (host, port, debug)

    fake_app = FakeApp()

    monkeypatch.setattr("invoicing.create_app", lambda argv: fake_app)
    monkeypatch.setenv("PORT", "6000")
    monkeypatch.delenv("DEBUG", raising=False)
    runpy.run_module("run", run_name="__main__")
    assert fake_app.called_with == ("0.0.0.0", 6000, False)
