import copy
from pathlib import Path
from types import SimpleNamespace

import pytest

from config import CONFIG
from services.local_storage import LocalStorage
from services.plan_store import PlanStore

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class ManualHandle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Collects delayed callbacks so tests decide when they fire."""

    def __init__(self):
        self.scheduled = []

    def call_later(self, delay, callback):
        handle = ManualHandle(callback)
        self.scheduled.append((delay, handle))
        return handle

    @property
    def pending(self):
        return [handle for _, handle in self.scheduled if not handle.cancelled]

    def run_pending(self):
        for handle in self.pending:
            handle.callback()
        self.scheduled.clear()


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def make_fake_client(result=None, error=None):
    """Same call surface as an instructor-patched OpenAI client."""
    completions = FakeCompletions(result=result, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "local_storage.json"))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store(storage, scheduler):
    return PlanStore(storage, storage_key=CONFIG["storage_key"], scheduler=scheduler)


@pytest.fixture
def document_config():
    document = copy.deepcopy(CONFIG["document"])
    document["template_path"] = str(PROJECT_ROOT / "data" / "plan_assets" / "plan_template.html")
    document["css_path"] = str(PROJECT_ROOT / "data" / "plan_assets" / "plan_styles.css")
    return document


@pytest.fixture
def app_config(tmp_path, document_config):
    config = copy.deepcopy(CONFIG)
    config["data_dir"] = str(tmp_path)
    config["storage_path"] = str(tmp_path / "local_storage.json")
    config["export_dir"] = str(tmp_path / "exports")
    config["document"] = document_config
    return config
