"""Smoke tests for the runnable example scripts."""

import importlib.util
from pathlib import Path

import pytest

from device_auth import DeviceAuthStore

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def load_example(name):
    module_spec = importlib.util.spec_from_file_location(name, EXAMPLES / f"{name}.py")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture
def pairing_flow():
    return load_example("pairing_flow")


async def test_pairing_flow_runs(pairing_flow, capsys):
    await pairing_flow.main()
    out = capsys.readouterr().out
    assert "role=operator" in out
    assert "node: rejected, clearing" in out
    assert "operator after unpair: None" in out


async def test_pairing_flow_survives_failed_store(pairing_flow, capsys, monkeypatch):
    async def refuse(self, device_id, role, token, scopes=()):
        return None

    monkeypatch.setattr(DeviceAuthStore, "store_token", refuse)
    await pairing_flow.main()
    out = capsys.readouterr().out
    assert "operator: token could not be stored" in out
    assert "operator: no token, pairing required" in out
