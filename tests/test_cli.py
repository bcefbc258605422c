from __future__ import annotations

import json
from typing import Any

import pytest

from bundle_notifier.cli import main


class _DummyResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        return json.loads(json.dumps(self._payload))


def test_run_without_credentials_exits_before_connecting(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DISCORD_BOT_TOKEN", "DISCORD_CHANNEL_ID", "DISCORD_CLIENT_ID"):
        monkeypatch.delenv(name, raising=False)

    assert main(["run"]) == 2


def test_missing_config_file_exits_with_config_error(tmp_path, capsys) -> None:
    assert main(["-c", str(tmp_path / "nope.yaml"), "lookup"]) == 2
    assert "Config error" in capsys.readouterr().err


def test_lookup_prints_preview(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(
        "requests.post",
        lambda *args, **kwargs: _DummyResponse(
            {"data": [{"id": 126, "name": "Korblox Deathspeaker", "priceStatus": "Off Sale"}]}
        ),
    )
    monkeypatch.setattr(
        "requests.get",
        lambda *args, **kwargs: _DummyResponse(
            {"data": [{"targetId": 126, "state": "Completed", "imageUrl": "https://tr.rbxcdn.com/126.png"}]}
        ),
    )

    assert main(["lookup"]) == 0

    out = capsys.readouterr().out
    assert "Korblox Deathspeaker (https://www.roblox.com/bundles/126/korblox-deathspeaker)" in out
    assert "Price: Off-Sale" in out
    assert "Thumbnail: https://tr.rbxcdn.com/126.png" in out


def test_lookup_of_unknown_bundle_fails(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr("requests.post", lambda *args, **kwargs: _DummyResponse({"data": []}))

    assert main(["lookup", "999999"]) == 1
    assert "Could not find a bundle with ID `999999`" in capsys.readouterr().err


def test_dry_run_prints_every_listed_bundle(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(
        "requests.get",
        lambda *args, **kwargs: _DummyResponse(
            {"data": [{"id": 2, "name": "Second"}, {"id": 1, "name": "First"}]}
        ),
    )

    assert main(["dry-run"]) == 0

    out = capsys.readouterr().out
    assert out.count("[DRY RUN] WOULD POST TEXT:") == 2
    assert out.index("Second") < out.index("First")
