"""Tests for vlmrun_actions.infra.callbacks."""

from __future__ import annotations

import logging

from vlmrun_actions.infra.callbacks import ClientCallbacks


class TestClientCallbacks:
    """Tests for the ClientCallbacks dataclass."""

    def test_defaults_are_none(self):
        cb = ClientCallbacks()
        assert cb.on_request is None
        assert cb.on_response is None
        assert cb.on_error is None

    def test_fire_dispatches_by_event(self):
        captured = []
        cb = ClientCallbacks(
            on_request=lambda info: captured.append(("request", info)),
            on_response=lambda info: captured.append(("response", info)),
            on_error=lambda info: captured.append(("error", info)),
        )

        cb.fire("on_request", {"method": "GET", "url": "https://api.test/v1/files"})
        cb.fire("on_response", {"status": 200})
        cb.fire("on_error", {"error": Exception("fail")})

        assert [name for name, _ in captured] == ["request", "response", "error"]
        assert captured[0][1]["method"] == "GET"

    def test_partial_callbacks(self):
        """Unset events are ignored."""
        captured = []
        cb = ClientCallbacks(on_response=captured.append)
        cb.fire("on_request", {"method": "GET"})
        cb.fire("on_response", {"status": 200})
        assert captured == [{"status": 200}]

    def test_raising_callback_is_logged(self, caplog):
        def boom(info):
            raise ValueError("observer failed")

        with caplog.at_level(logging.ERROR, logger="vlmrun_actions"):
            ClientCallbacks(on_error=boom).fire("on_error", {"error": "x"})
        assert "Callback on_error raised" in caplog.text
