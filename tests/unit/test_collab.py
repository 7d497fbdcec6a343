"""Unit tests for unread-discussion flags."""

import threading

import pytest

from collab_forms.config.settings import reset_settings_cache
from collab_forms.runtime.collab import UnreadFlagPoller, collect_unread_flags, has_unread_messages


class TestHasUnreadMessages:
    """Tests for has_unread_messages."""

    def test_unread_from_others(self):
        """An unread message from another user counts."""
        messages = [{"sender_user_id": "u2", "read_at": None}]
        assert has_unread_messages(messages, "u1") is True

    def test_own_or_read_messages_ignored(self):
        """Read messages and the viewer's own messages do not count."""
        messages = [
            {"sender_user_id": "u1", "read_at": None},
            {"sender_user_id": "u2", "read_at": "2026-01-01T00:00:00Z"},
        ]
        assert has_unread_messages(messages, "u1") is False
        assert has_unread_messages([], "u1") is False


class TestCollectUnreadFlags:
    """Tests for collect_unread_flags."""

    def test_failed_fetch_is_false(self, caplog):
        """A failing thread only affects its own field."""
        def fetch(field_id):
            if field_id == "broken":
                raise ConnectionError("chat service down")
            return [{"sender_user_id": "u2", "read_at": None}]

        flags = collect_unread_flags(["a", "broken", "b"], fetch, "u1")
        assert flags == {"a": True, "broken": False, "b": True}
        assert "chat service down" in caplog.text


class TestUnreadFlagPoller:
    """Tests for UnreadFlagPoller."""

    def test_poll_once_delivers(self):
        """poll_once hands the flags to the callback."""
        received = []
        poller = UnreadFlagPoller(["a"], lambda fid: [], "u1", received.append)
        assert poller.poll_once() == {"a": False}
        assert received == [{"a": False}]

    def test_default_interval_from_settings(self, tmp_path):
        """Without an explicit interval the settings value is used."""
        poller = UnreadFlagPoller([], lambda fid: [], None, lambda flags: None)
        assert poller.interval_seconds == 5.0

        (tmp_path / "collab_forms.yaml").write_text("chat_poll_interval_seconds: 1.5\n")
        reset_settings_cache()
        poller = UnreadFlagPoller([], lambda fid: [], None, lambda flags: None)
        assert poller.interval_seconds == 1.5

    def test_rejects_non_positive_interval(self):
        """The polling interval must be positive."""
        with pytest.raises(ValueError):
            UnreadFlagPoller([], lambda fid: [], None, lambda flags: None, interval_seconds=0)

    def test_start_and_stop(self):
        """The poller runs on its own thread until stopped."""
        delivered = threading.Event()
        poller = UnreadFlagPoller(
            ["a"],
            lambda fid: [{"sender_user_id": "u2", "read_at": None}],
            "u1",
            lambda flags: delivered.set(),
            interval_seconds=0.01,
        )
        poller.start()
        try:
            assert delivered.wait(2.0)
            assert poller.running
        finally:
            poller.stop(timeout=2.0)
        assert not poller.running
