"""Unread-discussion flags supplied to the engine by an external chat service.

The engine never computes or owns these flags; it only merges them into
render state. Polling runs on its own thread and hands each result to a
callback, so it never touches the form data store.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from collab_forms.config.settings import get_settings

logger = logging.getLogger(__name__)

MessageFetcher = Callable[[str], Iterable[Mapping[str, Any]]]
FlagsCallback = Callable[[Dict[str, bool]], None]


def has_unread_messages(messages: Iterable[Mapping[str, Any]], current_user_id: Optional[str]) -> bool:
    """True if any message is unread and was sent by someone else."""
    for message in messages:
        is_unread = message.get("read_at") is None
        is_from_others = message.get("sender_user_id") != current_user_id
        if is_unread and is_from_others:
            return True
    return False


def collect_unread_flags(
    field_ids: Iterable[str],
    fetch: MessageFetcher,
    current_user_id: Optional[str],
) -> Dict[str, bool]:
    """
    Build the field_id -> has-unread map by querying each field's thread.

    A failed fetch is logged and counted as "no unread messages" for that
    field only; the remaining fields are still checked.

    Args:
        field_ids: Field ids, used as chat reference ids
        fetch: Returns the messages of one reference id
        current_user_id: Viewer; their own messages never count as unread

    Returns:
        Flag per field id
    """
    flags: Dict[str, bool] = {}
    for field_id in field_ids:
        try:
            messages = list(fetch(field_id))
        except Exception as e:
            logger.error(f"Unread check failed for field '{field_id}': {e}")
            flags[field_id] = False
            continue
        flags[field_id] = has_unread_messages(messages, current_user_id)
    return flags


class UnreadFlagPoller:
    """Polls for unread flags on an interval and pushes them to a callback.

    Example:
        poller = UnreadFlagPoller(field_ids, fetch, "user-1", form.apply_chat_flags)
        poller.start()
        ...
        poller.stop()
    """

    def __init__(
        self,
        field_ids: Iterable[str],
        fetch: MessageFetcher,
        current_user_id: Optional[str],
        on_flags: FlagsCallback,
        interval_seconds: Optional[float] = None,
    ):
        if interval_seconds is None:
            interval_seconds = get_settings().chat_poll_interval_seconds
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.field_ids = list(field_ids)
        self.fetch = fetch
        self.current_user_id = current_user_id
        self.on_flags = on_flags
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Dict[str, bool]:
        flags = collect_unread_flags(self.field_ids, self.fetch, self.current_user_id)
        self.on_flags(flags)
        return flags

    def start(self) -> None:
        """Poll immediately, then every interval, until stop()."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="unread-flag-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.exception("Unread flag poll failed")
            self._stop.wait(self.interval_seconds)
