"""
Collects error messages during a batch so each is shown once.
"""

from typing import Dict, Protocol


class ErrorSink(Protocol):
    def show_error(self, message: str, retry: bool = False) -> None: ...


class ErrorMessageTracker:
    """Deduplicates error messages by text, keeping insertion order."""

    def __init__(self):
        self._messages: Dict[str, bool] = {}

    def add(self, message: str, retry: bool = False) -> None:
        # One retryable occurrence makes the message retryable
        self._messages[message] = self._messages.get(message, False) or retry

    def __len__(self) -> int:
        return len(self._messages)

    def send_errors(self, client: ErrorSink) -> None:
        for message, retry in self._messages.items():
            client.show_error(message, retry=retry)
