"""Cancellation flag shared between the discovery run and its worker threads"""

import threading


class CancellationManager:
    def __init__(self):
        self._event = threading.Event()

    def check_cancelled(self):
        """Check if cancellation has been requested"""
        return self._event.is_set()

    def cancel(self):
        """Signal cancellation"""
        self._event.set()

    def reset(self):
        """Reset cancellation state"""
        self._event.clear()
