"""Interrupt handling that turns SIGINT into a pollable termination flag."""

from __future__ import annotations

import os
import signal
import socket
from dataclasses import dataclass
from types import FrameType
from typing import Any

STDOUT_FILENO = 1
TERMINATION_NOTICE = b"Terminating...\n"

SignalHandler = Any


@dataclass(frozen=True, slots=True)
class PreviousInterruptState:
    """Signal disposition replaced by `listen_for_user_interrupt`."""

    handler: SignalHandler
    wakeup_fd: int


class TerminationFlag:
    """One-way running -> terminating switch shared with the signal handler.

    The handler is the only writer. Readers poll `is_set()`, or wait for the
    socket returned by `fileno()` to become readable: once installed as the
    signal wakeup fd it receives a byte for every delivered signal.
    """

    def __init__(self) -> None:
        self._terminating = False
        self._reader, self._writer = socket.socketpair()
        self._reader.setblocking(False)
        self._writer.setblocking(False)

    def set(self) -> None:
        self._terminating = True

    def is_set(self) -> bool:
        return self._terminating

    def __bool__(self) -> bool:
        return self._terminating

    def fileno(self) -> int:
        """Readable end of the wakeup channel, suitable for selectors."""

        return self._reader.fileno()

    @property
    def wakeup_fd(self) -> int:
        """Writable end handed to `signal.set_wakeup_fd`."""

        return self._writer.fileno()

    def drain(self) -> int:
        """Consume pending wakeup bytes; return how many were read."""

        total = 0
        while True:
            try:
                chunk = self._reader.recv(64)
            except BlockingIOError:
                return total
            if not chunk:
                return total
            total += len(chunk)

    def close(self) -> None:
        self._reader.close()
        self._writer.close()


def listen_for_user_interrupt(
    flag: TerminationFlag,
    *,
    signum: int = signal.SIGINT,
    notice_fd: int = STDOUT_FILENO,
) -> PreviousInterruptState:
    """Install the interrupt handler for `signum`; return what it replaced.

    Interrupted system calls are not restarted, and the signal also wakes any
    selector watching `flag`, so blocking server code gets a chance to look at
    the flag instead of resuming the same call.
    """

    def _handler(signo: int, frame: FrameType | None) -> None:
        try:
            os.write(notice_fd, TERMINATION_NOTICE)
        except OSError:
            # stdout may already be closed; the flag still has to be set.
            pass
        flag.set()

    handler = signal.signal(signum, _handler)
    if hasattr(signal, "siginterrupt"):
        signal.siginterrupt(signum, True)
    wakeup_fd = signal.set_wakeup_fd(flag.wakeup_fd, warn_on_full_buffer=False)
    return PreviousInterruptState(handler=handler, wakeup_fd=wakeup_fd)


def restore_interrupt_handler(previous: PreviousInterruptState, *, signum: int = signal.SIGINT) -> None:
    """Undo `listen_for_user_interrupt`."""

    signal.set_wakeup_fd(previous.wakeup_fd)
    signal.signal(signum, previous.handler if previous.handler is not None else signal.SIG_DFL)


__all__ = [
    "PreviousInterruptState",
    "TERMINATION_NOTICE",
    "TerminationFlag",
    "listen_for_user_interrupt",
    "restore_interrupt_handler",
]
