"""Terminal feedback shown while the API validates an add-on.

The animation has no effect on the signing result. It randomly fills a bar
the width of the terminal with dots and then shows dots moving forward until
``finish()`` is called.
"""

from __future__ import annotations

import asyncio
import random
import shutil
import sys
from typing import Protocol, TextIO


class ProgressIndicator(Protocol):
    def animate(self, speed: float = 0.1) -> None: ...

    def finish(self) -> None: ...


class NullProgress:
    def animate(self, speed: float = 0.1) -> None:
        pass

    def finish(self) -> None:
        pass


class PseudoProgress:
    def __init__(self, preamble: str = "", stdout: TextIO | None = None) -> None:
        self.stdout = stdout if stdout is not None else sys.stdout
        self.motion_counter = 1
        self._task: asyncio.Task | None = None
        self.bucket: list[str] = []
        self.empty_bucket_pointers: list[int] = []
        self.set_preamble(preamble)

    def set_preamble(self, preamble: str) -> None:
        self.preamble = f"{preamble} ["
        self.addendum = "]"

        shell_width = 80
        if self.stdout.isatty():
            shell_width = shutil.get_terminal_size().columns

        bucket_size = max(shell_width - len(self.preamble) - len(self.addendum), 0)
        self.bucket = [" "] * bucket_size
        self.empty_bucket_pointers = list(range(bucket_size))

    def animate(self, speed: float = 0.1) -> None:
        """Start the animation on the running event loop."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(speed))

    async def _run(self, speed: float) -> None:
        bucket_is_full = False
        while True:
            await asyncio.sleep(speed)
            if bucket_is_full:
                self.move_bucket()
            else:
                bucket_is_full = self.randomly_fill_bucket()

    def finish(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None

        self.fill_bucket()
        # Leave the cursor on a fresh line for whatever is printed next.
        self.stdout.write("\n")
        self.stdout.flush()

    def randomly_fill_bucket(self) -> bool:
        if self.empty_bucket_pointers:
            pointer = random.choice(self.empty_bucket_pointers)
            self.bucket[pointer] = "."
        self.show_bucket()

        self.empty_bucket_pointers = [p for p in self.empty_bucket_pointers if self.bucket[p] == " "]
        return not self.empty_bucket_pointers

    def fill_bucket(self) -> None:
        self.bucket = ["."] * len(self.bucket)
        self.show_bucket()

    def move_bucket(self) -> None:
        for i in range(len(self.bucket)):
            self.bucket[i] = " " if (i - self.motion_counter) % 3 else "."
        self.show_bucket()
        self.motion_counter += 1

    def show_bucket(self) -> None:
        self.stdout.write(f"\r{self.preamble}{''.join(self.bucket)}{self.addendum}")
        self.stdout.flush()
