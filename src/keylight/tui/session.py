"""Full-screen interactive session driven by prompt_toolkit."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from keylight.core import CommandRouter
from keylight.utils.logging import console_handlers

from .view import VIEW_WIDTH, render_ansi

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = 5.0

# prompt_toolkit key name -> router key
KEYS = {
    "a": "a",
    **{str(n): str(n) for n in range(1, 10)},
    "d": "d",
    "q": "q",
    "c-c": "c-c",
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
    "k": "k",
    "j": "j",
    "h": "h",
    "l": "l",
    "enter": "enter",
    "space": "space",
}


@contextmanager
def quiet_console_logging() -> Iterator[None]:
    """Keep log records from drawing over the full-screen view."""
    handlers = console_handlers()
    levels = [handler.level for handler in handlers]
    for handler in handlers:
        handler.setLevel(logging.CRITICAL)
    try:
        yield
    finally:
        for handler, level in zip(handlers, levels):
            handler.setLevel(level)


class InteractiveSession:
    def __init__(self, router: CommandRouter, width: int = VIEW_WIDTH) -> None:
        self.router = router
        self.width = width
        router.on_update = self.invalidate
        control = FormattedTextControl(self._formatted, focusable=True)
        self.app: Application[None] = Application(
            layout=Layout(Window(control, always_hide_cursor=True)),
            key_bindings=self._key_bindings(),
            full_screen=True,
        )

    def _formatted(self) -> ANSI:
        return ANSI(render_ansi(self.router, self.width))

    def _key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()
        for binding, key in KEYS.items():
            bindings.add(binding)(self._handler(key))
        return bindings

    def _handler(self, key: str):
        def handle(event: KeyPressEvent) -> None:
            event.app.create_background_task(self._press(key))

        return handle

    async def _press(self, key: str) -> None:
        await self.router.handle_key(key)
        if self.router.quitting and self.app.is_running:
            self.app.exit()

    def invalidate(self) -> None:
        if self.app.is_running:
            self.app.invalidate()

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(REFRESH_INTERVAL)
            await self.router.refresh()
            self.invalidate()

    async def run(self) -> None:
        await self.router.refresh()
        with quiet_console_logging():
            poller = asyncio.create_task(self._poll())
            try:
                await self.app.run_async()
            finally:
                poller.cancel()
                try:
                    await poller
                except asyncio.CancelledError:
                    logger.debug("Status polling stopped")
                await self.router.close()
