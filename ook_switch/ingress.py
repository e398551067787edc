"""HTTP ingress turning requests into transmitted commands."""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import Optional

from aiohttp import web

from .core import Address, CommandFormatError, Group, parse_command
from .health import HealthReporter
from .sequencer import SequencerStoppedError, TransmissionSequencer

LOGGER = logging.getLogger(__name__)

API_PREFIX = "/api/"


def command_url(group: Group, address: Address, state: bool) -> str:
    sign = "+" if state else "-"
    return f"{API_PREFIX}{group.label}{address.label}{sign}"


def render_index() -> str:
    rows = []
    for group in Group:
        cells = []
        for address in Address:
            cells.append(
                f'<td>{group.label}{address.label} '
                f'<a href="{command_url(group, address, True)}">on</a> '
                f'<a href="{command_url(group, address, False)}">off</a></td>'
            )
        rows.append(f"<tr><th>{group.label}</th>{''.join(cells)}</tr>")

    return (
        "<!DOCTYPE html>\n"
        "<html><head><meta charset=\"utf-8\"><title>ook-switch</title></head>\n"
        f"<body><table>{''.join(rows)}</table></body></html>\n"
    )


class IngressServer:
    """aiohttp server exposing the command API, index page and `/healthz`."""

    def __init__(
        self,
        sequencer: TransmissionSequencer,
        host: str,
        port: int,
        *,
        health: Optional[HealthReporter] = None,
        assets_path: Optional[Path] = None,
    ) -> None:
        self._sequencer = sequencer
        self._host = host
        self._port = port
        self._health = health or HealthReporter()
        self._assets_path = assets_path
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._index = render_index()

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self._handle_index)
        app.router.add_get("/healthz", self._health.handle_request)
        # Newlines included; the handler rejects anything malformed.
        app.router.add_route(
            "*", API_PREFIX + r"{identifier:[\s\S]*}", self._handle_command
        )
        if self._assets_path is not None:
            if self._assets_path.is_dir():
                app.router.add_static("/assets/", self._assets_path)
            else:
                LOGGER.warning("Assets directory %s does not exist", self._assets_path)
        return app

    async def start(self) -> None:
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        await self._health.update("ingress", True, f"{self._host}:{self._port}")
        LOGGER.info("Command API listening on http://%s:%s/", self._host, self._port)

    async def stop(self) -> None:
        with contextlib.suppress(Exception):
            if self._site is not None:
                await self._site.stop()
        if self._runner is not None:
            await self._runner.cleanup()
        self._site = None
        self._runner = None
        await self._health.update("ingress", False, "stopped")

    async def _handle_index(self, request: web.Request) -> web.Response:
        return web.Response(text=self._index, content_type="text/html")

    async def _handle_command(self, request: web.Request) -> web.Response:
        identifier = request.match_info["identifier"]
        try:
            command = parse_command(identifier)
        except CommandFormatError:
            LOGGER.info("Rejected command identifier %r", identifier)
            return web.Response(status=400)

        try:
            await self._sequencer.submit(command)
        except SequencerStoppedError:
            LOGGER.warning("Command %s refused; transmitter is not running", command)
            return web.Response(status=503)

        return web.Response(status=200)
