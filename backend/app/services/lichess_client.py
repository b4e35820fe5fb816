"""
Lichess Client - Outbound HTTP

Thin async wrapper over httpx for the two tournament endpoints:
- metadata:  GET /api/{tournament|swiss}/{id}
- games:     GET /api/{tournament|swiss}/{id}/games (NDJSON stream)

Every outbound call is bounded by `timeout` seconds. On expiry the in-flight
request is cancelled and UpstreamTimeoutError is raised.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

import httpx

from backend.app.core.errors import (
    TournamentNotFoundError, UpstreamError, UpstreamTimeoutError
)
from backend.app.models.enums import TournamentType

logger = logging.getLogger(__name__)

GAMES_QUERY = {"evals": "true", "accuracy": "true", "moves": "true"}


class LichessClient:
    def __init__(self, http: httpx.AsyncClient, base_url: str, timeout: float = 15.0):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def tournament_url(self, tournament_type: TournamentType, tournament_id: str) -> str:
        return f"{self.base_url}/api/{tournament_type.api_path}/{tournament_id}"

    async def _send(self, request: httpx.Request, stream: bool = False) -> httpx.Response:
        """Sends a request under the deadline, translating transport failures."""
        try:
            return await asyncio.wait_for(self.http.send(request, stream=stream), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Lichess timed out after {self.timeout}s: {request.url}")
            raise UpstreamTimeoutError("Lichess did not respond in time.")
        except httpx.TransportError as e:
            logger.error(f"Lichess transport error for {request.url}: {e}")
            raise UpstreamError("Could not reach Lichess.") from e

    async def get_tournament(self, tournament_type: TournamentType, tournament_id: str) -> Dict[str, Any]:
        request = self.http.build_request(
            "GET",
            self.tournament_url(tournament_type, tournament_id),
            headers={"Accept": "application/json"},
        )
        response = await self._send(request)

        if not response.is_success:
            logger.info(f"Tournament lookup {tournament_id} returned {response.status_code}")
            raise TournamentNotFoundError("Tournament not found.")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Lichess returned unreadable tournament data.") from e
        if not isinstance(data, dict):
            raise UpstreamError("Lichess returned unreadable tournament data.")
        return data

    @asynccontextmanager
    async def stream_games(self, tournament_type: TournamentType, tournament_id: str) -> AsyncIterator[AsyncIterator[bytes]]:
        """
        Opens the NDJSON games export and yields its raw byte chunks.
        The response is always closed on exit, including on errors mid-stream.
        """
        request = self.http.build_request(
            "GET",
            self.tournament_url(tournament_type, tournament_id) + "/games",
            params=GAMES_QUERY,
            headers={"Accept": "application/x-ndjson"},
        )
        response = await self._send(request, stream=True)
        try:
            if not response.is_success:
                logger.error(f"Games export for {tournament_id} returned {response.status_code}")
                raise UpstreamError("Could not fetch the tournament games.")
            yield self._iter_chunks(response)
        finally:
            await response.aclose()

    async def _iter_chunks(self, response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.aiter_bytes():
                yield chunk
        except httpx.TimeoutException:
            raise UpstreamTimeoutError("Lichess stopped sending games in time.")
        except httpx.TransportError as e:
            logger.error(f"Games stream interrupted: {e}")
            raise UpstreamError("The games stream was interrupted.") from e
