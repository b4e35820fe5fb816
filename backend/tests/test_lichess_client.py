import asyncio
import unittest

import httpx

from backend.app.core.errors import TournamentNotFoundError, UpstreamError, UpstreamTimeoutError
from backend.app.models.enums import TournamentType
from backend.app.services.lichess_client import LichessClient


def lichess(handler, timeout=1.0):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return http, LichessClient(http, "https://lichess.test/", timeout=timeout)


class TestLichessClient(unittest.IsolatedAsyncioTestCase):
    async def test_tournament_urls(self):
        http, client = lichess(lambda request: httpx.Response(200, json={}))
        async with http:
            self.assertEqual(
                client.tournament_url(TournamentType.ARENA, "abc"), "https://lichess.test/api/tournament/abc"
            )
            self.assertEqual(
                client.tournament_url(TournamentType.SWISS, "abc"), "https://lichess.test/api/swiss/abc"
            )

    async def test_slow_metadata_is_cancelled(self):
        cancelled = asyncio.Event()

        async def slow(request):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return httpx.Response(200, json={})

        http, client = lichess(slow, timeout=0.05)
        async with http:
            with self.assertRaises(UpstreamTimeoutError):
                await client.get_tournament(TournamentType.ARENA, "abc")
        self.assertTrue(cancelled.is_set())

    async def test_slow_games_export_times_out(self):
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, content=b"")

        http, client = lichess(slow, timeout=0.05)
        async with http:
            with self.assertRaises(UpstreamTimeoutError):
                async with client.stream_games(TournamentType.SWISS, "abc"):
                    pass

    async def test_metadata_not_found(self):
        http, client = lichess(lambda request: httpx.Response(404))
        async with http:
            with self.assertRaises(TournamentNotFoundError):
                await client.get_tournament(TournamentType.ARENA, "missing")

    async def test_metadata_not_json(self):
        http, client = lichess(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
        async with http:
            with self.assertRaises(UpstreamError):
                await client.get_tournament(TournamentType.ARENA, "abc")

    async def test_stream_yields_chunks(self):
        async def body():
            yield b'{"id": "a"}\n{"id"'
            yield b': "b"}\n'

        http, client = lichess(lambda request: httpx.Response(200, content=body()))
        async with http:
            async with client.stream_games(TournamentType.ARENA, "abc") as chunks:
                data = b"".join([chunk async for chunk in chunks])
        self.assertEqual(data, b'{"id": "a"}\n{"id": "b"}\n')

    async def test_stream_interrupted(self):
        async def body():
            yield b'{"id": "a"}\n'
            raise httpx.ReadError("connection reset")

        http, client = lichess(lambda request: httpx.Response(200, content=body()))
        async with http:
            with self.assertRaises(UpstreamError):
                async with client.stream_games(TournamentType.ARENA, "abc") as chunks:
                    async for _ in chunks:
                        pass

    async def test_stream_read_timeout(self):
        async def body():
            yield b'{"id": "a"}\n'
            raise httpx.ReadTimeout("no data")

        http, client = lichess(lambda request: httpx.Response(200, content=body()))
        async with http:
            with self.assertRaises(UpstreamTimeoutError):
                async with client.stream_games(TournamentType.ARENA, "abc") as chunks:
                    async for _ in chunks:
                        pass

    async def test_games_export_error_status(self):
        http, client = lichess(lambda request: httpx.Response(429, text="slow down"))
        async with http:
            with self.assertRaises(UpstreamError):
                async with client.stream_games(TournamentType.ARENA, "abc"):
                    pass


if __name__ == '__main__':
    unittest.main()
