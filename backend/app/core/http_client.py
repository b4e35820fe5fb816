import httpx

from backend.app.core.config import settings
from backend.app.services.lichess_client import LichessClient

USER_AGENT = "tournament-analysis/1.0"

def build_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.fetch_timeout_seconds),
        headers={"User-Agent": USER_AGENT},
    )

# Dependency for API routes
async def get_lichess_client():
    async with build_http_client() as http:
        yield LichessClient(http, settings.lichess_url, timeout=settings.fetch_timeout_seconds)
