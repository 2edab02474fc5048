"""Usage help and liveness probe."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from neometing.api.dependencies import get_registry
from neometing.infrastructure.providers import ProviderRegistry

router = APIRouter()

HELP_TEXT = """neo-meting

GET /{provider}/song/{id}          song record (JSON)
GET /{provider}/playlist/{id}      every song of a playlist (JSON)
GET /{provider}/search/{keyword}   search, ?limit=30&page=1&type=0 (JSON)
GET /{provider}/artist/{id}        songs of an artist (JSON)
GET /{provider}/url/{id}           302 to the playable file
GET /{provider}/pic/{id}           302 to the cover image
GET /{provider}/lrc/{id}           LRC lyrics (text)

providers: {providers}
"""


class LivenessStatus(BaseModel):
    """Simple liveness probe response."""

    status: str = Field(description="alive or dead")
    timestamp: str = Field(description="ISO timestamp")
    providers: list[str] = Field(default_factory=list)


@router.get("/", response_class=PlainTextResponse)
async def help_page(registry: ProviderRegistry = Depends(get_registry)) -> str:
    """Plain-text usage overview."""
    return HELP_TEXT.replace("{providers}", ", ".join(registry.names()))


@router.get("/health/live", response_model=LivenessStatus)
async def liveness_probe(registry: ProviderRegistry = Depends(get_registry)) -> LivenessStatus:
    """Liveness probe for Docker.

    Only checks that the app runs and providers are registered; it never calls upstream.
    """
    return LivenessStatus(
        status="alive",
        timestamp=datetime.now(UTC).isoformat(),
        providers=registry.names(),
    )
