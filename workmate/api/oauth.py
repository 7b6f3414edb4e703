"""OAuth login endpoints for GitHub and Google."""

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from workmate.core.config import get_settings
from workmate.core.database import AsyncSessionDep
from workmate.core.deps import set_auth_cookie
from workmate.core.errors import ServiceUnavailableError
from workmate.core.oauth import OAuthProvider
from workmate.core.observability import record_login
from workmate.schemas.common import error_responses
from workmate.services import user_service

settings = get_settings()
logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["oauth"], responses=error_responses(400, 503))

PROVIDER_LABELS = {"github": "GitHub", "google": "Google"}


def get_provider(request: Request, name: str) -> OAuthProvider:
    """Look up a configured provider on the running application."""
    providers: dict[str, OAuthProvider] = getattr(request.app.state, "oauth_providers", {})
    provider = providers.get(name)
    if provider is None:
        raise ServiceUnavailableError(f"{PROVIDER_LABELS.get(name, name)} OAuth is not configured")
    return provider


async def _start_login(request: Request, name: str) -> Response:
    provider = get_provider(request, name)
    redirect_uri = str(request.url_for(f"{name}_callback"))
    return await provider.authorize_redirect(request, redirect_uri)


async def _finish_login(request: Request, session: AsyncSessionDep, name: str) -> Response:
    """Exchange the code, resolve the identity and hand a cookie to the frontend."""
    provider = get_provider(request, name)
    token = await provider.exchange_code(request)
    profile = await provider.fetch_profile(token)

    user, created = await user_service.resolve_identity(session, profile.to_descriptor())
    await session.commit()

    logger.info(
        "OAuth login successful",
        provider=name,
        user_id=str(user.id),
        created=created,
    )
    record_login(name)

    response = RedirectResponse(url=settings.frontend_url, status_code=status.HTTP_302_FOUND)
    set_auth_cookie(response, user.id)
    return response


@router.get("/github")
async def github_login(request: Request) -> Response:
    """Redirect to GitHub's authorization page."""
    return await _start_login(request, "github")


@router.get("/github/callback")
async def github_callback(request: Request, session: AsyncSessionDep) -> Response:
    return await _finish_login(request, session, "github")


@router.get("/google")
async def google_login(request: Request) -> Response:
    """Redirect to Google's authorization page."""
    return await _start_login(request, "google")


@router.get("/google/callback")
async def google_callback(request: Request, session: AsyncSessionDep) -> Response:
    return await _finish_login(request, session, "google")
