"""OAuth providers for GitHub and Google.

Each provider wraps an authlib Starlette client behind the same three
steps: send the browser to the consent page, exchange the callback code
for a token, and turn that token into an OAuthProfile. Only providers with
client credentials are registered.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from authlib.integrations.starlette_client import OAuth, OAuthError
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request
from starlette.responses import Response

from workmate.core.config import Settings
from workmate.core.errors import InfrastructureError, ValidationError
from workmate.schemas.user import NAME_MAX_LENGTH, IdentityDescriptor

logger = structlog.get_logger()

GITHUB_API_URL = "https://api.github.com"


@dataclass
class OAuthProfile:
    """Normalized identity returned by a provider."""

    provider: str
    provider_id: str
    email: str | None
    display_name: str | None = None
    avatar_url: str | None = None

    def to_descriptor(self) -> IdentityDescriptor:
        """Build the candidate identity used for identity resolution."""
        if not self.email:
            raise ValidationError(f"Could not get email from {self.provider}")

        name = self.display_name or self.email.split("@", 1)[0]
        ids = {f"{self.provider}_id": self.provider_id}
        try:
            return IdentityDescriptor(
                email=self.email,
                name=name[:NAME_MAX_LENGTH],
                profile_image=self.avatar_url,
                **ids,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid profile from {self.provider}") from e


def github_profile_from_payload(
    user: dict[str, Any],
    emails: list[dict[str, Any]] | None = None,
) -> OAuthProfile:
    """Extract a profile from GitHub's /user and /user/emails payloads.

    Only a verified address is used: the public profile email when the
    emails list marks it verified, otherwise the primary verified one.
    Without one the profile carries no email.
    """
    verified = [entry for entry in emails or [] if entry.get("verified")]
    email = None
    public_email = user.get("email")
    if public_email and any(entry.get("email") == public_email for entry in verified):
        email = public_email
    else:
        for entry in verified:
            if entry.get("primary"):
                email = entry.get("email")
                break

    return OAuthProfile(
        provider="github",
        provider_id=str(user["id"]),
        email=email,
        display_name=user.get("name") or user.get("login"),
        avatar_url=user.get("avatar_url"),
    )


def google_profile_from_userinfo(userinfo: dict[str, Any]) -> OAuthProfile:
    """Extract a profile from the OpenID Connect userinfo claims.

    The email is dropped unless Google reports it verified.
    """
    email_verified = userinfo.get("email_verified") in (True, "true")
    return OAuthProfile(
        provider="google",
        provider_id=str(userinfo["sub"]),
        email=userinfo.get("email") if email_verified else None,
        display_name=userinfo.get("name"),
        avatar_url=userinfo.get("picture"),
    )


class OAuthProvider(ABC):
    """Capability interface of a configured OAuth provider.

    Subclasses supply fetch_profile; the redirect and code exchange go
    through the authlib client.
    """

    name: str = ""
    label: str = ""

    def __init__(self, client: Any) -> None:
        self.client = client

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        return await self.client.authorize_redirect(request, redirect_uri)

    async def exchange_code(self, request: Request) -> dict[str, Any]:
        """Exchange the callback code (and state) for a token."""
        try:
            return await self.client.authorize_access_token(request)
        except OAuthError as e:
            logger.error(f"{self.label} OAuth token exchange failed", error=str(e))
            raise ValidationError(f"Failed to authenticate with {self.label}") from e

    @abstractmethod
    async def fetch_profile(self, token: dict[str, Any]) -> OAuthProfile:
        """Read the provider profile for an exchanged token."""


class GitHubProvider(OAuthProvider):
    name = "github"
    label = "GitHub"

    def __init__(self, client: Any, api_url: str = GITHUB_API_URL) -> None:
        super().__init__(client)
        self.api_url = api_url

    async def fetch_profile(self, token: dict[str, Any]) -> OAuthProfile:
        headers = {"Authorization": f"Bearer {token['access_token']}"}
        try:
            async with httpx.AsyncClient(base_url=self.api_url, timeout=10.0) as client:
                user_resp = await client.get("/user", headers=headers)
                if user_resp.status_code != 200:
                    raise ValidationError("Failed to fetch GitHub user info")
                github_user = user_resp.json()

                # Private emails are only listed here
                emails_resp = await client.get("/user/emails", headers=headers)
                emails = emails_resp.json() if emails_resp.status_code == 200 else []
        except httpx.HTTPError as e:
            logger.error("GitHub API request failed", error=str(e))
            raise InfrastructureError("GitHub API request failed") from e

        return github_profile_from_payload(github_user, emails)


class GoogleProvider(OAuthProvider):
    name = "google"
    label = "Google"

    async def fetch_profile(self, token: dict[str, Any]) -> OAuthProfile:
        # Parsed from the ID token by authlib
        userinfo = token.get("userinfo")
        if not userinfo:
            raise ValidationError("Failed to get user info from Google")
        return google_profile_from_userinfo(userinfo)


def build_oauth_registry(settings: Settings) -> dict[str, OAuthProvider]:
    """Register a provider for every configured set of client credentials."""
    oauth = OAuth()
    providers: dict[str, OAuthProvider] = {}

    if settings.github_client_id and settings.github_client_secret:
        oauth.register(
            name="github",
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            access_token_url="https://github.com/login/oauth/access_token",
            authorize_url="https://github.com/login/oauth/authorize",
            api_base_url=f"{GITHUB_API_URL}/",
            client_kwargs={"scope": "user:email read:user"},
        )
        providers["github"] = GitHubProvider(oauth.create_client("github"))

    if settings.google_client_id and settings.google_client_secret:
        oauth.register(
            name="google",
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
            client_kwargs={"scope": "openid email profile"},
        )
        providers["google"] = GoogleProvider(oauth.create_client("google"))

    logger.info("OAuth providers registered", providers=sorted(providers))
    return providers
