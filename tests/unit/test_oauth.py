"""Unit tests for OAuth profile extraction and the provider registry."""

import pytest

from workmate.core.config import Settings
from workmate.core.errors import ValidationError
from workmate.core.oauth import (
    GitHubProvider,
    GoogleProvider,
    OAuthProfile,
    OAuthProvider,
    build_oauth_registry,
    github_profile_from_payload,
    google_profile_from_userinfo,
)


class TestGitHubProfile:
    """Tests for reading GitHub's /user and /user/emails payloads."""

    def test_verified_public_email_wins(self) -> None:
        profile = github_profile_from_payload(
            {"id": 42, "login": "octo", "name": "Octo Cat", "email": "octo@x.com",
             "avatar_url": "https://avatars.githubusercontent.com/u/42"},
            [
                {"email": "other@x.com", "primary": True, "verified": True},
                {"email": "octo@x.com", "primary": False, "verified": True},
            ],
        )

        assert profile.provider_id == "42"
        assert profile.email == "octo@x.com"
        assert profile.display_name == "Octo Cat"
        assert profile.avatar_url == "https://avatars.githubusercontent.com/u/42"

    def test_private_email_uses_primary_verified(self) -> None:
        profile = github_profile_from_payload(
            {"id": 42, "login": "octo", "email": None},
            [
                {"email": "old@x.com", "primary": False, "verified": True},
                {"email": "unverified@x.com", "primary": True, "verified": False},
                {"email": "main@x.com", "primary": True, "verified": True},
            ],
        )

        assert profile.email == "main@x.com"
        # Falls back to the login when no display name is set
        assert profile.display_name == "octo"

    def test_unverified_email_is_ignored(self) -> None:
        profile = github_profile_from_payload(
            {"id": 999, "login": "mallory", "email": None},
            [{"email": "victim@x.com", "primary": True, "verified": False}],
        )

        assert profile.email is None
        with pytest.raises(ValidationError):
            profile.to_descriptor()

    def test_public_email_needs_a_verified_entry(self) -> None:
        profile = github_profile_from_payload(
            {"id": 42, "login": "octo", "email": "victim@x.com"},
            [
                {"email": "victim@x.com", "primary": False, "verified": False},
                {"email": "main@x.com", "primary": True, "verified": True},
            ],
        )

        assert profile.email == "main@x.com"

    def test_no_email_at_all(self) -> None:
        profile = github_profile_from_payload({"id": 42, "login": "octo"}, [])

        assert profile.email is None
        with pytest.raises(ValidationError):
            profile.to_descriptor()


class TestGoogleProfile:
    def test_reads_openid_claims(self) -> None:
        profile = google_profile_from_userinfo(
            {"sub": "1234", "email": "g@x.com", "email_verified": True,
             "name": "Gee", "picture": "https://img/g.png"}
        )

        assert profile.provider == "google"
        assert profile.provider_id == "1234"
        assert profile.email == "g@x.com"
        assert profile.avatar_url == "https://img/g.png"

    def test_unverified_email_is_dropped(self) -> None:
        profile = google_profile_from_userinfo(
            {"sub": "1234", "email": "victim@x.com", "email_verified": False}
        )

        assert profile.email is None
        with pytest.raises(ValidationError):
            profile.to_descriptor()


class TestToDescriptor:
    """Tests for turning a provider profile into an identity candidate."""

    def test_sets_the_matching_provider_id(self) -> None:
        descriptor = OAuthProfile(
            provider="github", provider_id="42", email="octo@x.com", display_name="Octo"
        ).to_descriptor()

        assert descriptor.github_id == "42"
        assert descriptor.google_id is None
        assert descriptor.has_provider_id is True

    def test_name_defaults_to_email_local_part(self) -> None:
        descriptor = OAuthProfile(
            provider="google", provider_id="7", email="jane.doe@x.com"
        ).to_descriptor()

        assert descriptor.name == "jane.doe"
        assert descriptor.google_id == "7"

    def test_invalid_email_is_a_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            OAuthProfile(provider="github", provider_id="1", email="not-an-email").to_descriptor()


class TestRegistry:
    """Tests for registering only configured providers."""

    def test_empty_without_credentials(self) -> None:
        assert build_oauth_registry(Settings(github_client_id="", google_client_id="")) == {}

    def test_registers_configured_providers(self) -> None:
        providers = build_oauth_registry(
            Settings(
                github_client_id="gh-id",
                github_client_secret="gh-secret",
                google_client_id="g-id",
                google_client_secret="g-secret",
            )
        )

        assert isinstance(providers["github"], GitHubProvider)
        assert isinstance(providers["google"], GoogleProvider)

    def test_id_without_secret_is_not_configured(self) -> None:
        providers = build_oauth_registry(Settings(github_client_id="gh-id", github_client_secret=""))

        assert "github" not in providers

    def test_provider_without_profile_fetch_cannot_be_built(self) -> None:
        class Incomplete(OAuthProvider):
            name = "incomplete"

        with pytest.raises(TypeError):
            Incomplete(client=None)
