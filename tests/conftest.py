"""Shared test fixtures."""

from dataclasses import dataclass, field
from itertools import count
from uuid import UUID, uuid4

import pytest

from adcraft.config import Settings
from adcraft.containers import AppContainer
from adcraft.domain.auth import AuthSession, AuthUser
from adcraft.domain.generations import GenerationRecord
from adcraft.errors import AuthProviderError, AuthProviderUnavailable
from adcraft.services.auth import AuthProvider, AuthSessionManager
from adcraft.services.cookies import SessionCookieCodec
from adcraft.services.generation import (
    GenerationClient,
    GenerationRepository,
    GenerationService,
    ImageStore,
)


@dataclass
class FakeAuthProvider(AuthProvider):
    """In-memory identity provider issuing opaque tokens."""

    expires_in: int | None = 3600
    return_no_session: bool = False
    transient_failures: int = 0
    users: dict[str, tuple[str, AuthUser]] = field(default_factory=dict)
    access_tokens: dict[str, AuthUser] = field(default_factory=dict)
    refresh_tokens: dict[str, AuthUser] = field(default_factory=dict)
    get_user_calls: int = 0
    refresh_calls: int = 0
    _ids: count = field(default_factory=lambda: count(1))

    def add_user(self, email: str, password: str = "secret123") -> AuthUser:
        user = AuthUser(id=uuid4(), email=email)
        self.users[email] = (password, user)
        return user

    def issue_session(self, user: AuthUser) -> AuthSession:
        n = next(self._ids)
        session = AuthSession(
            access_token=f"access-{n}",
            refresh_token=f"refresh-{n}",
            expires_in=self.expires_in,
            user=user,
        )
        self.access_tokens[session.access_token] = user
        self.refresh_tokens[session.refresh_token] = user
        return session

    def expire(self, access_token: str) -> None:
        self.access_tokens.pop(access_token, None)

    async def sign_up(self, email: str, password: str) -> AuthUser:
        if email in self.users:
            raise AuthProviderError("User already registered", status_code=422)
        return self.add_user(email, password)

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> AuthSession | None:
        stored = self.users.get(email)
        if stored is None or stored[0] != password:
            raise AuthProviderError("Invalid login credentials", status_code=400)
        if self.return_no_session:
            return None
        return self.issue_session(stored[1])

    async def get_user(self, access_token: str) -> AuthUser:
        self.get_user_calls += 1
        if self.transient_failures > 0:
            self.transient_failures -= 1
            raise AuthProviderUnavailable()
        user = self.access_tokens.get(access_token)
        if user is None:
            raise AuthProviderError("invalid JWT", status_code=401)
        return user

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        self.refresh_calls += 1
        user = self.refresh_tokens.pop(refresh_token, None)
        if user is None:
            raise AuthProviderError("Invalid Refresh Token", status_code=400)
        for token, owner in list(self.access_tokens.items()):
            if owner == user:
                self.access_tokens.pop(token)
        return self.issue_session(user)


@dataclass
class FakeGenerationClient(GenerationClient):
    """Generation client returning fixed results or failing on demand."""

    enhanced: str = "a glossy studio shot of a lipstick"
    image_bytes: bytes = b"\x89PNG\r\n\x1a\nfake-image"
    fail_enhance: bool = False
    fail_image: bool = False
    enhance_calls: int = 0
    image_calls: list[str] = field(default_factory=list)

    async def enhance_prompt(self, prompt: str) -> str:
        self.enhance_calls += 1
        if self.fail_enhance:
            raise RuntimeError("enhancement provider down")
        return self.enhanced

    async def generate_image(self, prompt: str) -> bytes:
        self.image_calls.append(prompt)
        if self.fail_image:
            raise RuntimeError("image provider down")
        return self.image_bytes


@dataclass
class InMemoryImageStore(ImageStore):
    """In-memory object store for tests."""

    base_url: str = "https://example.supabase.co/storage/v1/object/public/generations"
    fail_upload: bool = False
    fail_remove: bool = False
    objects: dict[str, bytes] = field(default_factory=dict)
    removed: list[list[str]] = field(default_factory=list)

    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        if self.fail_upload:
            raise RuntimeError("storage down")
        self.objects[filename] = data
        return f"{self.base_url}/{filename}"

    def remove(self, filenames: list[str]) -> None:
        self.removed.append(filenames)
        if self.fail_remove:
            raise RuntimeError("storage down")
        for filename in filenames:
            self.objects.pop(filename, None)


@dataclass
class InMemoryGenerationRepository(GenerationRepository):
    """In-memory generation repository for tests."""

    fail_insert: bool = False
    fail_delete: bool = False
    records: dict[UUID, GenerationRecord] = field(default_factory=dict)

    def insert(self, record: GenerationRecord) -> None:
        if self.fail_insert:
            raise RuntimeError("database down")
        self.records[record.id] = record

    def get(self, generation_id: UUID) -> GenerationRecord | None:
        return self.records.get(generation_id)

    def list_for_user(self, user_id: UUID) -> list[GenerationRecord]:
        return [
            record for record in self.records.values() if record.user_id == user_id
        ]

    def delete(self, generation_id: UUID) -> None:
        if self.fail_delete:
            raise RuntimeError("database down")
        self.records.pop(generation_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
        environment="test",
        auth_retry_delay_seconds=0,
    )


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def generation_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def generation_repository() -> InMemoryGenerationRepository:
    return InMemoryGenerationRepository()


@pytest.fixture
def cookies() -> SessionCookieCodec:
    return SessionCookieCodec(secure=False)


@pytest.fixture
def auth_manager(
    auth_provider: FakeAuthProvider, cookies: SessionCookieCodec
) -> AuthSessionManager:
    return AuthSessionManager(
        provider=auth_provider, cookies=cookies, retry_delay_seconds=0
    )


@pytest.fixture
def generation_service(
    generation_client: FakeGenerationClient,
    image_store: InMemoryImageStore,
    generation_repository: InMemoryGenerationRepository,
) -> GenerationService:
    return GenerationService(
        client=generation_client,
        image_store=image_store,
        repository=generation_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    cookies: SessionCookieCodec,
    auth_manager: AuthSessionManager,
    generation_service: GenerationService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        cookies=cookies,
        auth_manager=auth_manager,
        generation_service=generation_service,
        close_resources=close_resources,
    )
