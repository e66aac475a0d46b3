from __future__ import annotations

import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv

from ..assistant.fake import FakeAssistant
from ..assistant.gemini import GeminiAssistant
from ..assistant.service import AssistantService, LocationResolver
from ..config import load_settings
from ..core.constants import DEFAULT_ASSISTANT_TIMEOUT_SECONDS
from ..gateway.gateway import ResilientDataGateway
from ..remote.client import RemoteServiceClient
from ..storage.local_cache import LocalCacheAdapter
from .store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    remote: RemoteServiceClient
    cache: LocalCacheAdapter
    gateway: ResilientDataGateway
    store: SessionStore


def _build_collaborator(api_key: Optional[str], timeout: float):
    if not api_key:
        logger.info("GOOGLE_API_KEY not set; using the offline assistant")
        return FakeAssistant()

    return GeminiAssistant(api_key, request_timeout=timeout)


def build_session(settings: Optional[ModuleType] = None, *, remote: Optional[RemoteServiceClient] = None) -> Session:
    """Wire one client session: remote client, local cache, gateway and store.

    A new session means a new gateway, so the remote is probed again.
    """
    if settings is None:
        load_dotenv(override=False)
        settings = load_settings()

    remote = remote or RemoteServiceClient(
        getattr(settings, "API_BASE_URL"),
        timeout=float(getattr(settings, "REMOTE_TIMEOUT_SECONDS", 10.0)),
    )
    cache = LocalCacheAdapter(getattr(settings, "LOCAL_CACHE_DIR"))
    cache.init()

    gateway = ResilientDataGateway(remote, cache)
    collaborator = _build_collaborator(
        getattr(settings, "GOOGLE_API_KEY", None),
        float(getattr(settings, "ASSISTANT_TIMEOUT_SECONDS", DEFAULT_ASSISTANT_TIMEOUT_SECONDS)),
    )
    store = SessionStore(
        gateway,
        locations=LocationResolver(collaborator),
        assistant=AssistantService(collaborator),
    )
    return Session(remote=remote, cache=cache, gateway=gateway, store=store)
