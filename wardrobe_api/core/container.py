import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from wardrobe_api.auth.gate import CredentialGate
from wardrobe_api.core.config import Settings
from wardrobe_api.generation import build_proposer
from wardrobe_api.remote import InMemoryRemote, RemoteService, SupabaseRemote
from wardrobe_api.services.admin_users import AdminUserService
from wardrobe_api.services.creations import CreationService
from wardrobe_api.services.profiles import ProfileService
from wardrobe_api.services.taxonomy import CATEGORIES, STYLES, TaxonomyRegistry
from wardrobe_api.services.wardrobe import WardrobeService

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    remote: RemoteService
    gate: CredentialGate
    profiles: ProfileService
    admin_users: AdminUserService
    wardrobe: WardrobeService
    categories: TaxonomyRegistry
    styles: TaxonomyRegistry
    creations: CreationService


def build_remote(settings: Settings) -> RemoteService:
    if settings.REMOTE_BACKEND == "memory":
        logger.warning("using the in-memory remote backend; data is not persisted")
        return InMemoryRemote()
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set when REMOTE_BACKEND=supabase")
    return SupabaseRemote(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout=settings.SUPABASE_TIMEOUT_S,
    )


def build_container(settings: Settings, remote: Optional[RemoteService] = None) -> Container:
    remote = remote if remote is not None else build_remote(settings)
    categories = TaxonomyRegistry(remote, CATEGORIES)
    styles = TaxonomyRegistry(remote, STYLES)
    return Container(
        settings=settings,
        remote=remote,
        gate=CredentialGate(remote, settings.admin_secret),
        profiles=ProfileService(remote, max_username_attempts=settings.USERNAME_MAX_ATTEMPTS),
        admin_users=AdminUserService(remote),
        wardrobe=WardrobeService(remote),
        categories=categories,
        styles=styles,
        creations=CreationService(remote, styles, categories, build_proposer(settings)),
    )


def get_container(request: Request) -> Container:
    return request.app.state.container
