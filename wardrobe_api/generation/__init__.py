from wardrobe_api.core.config import Settings
from wardrobe_api.generation.base import CreationProposer, ProposerRegistry
from wardrobe_api.generation.mock_provider import MockProposer
from wardrobe_api.generation.types import CreationProposal, ProposalRequest


def default_registry() -> ProposerRegistry:
    registry = ProposerRegistry()
    registry.register(
        "mock",
        lambda s: MockProposer(count=s.GENERATION_COUNT, items_per_creation=s.GENERATION_ITEMS_PER_CREATION),
    )
    return registry


def build_proposer(settings: Settings) -> CreationProposer:
    return default_registry().build((settings.GENERATION_PROVIDER or "mock").lower(), settings)


__all__ = [
    "CreationProposal",
    "CreationProposer",
    "MockProposer",
    "ProposalRequest",
    "ProposerRegistry",
    "build_proposer",
    "default_registry",
]
