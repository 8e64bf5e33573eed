from typing import Callable, Dict, List, Protocol

from wardrobe_api.core.config import Settings
from wardrobe_api.generation.types import CreationProposal, ProposalRequest


class CreationProposer(Protocol):
    async def propose(self, req: ProposalRequest) -> List[CreationProposal]:
        ...


class ProposerRegistry:
    def __init__(self) -> None:
        self._factories: Dict[str, Callable[[Settings], CreationProposer]] = {}

    def register(self, name: str, factory: Callable[[Settings], CreationProposer]) -> None:
        self._factories[name] = factory

    def build(self, name: str, settings: Settings) -> CreationProposer:
        if name not in self._factories:
            raise ValueError(f"Unknown creation proposer: {name}")
        return self._factories[name](settings)
