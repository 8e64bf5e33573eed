import random
import time
from typing import List, Optional

from wardrobe_api.generation.base import CreationProposer
from wardrobe_api.generation.types import CreationProposal, ProposalRequest


class MockProposer(CreationProposer):
    """Placeholder for a model-backed generator: random item picks under fixed names."""

    def __init__(self, count: int = 3, items_per_creation: int = 3, rng: Optional[random.Random] = None) -> None:
        self.count = count
        self.items_per_creation = items_per_creation
        self._rng = rng or random.Random()

    async def propose(self, req: ProposalRequest) -> List[CreationProposal]:
        stamp = int(time.time() * 1000)
        ids = [str(it["id"]) for it in req.items]
        proposals = []
        for i in range(self.count):
            picked = self._rng.sample(ids, min(self.items_per_creation, len(ids)))
            proposals.append(
                CreationProposal(
                    name=f"AI Generated Creation {i + 1}",
                    image_path=f"/mock/creation-{stamp}-{i}.png",
                    item_ids=picked,
                )
            )
        return proposals
