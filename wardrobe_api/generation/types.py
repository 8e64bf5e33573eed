from typing import Any, Dict, List

from pydantic import BaseModel, Field


class CreationProposal(BaseModel):
    name: str
    image_path: str
    item_ids: List[str] = Field(default_factory=list)


class ProposalRequest(BaseModel):
    user_id: str
    style_id: str
    style: Dict[str, Any] = Field(default_factory=dict)
    items: List[Dict[str, Any]] = Field(default_factory=list)
