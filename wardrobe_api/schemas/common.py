from typing import Optional

from pydantic import BaseModel


class MessageOut(BaseModel):
    message: str


def parse_flag(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("true", "1")
