from __future__ import annotations

from typing import Dict, List, Tuple

from pydantic import BaseModel, Field


class BalanceRequest(BaseModel):
    samples: int = Field(default=20, ge=1, le=200)
    rounds: int = Field(default=1, ge=1, le=5)
    seed: int | None = None
    bands: Dict[str, Tuple[float, float]] = Field(default_factory=dict)


class BalanceSampleResponse(BaseModel):
    tendencies: Dict[str, float]
    score: float


class BalanceResponse(BaseModel):
    samples: List[BalanceSampleResponse]
    csv: str
