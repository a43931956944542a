"""
Liveness endpoint reporting which AI platforms are configured.
"""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, Depends

from app.platforms.base import PlatformAdapter
from app.platforms.registry import build_platform_adapters, get_usable_platforms
from app.schemas.scan import HealthResponse, PlatformInfo

router = APIRouter(tags=["health"])


def get_platform_adapters() -> Sequence[PlatformAdapter]:
    return build_platform_adapters()


@router.get("/health", response_model=HealthResponse)
def health(adapters: Sequence[PlatformAdapter] = Depends(get_platform_adapters)) -> HealthResponse:
    usable = get_usable_platforms(list(adapters))
    return HealthResponse(
        status="ok",
        platforms=[PlatformInfo(key=adapter.key, name=adapter.name) for adapter in usable],
        platform_count=len(usable),
    )
