"""
app/domain/regions.py

Region catalogue used to vary prompt phrasing by market.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Region:
    code: str
    label: str
    suffix: str


REGIONS: tuple[Region, ...] = (
    Region(code="global", label="Worldwide", suffix=""),
    Region(code="us", label="United States", suffix="in the United States"),
    Region(code="uk", label="United Kingdom", suffix="in the UK"),
    Region(code="de", label="Germany", suffix="in Germany"),
    Region(code="fr", label="France", suffix="in France"),
    Region(code="au", label="Australia", suffix="in Australia"),
    Region(code="ca", label="Canada", suffix="in Canada"),
    Region(code="in", label="India", suffix="in India"),
    Region(code="jp", label="Japan", suffix="in Japan"),
    Region(code="br", label="Brazil", suffix="in Brazil"),
)

MAX_SELECTED_REGIONS = 10
DEFAULT_REGION_COUNT = 5


def default_region_codes(catalogue: Sequence[Region] = REGIONS) -> list[str]:
    return [region.code for region in catalogue[:DEFAULT_REGION_COUNT]]


def filter_region_codes(codes: Iterable[str], catalogue: Sequence[Region] = REGIONS) -> list[str]:
    """
    Keep known region codes in first-seen order, dropping unknowns and duplicates.
    """

    known = {region.code for region in catalogue}
    selected: list[str] = []
    for raw in codes:
        code = (raw or "").strip().lower()
        if code in known and code not in selected:
            selected.append(code)
    return selected[:MAX_SELECTED_REGIONS]


def resolve_regions(codes: Sequence[str], catalogue: Sequence[Region] = REGIONS) -> list[Region]:
    """
    Map region codes to catalogue entries, preserving the order of `codes`.
    """

    by_code = {region.code: region for region in catalogue}
    return [by_code[code] for code in filter_region_codes(codes, catalogue)]
