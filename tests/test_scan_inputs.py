"""
tests/test_scan_inputs.py

Target URL normalization and region selection.
"""

from __future__ import annotations

import pytest

from app.config import ScanSettings
from app.domain.errors import ScanValidationError
from app.domain.regions import default_region_codes, filter_region_codes, resolve_regions
from app.domain.urls import extract_domain, normalize_target_url
from app.services.scan_service import ScanService
from tests.fakes import FakePlatform


class TestNormalizeTargetUrl:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("example.com", "https://example.com"),
            ("  https://Example.com/  ", "https://Example.com"),
            ("http://shop.example.co.uk/path/", "http://shop.example.co.uk/path"),
        ],
    )
    def test_normalizes(self, raw: str, expected: str) -> None:
        assert normalize_target_url(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "localhost", "exa mple.com", "https://"])
    def test_rejects(self, raw: str) -> None:
        with pytest.raises(ScanValidationError):
            normalize_target_url(raw)

    def test_domain_is_lower_cased_hostname(self) -> None:
        assert extract_domain("https://WWW.Example.com:8443/a") == "www.example.com"


class TestRegions:
    def test_unknown_and_duplicate_codes_are_dropped(self) -> None:
        assert filter_region_codes(["US", "zz", "us", " de "]) == ["us", "de"]

    def test_resolution_keeps_request_order(self) -> None:
        assert [region.label for region in resolve_regions(["jp", "global"])] == ["Japan", "Worldwide"]

    def test_default_codes(self) -> None:
        assert default_region_codes() == ["global", "us", "uk", "de", "fr"]


class TestRegionResolutionInService:
    def _service(self, make_orchestrator) -> ScanService:
        return ScanService(
            orchestrator=make_orchestrator([FakePlatform("OPENAI")]),
            scan_settings=ScanSettings(default_region_codes=("global", "jp")),
        )

    def test_omitted_regions_use_configured_defaults(self, make_orchestrator) -> None:
        assert self._service(make_orchestrator).resolve_region_codes(None) == ["global", "jp"]

    def test_all_unknown_regions_is_an_error(self, make_orchestrator) -> None:
        with pytest.raises(ScanValidationError):
            self._service(make_orchestrator).resolve_region_codes(["zz", "xx"])
