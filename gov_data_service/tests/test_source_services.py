"""
数据源服务测试

上游 HTTP 通过 httpx.MockTransport 模拟，缓存写入 pytest 临时目录。
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import AcquisitionLayer, DataSourceError
from gov_data_service.layers.cache import CacheLayer


def _transport(handler):
    """返回 (transport, 请求记录列表)"""
    calls = []

    def _handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    return httpx.MockTransport(_handler), calls


@pytest.fixture
def cache(tmp_path):
    return CacheLayer(str(tmp_path / "cache.json"))


# ── BLS ──────────────────────────────────────────────────

_BLS_OK = {
    "status": "REQUEST_SUCCEEDED",
    "message": [],
    "Results": {
        "series": [
            {
                "seriesID": "LNS14000000",
                "data": [
                    {"year": "2024", "period": "M02", "value": "3.9", "footnotes": [{}]},
                    {"year": "2024", "period": "M01", "value": "3.7", "footnotes": [{}]},
                ],
            }
        ]
    },
}


class TestBlsService:
    def _service(self, handler, cache):
        from gov_data_service.services.bls_service import BlsService
        transport, calls = _transport(handler)
        return BlsService(acquisition=AcquisitionLayer(transport=transport), cache=cache), calls

    def test_request_payload(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json=_BLS_OK), cache)
        with patch.object(settings, "BLS_API_KEY", ""):
            asyncio.run(svc.get_series("LNS14000000", start_year="2023", end_year="2024"))
        sent = json.loads(calls[0].content)
        assert calls[0].method == "POST"
        assert calls[0].url.path.endswith("/timeseries/data/")
        assert sent == {"seriesid": ["LNS14000000"], "startyear": "2023", "endyear": "2024"}

    def test_registration_key_enables_catalog(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json=_BLS_OK), cache)
        with patch.object(settings, "BLS_API_KEY", "secret"):
            asyncio.run(svc.get_series("LNS14000000"))
        sent = json.loads(calls[0].content)
        assert sent["registrationkey"] == "secret" and sent["catalog"] is True

    def test_cache_hit_skips_upstream(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json=_BLS_OK), cache)
        first = asyncio.run(svc.get_series("LNS14000000", start_year="2024"))
        second = asyncio.run(svc.get_series("LNS14000000", start_year="2024"))
        assert len(calls) == 1
        assert first == second
        assert [p["date"] for p in first["data"]] == ["2024-01-01", "2024-02-01"]
        assert first["id"] == "LNS14000000"

    def test_different_options_not_shared(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json=_BLS_OK), cache)
        asyncio.run(svc.get_series("LNS14000000", start_year="2023"))
        asyncio.run(svc.get_series("LNS14000000", start_year="2024"))
        assert len(calls) == 2

    def test_error_status(self, cache):
        body = {"status": "REQUEST_NOT_PROCESSED", "message": ["Invalid series id"]}
        svc, _ = self._service(lambda r: httpx.Response(200, json=body), cache)
        with pytest.raises(DataSourceError) as exc_info:
            asyncio.run(svc.get_series("BAD"))
        assert str(exc_info.value).startswith("Failed to fetch BLS data")
        assert "Invalid series id" in str(exc_info.value)
        assert asyncio.run(cache.stats())["entries"] == 0

    def test_http_error(self, cache):
        svc, _ = self._service(lambda r: httpx.Response(503), cache)
        with pytest.raises(DataSourceError, match="HTTP 503"):
            asyncio.run(svc.get_series("LNS14000000"))

    def test_too_many_series(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json=_BLS_OK), cache)
        with pytest.raises(ValueError):
            asyncio.run(svc.get_multiple_series([f"S{i}" for i in range(51)]))
        with pytest.raises(ValueError):
            asyncio.run(svc.get_multiple_series([]))
        assert calls == []

    def test_multiple_series(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json=_BLS_OK), cache)
        result = asyncio.run(svc.get_multiple_series(["LNS14000000"]))
        assert len(result) == 1 and result[0]["source"] == "bls"

    def test_quarterly_series_with_annual_average(self, cache):
        body = {"status": "REQUEST_SUCCEEDED", "Results": {"series": [{
            "seriesID": "PRS85006092",
            "data": [
                {"year": "2023", "period": "Q05", "value": "2.7", "footnotes": [{}]},
                {"year": "2023", "period": "Q04", "value": "3.5", "footnotes": [{}]},
                {"year": "2023", "period": "Q03", "value": "4.9", "footnotes": [{}]},
            ],
        }]}}
        svc, _ = self._service(lambda r: httpx.Response(200, json=body), cache)
        ts = asyncio.run(svc.get_series("PRS85006092"))
        assert [p["date"] for p in ts["data"]] == ["2023-07-01", "2023-10-01", "2023-12-31"]
        assert ts["frequency"] == "quarterly"

    def test_annual_series(self, cache):
        body = {"status": "REQUEST_SUCCEEDED", "Results": {"series": [{
            "seriesID": "CUUR0000SA0",
            "data": [
                {"year": "2023", "period": "A01", "value": "304.7", "footnotes": []},
                {"year": "2022", "period": "A01", "value": "292.7", "footnotes": []},
            ],
        }]}}
        svc, _ = self._service(lambda r: httpx.Response(200, json=body), cache)
        ts = asyncio.run(svc.get_series("CUUR0000SA0"))
        assert [p["date"] for p in ts["data"]] == ["2022-12-31", "2023-12-31"]
        assert ts["frequency"] == "annual"


# ── FRED ─────────────────────────────────────────────────

class TestFredService:
    def _service(self, handler, cache):
        from gov_data_service.services.fred_service import FredService
        transport, calls = _transport(handler)
        return FredService(acquisition=AcquisitionLayer(transport=transport), cache=cache), calls

    def test_missing_value_becomes_none(self, cache):
        body = {
            "observations": [
                {"date": "2024-01-01", "value": "5.33"},
                {"date": "2024-02-01", "value": "."},
            ]
        }
        svc, calls = self._service(lambda r: httpx.Response(200, json=body), cache)
        ts = asyncio.run(svc.get_series("FEDFUNDS", observation_start="2024-01-01"))
        assert [p["value"] for p in ts["data"]] == [5.33, None]
        assert ts["source"] == "fred"
        params = calls[0].url.params
        assert params["file_type"] == "json"
        assert params["series_id"] == "FEDFUNDS"
        assert "observation_end" not in params

    def test_known_series_frequency(self, cache):
        body = {"observations": [{"date": "2024-01-01", "value": "28269.2"}]}
        svc, _ = self._service(lambda r: httpx.Response(200, json=body), cache)
        assert asyncio.run(svc.get_series("GDP"))["frequency"] == "quarterly"
        assert asyncio.run(svc.get_series("UNKNOWN"))["frequency"] == ""

    def test_missing_observations(self, cache):
        svc, _ = self._service(lambda r: httpx.Response(200, json={"error_code": 400}), cache)
        with pytest.raises(DataSourceError, match="Failed to fetch FRED data"):
            asyncio.run(svc.get_series_observations("GDP"))

    def test_search(self, cache):
        body = {"seriess": [{"id": "UNRATE", "title": "Unemployment Rate"}]}
        svc, calls = self._service(lambda r: httpx.Response(200, json=body), cache)
        assert asyncio.run(svc.search_series("unemployment", limit=5)) == body
        assert calls[0].url.path.endswith("/series/search")
        assert calls[0].url.params["limit"] == "5"


# ── Census ───────────────────────────────────────────────

class TestCensusService:
    def test_population_by_state(self, cache):
        from gov_data_service.services.census_service import CensusService
        rows = [
            ["NAME", "B01003_001E", "state"],
            ["Alabama", "5028092", "01"],
            ["Alaska", "734821", "02"],
        ]
        transport, calls = _transport(lambda r: httpx.Response(200, json=rows))
        svc = CensusService(acquisition=AcquisitionLayer(transport=transport), cache=cache)
        result = asyncio.run(svc.get_population_by_state(limit=1))
        assert result == [{"state": "Alabama", "value": 5028092}]
        assert "acs/acs5" in calls[0].url.path
        assert calls[0].url.params["for"] == "state:*"

    def test_unexpected_shape(self, cache):
        from gov_data_service.services.census_service import CensusService
        transport, _ = _transport(lambda r: httpx.Response(200, json={"oops": 1}))
        svc = CensusService(acquisition=AcquisitionLayer(transport=transport), cache=cache)
        with pytest.raises(DataSourceError, match="Failed to fetch Census data"):
            asyncio.run(svc.get_data("acs/acs5", "NAME", for_="state:*"))


# ── EIA ──────────────────────────────────────────────────

class TestEiaService:
    def _service(self, handler, cache):
        from gov_data_service.services.eia_service import EiaService
        transport, calls = _transport(handler)
        return EiaService(acquisition=AcquisitionLayer(transport=transport), cache=cache), calls

    def test_invalid_data_type(self, cache):
        svc, calls = self._service(lambda r: httpx.Response(200, json={}), cache)
        with pytest.raises(ValueError, match="Invalid data type"):
            asyncio.run(svc.get_series("uranium"))
        assert calls == []

    def test_rows_ascending_and_cached(self, cache):
        from gov_data_service.services.eia_service import _DATASETS
        column = _DATASETS["electricity"]["column"]
        body = {"response": {"data": [
            {"period": "2024-02", column: "300"},
            {"period": "2024-01", column: "310"},
        ]}}
        svc, calls = self._service(lambda r: httpx.Response(200, json=body), cache)
        data = asyncio.run(svc.get_series("electricity", start="2024-01", end="2024-02"))
        assert [p["period"] for p in data["data"]] == ["2024-01", "2024-02"]
        assert data["source"] == "eia"
        assert calls[0].url.params["sort[0][direction]"] == "desc"
        asyncio.run(svc.get_series("electricity", start="2024-01", end="2024-02"))
        assert len(calls) == 1

    def test_mock_fallback_not_cached(self, cache):
        svc, _ = self._service(lambda r: httpx.Response(500), cache)
        with patch.object(settings, "EIA_MOCK_FALLBACK", True):
            data = asyncio.run(svc.get_series("gas-prices"))
        assert data["source"] == "mock"
        assert data["name"].endswith("(Mock)")
        assert len(data["data"]) == 6
        assert asyncio.run(cache.stats())["entries"] == 0

    def test_fallback_disabled_raises(self, cache):
        svc, _ = self._service(lambda r: httpx.Response(500), cache)
        with patch.object(settings, "EIA_MOCK_FALLBACK", False):
            with pytest.raises(DataSourceError, match="Failed to fetch EIA data"):
                asyncio.run(svc.get_series("electricity"))


# ── NOAA ─────────────────────────────────────────────────

class TestNoaaService:
    def _service(self, handler, cache):
        from gov_data_service.services.noaa_service import NoaaService
        transport, calls = _transport(handler)
        return NoaaService(acquisition=AcquisitionLayer(transport=transport), cache=cache), calls

    def test_token_header_and_params(self, cache):
        body = {"metadata": {"resultset": {"count": 1}}, "results": [
            {"date": "2024-01-01T00:00:00", "datatype": "PRCP", "station": "GHCND:X", "value": 0.3},
        ]}
        svc, calls = self._service(lambda r: httpx.Response(200, json=body), cache)
        with patch.object(settings, "NOAA_API_TOKEN", "tok"):
            data = asyncio.run(svc.get_precipitation_data(startdate="2024-01-01", enddate="2024-01-31"))
        assert calls[0].headers["token"] == "tok"
        assert calls[0].url.params["datatypeid"] == "PRCP"
        assert calls[0].url.params["units"] == "standard"
        assert data["results"][0]["value"] == 0.3

    def test_missing_results(self, cache):
        svc, _ = self._service(lambda r: httpx.Response(200, json={}), cache)
        with pytest.raises(DataSourceError, match="Failed to fetch NOAA temperature data"):
            asyncio.run(svc.get_temperature_data())

    def test_invalid_data_type(self, cache):
        svc, _ = self._service(lambda r: httpx.Response(200, json={}), cache)
        with pytest.raises(ValueError):
            asyncio.run(svc.get_data("snow"))


# ── 跨数据源搜索 ─────────────────────────────────────────

class TestCatalogService:
    def _service(self, handler, cache):
        from gov_data_service.services.catalog_service import CatalogService
        from gov_data_service.services.fred_service import FredService
        transport, _ = _transport(handler)
        fred = FredService(acquisition=AcquisitionLayer(transport=transport), cache=cache)
        return CatalogService(fred=fred)

    def test_fred_failure_tolerated(self, cache):
        svc = self._service(lambda r: httpx.Response(500), cache)
        results = asyncio.run(svc.search("unemployment"))
        assert {"id": "LNS14000000", "title": "Unemployment Rate", "source": "bls"} in results
        assert all(r["source"] != "fred" for r in results)

    def test_source_filter(self, cache):
        svc = self._service(lambda r: httpx.Response(500), cache)
        results = asyncio.run(svc.search("nuclear", source="eia"))
        assert [r["id"] for r in results] == ["nuclear"]

    def test_fred_results_merged(self, cache):
        body = {"seriess": [{"id": "UNRATE", "title": "Unemployment Rate", "units": "Percent",
                             "frequency": "Monthly"}]}
        svc = self._service(lambda r: httpx.Response(200, json=body), cache)
        results = asyncio.run(svc.search("unrate", source="fred"))
        assert results == [{"id": "UNRATE", "title": "Unemployment Rate", "units": "Percent",
                            "frequency": "Monthly", "source": "fred"}]

    def test_limit(self, cache):
        svc = self._service(lambda r: httpx.Response(500), cache)
        assert len(asyncio.run(svc.search("price", limit=2))) == 2
