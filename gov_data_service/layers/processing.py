"""
Layer 3 – 数据处理层
把各数据源的原始响应整理成统一的时间序列 / 数据点格式：
数值解析（空值保留为 None）、BLS 周期转日期、按月聚合等。
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from gov_data_service.models.timeseries import (
    DataPoint,
    EiaDataPoint,
    NoaaDataPoint,
    TimeSeries,
)

logger = logging.getLogger(__name__)

# FRED 用 "." 表示缺失值
_MISSING_MARKERS = ("", ".")


def parse_numeric_value(value: Any) -> Optional[float]:
    """安全解析数值，无法解析或缺失时返回 None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if value in _MISSING_MARKERS:
            return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(num) else num


def bls_period_to_date(year: str, period: str) -> date:
    """
    BLS 周期代码转日期

    M01..M12 → 当月 1 日；Q01..Q04 → 季度首月 1 日；
    其余（M13 / Q05 年均值、年度、半年度等）→ 12 月 31 日
    """
    y = int(year)
    kind, num = period[:1], period[1:]
    n = int(num) if num.isdigit() else 0
    if kind == "M" and 1 <= n <= 12:
        return date(y, n, 1)
    if kind == "Q" and 1 <= n <= 4:
        return date(y, (n - 1) * 3 + 1, 1)
    return date(y, 12, 31)


_BLS_FREQUENCIES = {"M": "monthly", "Q": "quarterly", "S": "semiannual", "A": "annual"}


def bls_frequency(periods: List[str]) -> str:
    """按周期代码前缀推断频率，忽略 M13 / Q05 等年均值行"""
    for period in periods:
        if period in ("M13", "Q05"):
            continue
        if period[:1] in _BLS_FREQUENCIES:
            return _BLS_FREQUENCIES[period[:1]]
    return "annual" if periods else ""


def _utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class ProcessingLayer:
    """数据处理层：原始响应 → 统一结构（dict，可直接写入 JSON 缓存）"""

    # ── BLS ───────────────────────────────────────────────

    def bls_series_to_timeseries(self, series: Dict[str, Any]) -> Dict[str, Any]:
        series_id = series.get("seriesID", "")
        catalog = series.get("catalog") or {}
        points = []
        for item in series.get("data", []):
            footnotes = [fn for fn in item.get("footnotes") or [] if fn and fn.get("text")]
            points.append(DataPoint(
                date=bls_period_to_date(item["year"], item["period"]).isoformat(),
                value=parse_numeric_value(item.get("value")),
                label=item.get("periodName"),
                metadata={
                    "footnotes": footnotes,
                    "calculations": item.get("calculations"),
                },
            ))
        # BLS 按最新在前返回，统一为时间正序
        points.reverse()

        ts = TimeSeries(
            id=series_id,
            title=catalog.get("series_title") or series_id,
            description=catalog.get("survey_name") or "",
            units=catalog.get("measure_data_type") or "",
            frequency=bls_frequency([item.get("period", "") for item in series.get("data", [])]),
            source="bls",
            last_updated=_utc_now_iso(),
            data=points,
            seasonally_adjusted=catalog.get("seasonally_adjusted") == "Seasonally Adjusted",
        )
        return ts.model_dump()

    # ── FRED ──────────────────────────────────────────────

    def fred_observations_to_points(
        self, observations: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        return [
            {"date": obs.get("date", ""), "value": parse_numeric_value(obs.get("value"))}
            for obs in observations
        ]

    def fred_to_timeseries(
        self, series_id: str, payload: Dict[str, Any], frequency: Optional[str] = None
    ) -> Dict[str, Any]:
        points = [
            DataPoint(**p) for p in self.fred_observations_to_points(payload["observations"])
        ]
        ts = TimeSeries(
            id=series_id,
            title=series_id,
            units=payload.get("units") or "",
            frequency=frequency or "",
            source="fred",
            last_updated=_utc_now_iso(),
            data=points,
        )
        return ts.model_dump()

    # ── Census ────────────────────────────────────────────

    def census_rows_to_records(self, rows: List[List[Any]]) -> List[Dict[str, Any]]:
        """Census 返回二维数组，首行为表头"""
        if not rows:
            return []
        header, *body = rows
        return [dict(zip(header, row)) for row in body]

    # ── EIA ───────────────────────────────────────────────

    def eia_rows_to_points(
        self, rows: List[Dict[str, Any]], column: str
    ) -> List[Dict[str, Any]]:
        points = [
            EiaDataPoint(period=row.get("period", ""), value=parse_numeric_value(row.get(column)))
            for row in rows
        ]
        # 请求按 period 倒序，返回正序
        points.reverse()
        return [p.model_dump() for p in points]

    # ── NOAA ──────────────────────────────────────────────

    def noaa_results_to_points(self, results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [
            NoaaDataPoint(
                date=item.get("date", ""),
                value=parse_numeric_value(item.get("value")),
                datatype=item.get("datatype", ""),
                station=item.get("station"),
                attributes=item.get("attributes"),
            ).model_dump()
            for item in results
        ]

    def monthly_average(
        self, points: List[Dict[str, Any]], decimals: int = 1
    ) -> List[Dict[str, Any]]:
        """按 YYYY-MM 分组求均值（跳过空值），按月份升序"""
        if not points:
            return []
        df = pd.DataFrame(points)
        if "date" not in df.columns or "value" not in df.columns:
            return []
        df["month"] = df["date"].astype(str).str.slice(0, 7)
        df["value"] = pd.to_numeric(df["value"], errors="coerce")
        grouped = df.groupby("month", sort=True)["value"].mean().dropna().round(decimals)
        return [{"date": month, "value": float(value)} for month, value in grouped.items()]

    def group_by_datatype(
        self, points: List[Dict[str, Any]], limit: Optional[int] = None
    ) -> Dict[str, List[Dict[str, Any]]]:
        """按 datatype 分组，保持原有顺序"""
        groups: Dict[str, List[Dict[str, Any]]] = {}
        for p in points:
            bucket = groups.setdefault(p.get("datatype", ""), [])
            if limit is None or len(bucket) < limit:
                bucket.append({"date": p.get("date"), "value": p.get("value")})
        return groups


# ── 模块级别单例 ──────────────────────────────────────────
_processor: Optional[ProcessingLayer] = None


def get_processing_layer() -> ProcessingLayer:
    global _processor
    if _processor is None:
        _processor = ProcessingLayer()
    return _processor
