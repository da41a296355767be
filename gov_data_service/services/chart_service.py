"""
图表配置服务
根据图表类型、数据点和可选参数生成前端图表配置
"""

import logging
from typing import Any, Dict, List, Optional

from gov_data_service.models.chart import (
    ChartAxis,
    ChartConfig,
    ChartOptions,
    ChartSeries,
    ChartType,
)

logger = logging.getLogger(__name__)

CHART_COLORS = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]


class ChartService:
    """图表配置服务"""

    def generate_config(
        self,
        chart_type: str,
        data: List[Any],
        options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        生成图表配置

        Raises:
            ValueError: 不支持的图表类型
        """
        try:
            kind = ChartType(chart_type)
        except ValueError:
            supported = ", ".join(t.value for t in ChartType)
            raise ValueError(f"Unsupported chart type '{chart_type}'. Available: {supported}")

        opts = options or {}
        chart = ChartOptions(
            config=ChartConfig(
                type=kind,
                title=opts.get("title") or "Data Visualization",
                subtitle=opts.get("subtitle"),
                width=opts.get("width") or 800,
                height=opts.get("height") or 400,
                theme=opts.get("theme") or "light",
            ),
            x_axis=ChartAxis(
                label=opts.get("xAxisLabel") or "Date",
                type=opts.get("xAxisType") or "datetime",
            ),
            y_axis=[ChartAxis(label=opts.get("yAxisLabel") or "Value")],
            series=[ChartSeries(
                name=opts.get("seriesName") or "Data",
                data=data or [],
                color=opts.get("color") or CHART_COLORS[0],
            )],
        )
        logger.debug(f"生成图表配置: type={kind.value}, points={len(data or [])}")
        return chart.model_dump(mode="json")


# ── 模块级别单例 ──────────────────────────────────────────
_chart_service: Optional[ChartService] = None


def get_chart_service() -> ChartService:
    global _chart_service
    if _chart_service is None:
        _chart_service = ChartService()
    return _chart_service
