"""图表配置模型"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel


class ChartType(str, Enum):
    LINE = "line"
    BAR = "bar"
    AREA = "area"
    PIE = "pie"
    SCATTER = "scatter"
    HISTOGRAM = "histogram"
    HEATMAP = "heatmap"
    CANDLESTICK = "candlestick"


class ChartConfig(BaseModel):
    type: ChartType
    title: str
    subtitle: Optional[str] = None
    width: int = 800
    height: int = 400
    responsive: bool = True
    animation: bool = True
    theme: str = "light"


class ChartAxis(BaseModel):
    label: str
    type: str = "linear"
    min: Optional[float] = None
    max: Optional[float] = None
    format: Optional[str] = None
    grid: bool = True


class ChartSeries(BaseModel):
    name: str
    data: List[Any] = []
    color: Optional[str] = None
    type: Optional[ChartType] = None
    visible: bool = True


class ChartLegend(BaseModel):
    enabled: bool = True
    position: str = "bottom"


class ChartTooltip(BaseModel):
    enabled: bool = True
    format: Optional[str] = None


class ChartZoom(BaseModel):
    enabled: bool = True
    type: str = "x"


class ChartOptions(BaseModel):
    config: ChartConfig
    x_axis: ChartAxis
    y_axis: List[ChartAxis]
    series: List[ChartSeries]
    legend: ChartLegend = ChartLegend()
    tooltip: ChartTooltip = ChartTooltip()
    zoom: ChartZoom = ChartZoom()
