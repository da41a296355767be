"""各数据源归一化后的数据模型"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class DataPoint(BaseModel):
    date: str
    value: Optional[float] = None
    label: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class TimeSeries(BaseModel):
    """所有数据源共用的时间序列结构"""
    id: str
    title: str
    description: str = ""
    units: str = ""
    frequency: str = "monthly"
    source: str
    last_updated: str
    data: List[DataPoint] = []
    seasonally_adjusted: Optional[bool] = None


class EiaDataPoint(BaseModel):
    period: str
    value: Optional[float] = None


class EiaSeriesData(BaseModel):
    series_id: str
    name: str
    units: str
    frequency: str
    data: List[EiaDataPoint] = []
    description: str = ""
    copyright: str = "U.S. Energy Information Administration"
    source: str = "eia"


class NoaaDataPoint(BaseModel):
    date: str
    value: Optional[float] = None
    datatype: str
    station: Optional[str] = None
    attributes: Optional[str] = None


class NoaaData(BaseModel):
    metadata: Dict[str, Any] = {}
    results: List[NoaaDataPoint] = []
