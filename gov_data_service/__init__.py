"""
政府统计数据聚合服务
代理 BLS / FRED / Census / EIA / NOAA 等美国政府统计 API，为前端图表提供统一接口

架构分层：
  数据获取层 (Acquisition)  → 调用各数据源 REST API
  缓存层     (Cache)        → 单文件 JSON 缓存（带 TTL）
  处理层     (Processing)   → 日期解析、空值处理、统一时间序列格式
"""

__version__ = "1.0.0"
