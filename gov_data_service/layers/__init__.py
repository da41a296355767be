"""
数据流分层架构
  Layer 1 – Acquisition  : 调用各政府统计 API
  Layer 2 – Cache        : 单文件 JSON 缓存（TTL）
  Layer 3 – Processing   : 响应归一化
"""
