"""
数据流分层架构
  Layer 1 – Acquisition  : 数据获取（Binance REST）
  Layer 2 – Cache        : 内存 TTL 缓存（TTL 随时间周期变化）
  Layer 3 – Processing   : K 线清洗与统计摘要
  Layer 4 – Synthetic    : 合成交叉币对计算
"""
