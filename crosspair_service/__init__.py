"""
Binance 交叉币对合成行情服务
独立的行情数据微服务，提供 HTTP 接口

架构分层：
  数据获取层 (Acquisition)  → 从 Binance 公共接口拉取原始 K 线
  缓存层     (Cache)        → 按时间周期设置 TTL 的内存缓存
  处理层     (Processing)   → K 线清洗、标准化、统计摘要
  合成层     (Synthetic)    → 两条 USDT 报价序列按时间对齐后求比值
"""

__version__ = "1.0.0"
