"""
Smart Bridge Router - 跨链桥路由聚合与排序
"""

from .factory import build_registry, build_service
from .types import RankingStrategy, RouteRequest

__version__ = "0.1.0"

__all__ = ["build_registry", "build_service", "RankingStrategy", "RouteRequest"]
