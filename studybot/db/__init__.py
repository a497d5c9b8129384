"""Database package"""

from studybot.db.session import get_engine, get_sessionmaker, get_pool_stats

__all__ = ["get_engine", "get_sessionmaker", "get_pool_stats"]
