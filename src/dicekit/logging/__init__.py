"""日志模块"""
from .config import setup_logging
from .handlers import log_roll

__all__ = ["setup_logging", "log_roll"]
