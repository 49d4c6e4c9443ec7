"""骰点表达式解析与执行"""
__version__ = "0.1.0"
