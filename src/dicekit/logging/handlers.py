"""骰点日志装饰器"""
import time
from functools import wraps
from typing import Callable, Any
from loguru import logger

from ..dice.errors import DiceError


def log_roll(func: Callable) -> Callable:
    """单个输入处理的日志装饰器
    
    被装饰函数的第一个参数为用户输入的表达式。
    
    日志格式:
    - 开始: ROLL | input=xxx
    - 成功: ROLL_OK | input=xxx | duration=xxxms
    - 失败: ROLL_ERR | input=xxx | error=xxx
    """
    @wraps(func)
    def wrapper(notation: str, *args, **kwargs) -> Any:
        start_time = time.perf_counter()
        logger.info(f"ROLL | input={notation}")
        
        try:
            result = func(notation, *args, **kwargs)
        except DiceError as e:
            duration = (time.perf_counter() - start_time) * 1000
            # 用户输入错误，不记录堆栈
            logger.warning(
                f"ROLL_ERR | input={notation} | duration={duration:.2f}ms | "
                f"error={type(e).__name__}: {e}"
            )
            raise
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.exception(
                f"ROLL_ERR | input={notation} | duration={duration:.2f}ms | "
                f"error={type(e).__name__}: {e}"
            )
            raise
        
        duration = (time.perf_counter() - start_time) * 1000
        logger.info(f"ROLL_OK | input={notation} | duration={duration:.2f}ms")
        return result
    
    return wrapper
