"""
时间源
所有"当前时间"都从这里获取，测试中注入固定时钟保证结果可复现
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """统一转换为无时区的UTC时间"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class SystemClock:
    """系统时钟"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class FixedClock:
    """固定时钟"""

    def __init__(self, now: datetime):
        self._now = to_naive_utc(now)

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        """按timedelta参数向前拨动时钟"""
        self._now = self._now + timedelta(**kwargs)


system_clock = SystemClock()
