"""
折扣缓存状态同步
定时推进status字段，仅用于展示；所有评估都基于时间戳重新判断，
同步延迟或跳过不会导致错误的通过或拒绝
"""

import logging
from typing import Dict

from app.core.clock import SystemClock, system_clock
from app.repositories.discount_repository import DiscountRepository

logger = logging.getLogger(__name__)


class StatusSynchronizer:
    """折扣状态同步器"""

    def __init__(self, discount_repo: DiscountRepository, clock: SystemClock = system_clock):
        self.discount_repo = discount_repo
        self.clock = clock

    async def sync(self) -> Dict[str, int]:
        """执行一次同步，返回各类状态变更数量"""
        now = self.clock.now()
        changes = await self.discount_repo.sync_statuses(now)

        if changes.get("disabled") or changes.get("activated"):
            logger.info(
                f"折扣状态同步完成: 停用 {changes.get('disabled', 0)} 个, 启用 {changes.get('activated', 0)} 个"
            )
        return changes
