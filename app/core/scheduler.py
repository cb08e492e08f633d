import asyncio
from typing import Optional

import structlog

from app.core.config import settings
from app.core.database import get_session_maker
from app.repositories.discount_repository import DiscountRepository
from app.services.status_sync import StatusSynchronizer

"折扣状态定时同步任务"

logger = structlog.get_logger()


class StatusSyncScheduler:
    """按固定间隔运行折扣状态同步"""

    def __init__(self, interval_seconds: Optional[int] = None, session_maker=None):
        self.interval_seconds = interval_seconds or settings.status_sync_interval_seconds
        self._session_maker = session_maker
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> dict:
        """执行一次同步并提交"""
        session_maker = self._session_maker or get_session_maker()
        async with session_maker() as session:
            try:
                changes = await StatusSynchronizer(DiscountRepository(session)).sync()
                await session.commit()
                return changes
            except Exception:
                await session.rollback()
                raise

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # 单次失败不影响评估结果，等待下一轮
                logger.error("折扣状态同步失败", error=str(e), error_type=type(e).__name__)

    async def start(self) -> None:
        """启动时先同步一次，再进入定时循环"""
        if self.is_running:
            return
        try:
            await self.run_once()
        except Exception as e:
            # 启动同步失败不阻止服务启动，由定时循环补上
            logger.error("启动时折扣状态同步失败", error=str(e), error_type=type(e).__name__)
        self._task = asyncio.create_task(self._loop())
        logger.info("折扣状态同步任务已启动", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("折扣状态同步任务已停止")


# 全局调度器实例
status_sync_scheduler = StatusSyncScheduler()
