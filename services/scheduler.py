# services/scheduler.py
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Awaitable, Callable, Optional

from config import ScheduledPostConfig

logger = logging.getLogger(__name__)


def _localize(moment: datetime, tz: Optional[tzinfo]) -> datetime:
    # naive 값은 tz(없으면 서버 로컬)의 벽시계 시각으로 본다
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz) if tz else moment.astimezone()
    return moment.astimezone(tz) if tz else moment.astimezone()


def next_run_time(at: time, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """
    `now` 이후 처음 오는 벽시계 `at` 시각.
    UTC 오프셋은 오늘이 아니라 목표 날짜 기준으로 정해진다 (DST 전환일 대응).
    """
    now = _localize(now or datetime.now(tz), tz)
    wall = now.replace(tzinfo=None)
    target = datetime.combine(wall.date(), at)
    if target <= wall:
        target += timedelta(days=1)
    return target.replace(tzinfo=tz) if tz else target.astimezone()


def seconds_between(start: datetime, end: datetime) -> float:
    # 같은 tzinfo 끼리의 뺄셈은 벽시계 차이가 되므로 UTC 로 맞춰서 뺀다
    return (end.astimezone(timezone.utc) - start.astimezone(timezone.utc)).total_seconds()


def get_seconds_until(at: time, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> float:
    """
    다음 `at` 시각(기본: 서버 로컬 시간)까지 남은 초.
    지금이 정확히 `at` 이면 하루 뒤를 가리킨다.
    """
    now = _localize(now or datetime.now(tz), tz)
    return max(0.0, seconds_between(now, next_run_time(at, now, tz)))


class DailyPostTrigger:
    """
    하루 한 번 고정 시각에 예약 게시. 부팅 시 start(), 종료 시에만 stop().
    실패는 로그만 남기고 재시도/전파하지 않는다.
    같은 날짜로는 두 번 게시하지 않는다.
    """

    def __init__(
        self,
        automation,
        config: ScheduledPostConfig,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.automation = automation
        self.config = config
        self.tz = config.zone()
        self.clock = clock or (lambda: _localize(datetime.now(self.tz), self.tz))
        self.sleep = sleep
        self._last_fired: Optional[date] = None
        self._task: Optional[asyncio.Task] = None

    async def fire(self):
        cfg = self.config
        if not cfg.is_complete():
            logger.warning("Scheduled Instagram post skipped: username, password, image URL and caption must all be configured")
            return

        logger.info("Starting scheduled Instagram post...")
        try:
            result = await asyncio.to_thread(
                self.automation.post, cfg.username, cfg.password, cfg.image_url, cfg.caption
            )
        except Exception:
            logger.exception("Scheduled Instagram post crashed")
            return

        if result.success:
            logger.info("Scheduled Instagram post uploaded")
        else:
            logger.error("Scheduled Instagram post failed: %s", result.error)

    async def _sleep_until(self, target: datetime):
        # 일찍 깨면 남은 시간만큼 다시 잔다
        while True:
            delay = seconds_between(self.clock(), target)
            if delay <= 0:
                return
            await self.sleep(delay)

    async def _tick(self):
        target = next_run_time(self.config.at, self.clock(), self.tz)
        logger.info("Next scheduled Instagram post at %s", target.isoformat())
        await self._sleep_until(target)

        if target.date() == self._last_fired:
            logger.info("Scheduled Instagram post for %s already sent, skipping", target.date())
            return
        self._last_fired = target.date()
        await self.fire()

    async def _run(self):
        while True:
            await self._tick()

    def start(self):
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
