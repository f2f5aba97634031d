"""Recurring job coordinator with per-user fan-out."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, List, Optional, Set

from inboxsage.core.enums import JobName, ScheduleType
from inboxsage.core.user import User, UserProfile
from inboxsage.database.digest_repository import DigestRepository
from inboxsage.database.user_repository import UserRepository
from inboxsage.pipeline.aggregator import ContentAggregator
from inboxsage.pipeline.generators.digest_generator import DigestGenerator
from inboxsage.pipeline.summarizers.article_summarizer import ArticleSummarizer
from inboxsage.utils.date_utils import (
    get_timezone,
    js_weekday,
    local_hour,
    now_utc,
    start_of_day,
    start_of_week,
)
from inboxsage.utils.exceptions import ConfigurationError
from inboxsage.utils.logging import get_logger, log_context

logger = get_logger(__name__)

DEFAULT_WEEKLY_DAYS = [1]  # Monday


@dataclass(frozen=True)
class JobTrigger:
    """Fires at minute 0 of the listed hours (scheduler timezone)."""

    hours: FrozenSet[int]

    @classmethod
    def every_hours(cls, interval: int) -> "JobTrigger":
        return cls(frozenset(range(0, 24, interval)))

    @classmethod
    def daily_at(cls, hour: int) -> "JobTrigger":
        return cls(frozenset({hour}))

    def next_fire_time(self, after: datetime, zone: tzinfo) -> datetime:
        """First firing strictly after `after`.

        Args:
            after: Aware reference time.
            zone: Scheduler timezone.

        Returns:
            Aware UTC datetime of the next firing.
        """
        local = after.astimezone(zone).replace(minute=0, second=0, microsecond=0)
        candidate = local.astimezone(after.tzinfo)

        # Two days covers any hour set plus DST shifts
        for _ in range(48):
            candidate += timedelta(hours=1)
            if candidate.astimezone(zone).hour in self.hours:
                return candidate

        raise ValueError(f"Trigger with hours {sorted(self.hours)} never fires")


JOB_TRIGGERS: Dict[JobName, JobTrigger] = {
    JobName.CONTENT_FETCH: JobTrigger.every_hours(2),
    JobName.AI_PROCESSING: JobTrigger.every_hours(4),
    JobName.DAILY_DIGEST: JobTrigger.every_hours(1),
    JobName.WEEKLY_DIGEST: JobTrigger.daily_at(9),
}


class JobScheduler:
    """Owns the four recurring jobs and fans each run out across users.

    Jobs exist from `init()` until `stop_all()`; a registered job is
    reported as running. Each firing runs as its own task, so stopping
    prevents future firings without cancelling work already in flight.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        digest_repository: DigestRepository,
        aggregator: ContentAggregator,
        summarizer: Optional[ArticleSummarizer],
        digest_generator: DigestGenerator,
        enabled: bool = False,
        timezone_name: str = "UTC",
        max_concurrent_users: int = 10,
        ai_batch_size: int = 20,
        clock: Callable[[], datetime] = now_utc,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize scheduler.

        Args:
            user_repository: User enumeration.
            digest_repository: Send-once guard lookups.
            aggregator: Content fetch per user.
            summarizer: Article processing per user (None without an LLM key).
            digest_generator: Digest composition and delivery.
            enabled: Whether `init()` registers the recurring jobs.
            timezone_name: Timezone the cadences and digest periods use.
            max_concurrent_users: Bound on concurrent per-user tasks.
            ai_batch_size: Articles summarized per user per sweep.
            clock: Current-time provider.
            sleep: Coroutine used to wait between firings.

        Raises:
            ConfigurationError: If the timezone is unknown.
        """
        zone = get_timezone(timezone_name)
        if zone is None:
            raise ConfigurationError(f"Unknown scheduler timezone: {timezone_name}")

        self.users = user_repository
        self.digests = digest_repository
        self.aggregator = aggregator
        self.summarizer = summarizer
        self.digest_generator = digest_generator
        self.enabled = enabled
        self.zone = zone
        self.max_concurrent_users = max_concurrent_users
        self.ai_batch_size = ai_batch_size
        self.clock = clock
        self.sleep = sleep

        self._tasks: Dict[str, asyncio.Task] = {}
        self._runs: Set[asyncio.Task] = set()

        self._actions: Dict[JobName, Callable[[], Awaitable[Dict[str, int]]]] = {
            JobName.CONTENT_FETCH: self.run_content_aggregation,
            JobName.AI_PROCESSING: self.run_ai_processing,
            JobName.DAILY_DIGEST: self.check_daily_digests,
            JobName.WEEKLY_DIGEST: self.check_weekly_digests,
        }

    def init(self) -> bool:
        """Register the recurring jobs if enabled.

        Must be called from a running event loop. Calling it again while
        jobs are registered does nothing.

        Returns:
            True if the jobs are registered.
        """
        if not self.enabled:
            logger.info("cron_jobs_disabled")
            return False

        if self._tasks:
            return True

        for job, trigger in JOB_TRIGGERS.items():
            self._tasks[job.value] = asyncio.create_task(
                self._run_timer(job, trigger), name=f"timer:{job.value}"
            )

        logger.info("scheduled_tasks_initialized", jobs=list(self._tasks))
        return True

    def stop_all(self) -> None:
        """Stop future firings of every job; in-flight runs continue."""
        for name, task in self._tasks.items():
            task.cancel()
            logger.info("stopped_task", job=name)
        self._tasks.clear()

    def get_status(self) -> Dict[str, bool]:
        """Job name to running flag, for every registered job.

        A timer task that has died reports False until `stop_all()`.
        """
        return {name: not task.done() for name, task in self._tasks.items()}

    async def wait_for_runs(self) -> None:
        """Wait until every in-flight job run has finished."""
        if self._runs:
            await asyncio.gather(*list(self._runs), return_exceptions=True)

    async def trigger_content_aggregation(self) -> Dict[str, int]:
        """Run the content-fetch job once, now."""
        return await self.run_content_aggregation()

    async def trigger_ai_processing(self) -> Dict[str, int]:
        """Run the ai-processing job once, now."""
        return await self.run_ai_processing()

    async def run_job(self, job: JobName) -> Dict[str, int]:
        """Run any job once, now."""
        return await self._actions[job]()

    async def _run_timer(self, job: JobName, trigger: JobTrigger) -> None:
        fire_at: Optional[datetime] = None
        while True:
            now = self.clock()
            # A clock reading behind the slot that just fired must not re-arm it
            after = now if fire_at is None else max(now, fire_at)
            fire_at = trigger.next_fire_time(after, self.zone)
            await self.sleep(max(0.0, (fire_at - now).total_seconds()))

            run = asyncio.create_task(self._run_logged(job), name=f"run:{job.value}")
            self._runs.add(run)
            run.add_done_callback(self._runs.discard)

    async def _run_logged(self, job: JobName) -> None:
        with log_context(job=job.value):
            logger.info("job_started")
            try:
                stats = await self._actions[job]()
                logger.info("job_completed", **stats)
            except Exception as e:
                logger.error("job_failed", error=str(e))

    async def run_content_aggregation(self) -> Dict[str, int]:
        """Fetch all active sources of every user."""
        return await self._fan_out(
            JobName.CONTENT_FETCH,
            self.users.list_user_ids(),
            self.aggregator.fetch_all_user_content,
        )

    async def run_ai_processing(self) -> Dict[str, int]:
        """Summarize up to the batch size of unprocessed articles for every user."""
        if self.summarizer is None:
            logger.warning("ai_processing_unavailable", reason="no summarizer configured")
            return {"users": 0, "succeeded": 0, "failed": 0}

        async def process(user_id: str) -> None:
            await self.summarizer.process_articles(user_id, self.ai_batch_size)

        return await self._fan_out(JobName.AI_PROCESSING, self.users.list_user_ids(), process)

    async def check_daily_digests(self) -> Dict[str, int]:
        """Send daily digests to users whose local delivery hour is now."""
        now = self.clock()
        since = start_of_day(now.astimezone(self.zone))

        due = [
            user
            for user in self.users.list_users_by_schedule(ScheduleType.DAILY)
            if user.profile is not None and self.should_send_daily(user.profile, now)
        ]
        return await self._send_due(JobName.DAILY_DIGEST, due, since, now)

    async def check_weekly_digests(self) -> Dict[str, int]:
        """Send weekly digests to users whose delivery weekday is today."""
        now = self.clock()
        since = start_of_week(now.astimezone(self.zone))

        due = [
            user
            for user in self.users.list_users_by_schedule(ScheduleType.WEEKLY)
            if user.profile is not None and self.should_send_weekly(user.profile, now)
        ]
        return await self._send_due(JobName.WEEKLY_DIGEST, due, since, now)

    def should_send_daily(self, profile: UserProfile, now: datetime) -> bool:
        """Whether the user's local hour equals their configured hour."""
        hour = local_hour(now, profile.timezone)
        if hour is None:
            logger.warning("unknown_user_timezone", user_id=profile.user_id, timezone=profile.timezone)
            return False
        return hour == profile.time_of_day

    def should_send_weekly(self, profile: UserProfile, now: datetime) -> bool:
        """Whether today (scheduler timezone) is one of the user's weekdays."""
        days = profile.custom_days or DEFAULT_WEEKLY_DAYS
        return js_weekday(now.astimezone(self.zone)) in days

    async def _send_due(
        self,
        job: JobName,
        users: List[User],
        since: datetime,
        now: datetime,
    ) -> Dict[str, int]:
        async def send(user_id: str) -> None:
            if self.digests.has_sent_digest_since(user_id, since):
                logger.debug("digest_already_sent", job=job.value, user_id=user_id)
                return
            await self.digest_generator.create_and_send_digest(user_id, scheduled_for=now)

        return await self._fan_out(job, [user.id for user in users], send)

    async def _fan_out(
        self,
        job: JobName,
        user_ids: Iterable[str],
        action: Callable[[str], Awaitable[object]],
    ) -> Dict[str, int]:
        """Run `action` for every user with bounded concurrency.

        Failures are logged per user and never stop the other users.
        """
        user_ids = list(user_ids)
        semaphore = asyncio.Semaphore(self.max_concurrent_users)

        async def run_one(user_id: str) -> None:
            async with semaphore:
                await action(user_id)

        results = await asyncio.gather(
            *(run_one(user_id) for user_id in user_ids),
            return_exceptions=True,
        )

        failed = 0
        for user_id, result in zip(user_ids, results):
            if isinstance(result, BaseException):
                failed += 1
                logger.error("user_job_failed", job=job.value, user_id=user_id, error=str(result))

        stats = {"users": len(user_ids), "succeeded": len(user_ids) - failed, "failed": failed}
        logger.info("fan_out_completed", job=job.value, **stats)
        return stats
