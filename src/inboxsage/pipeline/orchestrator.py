"""Pipeline orchestrator: wires repositories, clients and pipeline stages."""

from datetime import datetime
from typing import Any, Callable, Optional

from inboxsage.core.config import Config
from inboxsage.database.connection import DatabaseConnection
from inboxsage.database.digest_repository import DigestRepository
from inboxsage.database.repository import ArticleRepository
from inboxsage.database.source_repository import SourceRepository
from inboxsage.database.user_repository import UserRepository
from inboxsage.integrations.openai_client import OpenAIClient
from inboxsage.integrations.resend_client import ResendClient
from inboxsage.pipeline.aggregator import ContentAggregator
from inboxsage.pipeline.collectors import create_collector
from inboxsage.pipeline.generators import DigestGenerator
from inboxsage.pipeline.scheduler import JobScheduler
from inboxsage.pipeline.summarizers import ArticleSummarizer
from inboxsage.services.digest_formatter import HtmlEmailFormatter
from inboxsage.services.email_service import EmailService, Mailer
from inboxsage.utils.date_utils import now_utc
from inboxsage.utils.exceptions import ConfigurationError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)


class PipelineOrchestrator:
    """Builds every pipeline component from configuration.

    The text-generation and mail clients are optional: without credentials
    the corresponding stages raise ConfigurationError when used, while
    fetching and previews keep working.
    """

    def __init__(
        self,
        config: Config,
        db: DatabaseConnection,
        llm_client: Optional[Any] = None,
        mailer: Optional[Mailer] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        """Initialize pipeline orchestrator.

        Args:
            config: Application configuration.
            db: Database connection.
            llm_client: Text-generation client (built from config when omitted).
            mailer: Mail provider client (built from config when omitted).
            clock: Current-time provider shared by all stages.
        """
        self.config = config
        self.db = db
        self.clock = clock

        # Repositories
        self.user_repository = UserRepository(db)
        self.source_repository = SourceRepository(db)
        self.article_repository = ArticleRepository(db)
        self.digest_repository = DigestRepository(db)

        # External clients
        self.llm_client = llm_client or self._build_llm_client()
        self.mailer = mailer or self._build_mailer()

        # Stages
        self.aggregator = ContentAggregator(
            source_repository=self.source_repository,
            article_repository=self.article_repository,
            collector_factory=lambda source: create_collector(
                source, timeout=config.request_timeout_sec
            ),
            clock=clock,
        )

        self.summarizer: Optional[ArticleSummarizer] = None
        if self.llm_client is not None:
            self.summarizer = ArticleSummarizer(
                llm_client=self.llm_client,
                article_repository=self.article_repository,
                user_repository=self.user_repository,
                model=config.openai_model,
                clock=clock,
            )

        self.email_service: Optional[EmailService] = None
        if self.mailer is not None:
            self.email_service = EmailService(
                mailer=self.mailer,
                formatter=HtmlEmailFormatter(),
                from_address=config.email_from,
                test_from_address=config.test_email_from,
                unsubscribe_base_url=config.unsubscribe_base_url,
                preferences_url=config.preferences_url,
            )

        self.digest_generator = DigestGenerator(
            user_repository=self.user_repository,
            article_repository=self.article_repository,
            digest_repository=self.digest_repository,
            email_service=self.email_service,
            lookback_days=config.digest_lookback_days,
            clock=clock,
        )

        logger.info(
            "orchestrator_initialized",
            summarization_enabled=self.summarizer is not None,
            email_enabled=self.email_service is not None,
        )

    def _build_llm_client(self) -> Optional[OpenAIClient]:
        if not self.config.openai_api_key:
            logger.warning("openai_not_configured")
            return None
        return OpenAIClient(
            api_key=self.config.openai_api_key,
            db=self.db,
            default_model=self.config.openai_model,
        )

    def _build_mailer(self) -> Optional[ResendClient]:
        if not self.config.resend_api_key:
            logger.warning("resend_not_configured")
            return None
        return ResendClient(
            api_key=self.config.resend_api_key,
            base_url=self.config.resend_base_url,
            timeout=self.config.request_timeout_sec,
        )

    def require_summarizer(self) -> ArticleSummarizer:
        """The summarizer, or ConfigurationError when no LLM key is set."""
        if self.summarizer is None:
            raise ConfigurationError("OPENAI_API_KEY is not configured")
        return self.summarizer

    def build_scheduler(self, enabled: Optional[bool] = None) -> JobScheduler:
        """Create the job coordinator over this orchestrator's stages.

        Args:
            enabled: Overrides ENABLE_CRON_JOBS when given.
        """
        return JobScheduler(
            user_repository=self.user_repository,
            digest_repository=self.digest_repository,
            aggregator=self.aggregator,
            summarizer=self.summarizer,
            digest_generator=self.digest_generator,
            enabled=self.config.enable_cron_jobs if enabled is None else enabled,
            timezone_name=self.config.scheduler_timezone,
            max_concurrent_users=self.config.max_concurrent_users,
            ai_batch_size=self.config.ai_batch_size,
            clock=self.clock,
        )
