"""OpenAI API client with cost tracking."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from inboxsage.database.connection import DatabaseConnection
from inboxsage.utils.date_utils import now_utc, to_db_datetime
from inboxsage.utils.exceptions import AIServiceError, ConfigurationError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_PRICING_MODEL = "gpt-4o-mini"

# USD per token
PRICING = {
    "gpt-4o-mini": {"input": 0.150 / 1_000_000, "output": 0.600 / 1_000_000},
    "gpt-4o": {"input": 2.50 / 1_000_000, "output": 10.00 / 1_000_000},
    "gpt-3.5-turbo": {"input": 0.50 / 1_000_000, "output": 1.50 / 1_000_000},
}


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """Price a call in USD; unknown models are priced as gpt-4o-mini."""
    rates = PRICING.get(model)
    if rates is None:
        logger.warning("unknown_model_pricing", model=model)
        rates = PRICING[FALLBACK_PRICING_MODEL]

    return round(input_tokens * rates["input"] + output_tokens * rates["output"], 6)


@dataclass
class ApiCallRecord:
    """One text-generation call, as stored in api_calls."""

    module: str
    model: str
    request_type: str
    started_at: datetime = field(default_factory=now_utc)
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0
    success: bool = False
    error_message: Optional[str] = None

    def usage(self) -> Dict[str, Any]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "cost": self.cost,
        }


class OpenAIClient:
    """Chat completions for the summarizer, with per-call cost tracking.

    Every call, successful or not, is written to the api_calls table when a
    database is attached; `inboxsage status` reads it back through
    get_usage_summary.
    """

    def __init__(
        self,
        api_key: Optional[str],
        db: Optional[DatabaseConnection] = None,
        default_model: str = "gpt-4o-mini",
        timeout: float = 60.0,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key.
            db: Database connection for cost tracking (optional).
            default_model: Model used when a call does not name one.
            timeout: Request timeout in seconds.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self.db = db
        self.default_model = default_model

    async def create_completion(
        self,
        messages: List[Dict[str, str]],
        module: str,
        request_type: str,
        model: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Run one chat completion.

        Args:
            messages: Chat messages with 'role' and 'content'.
            module: Calling module, for tracking (e.g. "summarizer").
            request_type: Kind of request (e.g. "summary", "sentiment").
            model: Model override.
            temperature: Sampling temperature.
            max_tokens: Completion token cap.

        Returns:
            {"content": {"text": ...}, "usage": {...}}

        Raises:
            AIServiceError: If the API call fails.
        """
        record = ApiCallRecord(
            module=module,
            model=model or self.default_model,
            request_type=request_type,
        )
        request: Dict[str, Any] = {
            "model": record.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            request["max_tokens"] = max_tokens

        logger.debug("openai_request", model=record.model, module=module, request_type=request_type)

        try:
            response = await self.client.chat.completions.create(**request)
        except Exception as e:
            record.error_message = str(e)
            self._track_api_call(record)
            logger.error(
                "openai_request_failed",
                model=record.model,
                module=module,
                request_type=request_type,
                error=str(e),
            )
            raise AIServiceError(f"OpenAI API call failed: {e}") from e

        if response.usage:
            record.input_tokens = response.usage.prompt_tokens
            record.output_tokens = response.usage.completion_tokens
            record.total_tokens = response.usage.total_tokens
        record.cost = calculate_cost(record.model, record.input_tokens, record.output_tokens)
        record.success = True
        self._track_api_call(record)

        text = response.choices[0].message.content if response.choices else None
        logger.debug("openai_response_success", **record.usage())

        return {"content": {"text": text}, "usage": record.usage()}

    def _track_api_call(self, record: ApiCallRecord) -> None:
        """Store a call record; tracking problems are logged, never raised."""
        if self.db is None:
            return

        row = asdict(record)
        try:
            self.db.execute(
                """
                INSERT INTO api_calls (
                    module, model, request_type,
                    input_tokens, output_tokens, total_tokens, cost,
                    success, error_message, created_at, completed_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    row["module"],
                    row["model"],
                    row["request_type"],
                    row["input_tokens"],
                    row["output_tokens"],
                    row["total_tokens"],
                    row["cost"],
                    int(row["success"]),
                    row["error_message"],
                    to_db_datetime(record.started_at),
                    to_db_datetime(now_utc()),
                ),
            )
            self.db.commit()
        except Exception as e:
            logger.error("failed_to_track_api_call", error=str(e))


def get_usage_summary(db: DatabaseConnection, since: datetime) -> Dict[str, Any]:
    """Aggregate recorded API calls since a point in time.

    Args:
        db: Database connection.
        since: Lower bound on call start time.

    Returns:
        Dict with 'calls', 'failed', 'total_tokens' and 'cost'.
    """
    row = db.execute(
        """
        SELECT COUNT(*) AS calls,
               COALESCE(SUM(CASE WHEN success = 0 THEN 1 ELSE 0 END), 0) AS failed,
               COALESCE(SUM(total_tokens), 0) AS total_tokens,
               COALESCE(SUM(cost), 0.0) AS cost
        FROM api_calls
        WHERE created_at >= ?
        """,
        (to_db_datetime(since),),
    ).fetchone()

    return {
        "calls": row["calls"],
        "failed": row["failed"],
        "total_tokens": row["total_tokens"],
        "cost": round(row["cost"], 6),
    }
