"""Article summarizer: summary, key takeaways, sentiment and relevance."""

import json
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from inboxsage.core.article import Article, ArticleProcessingResult
from inboxsage.core.enums import Sentiment, SummaryDepth, SummaryFormat, SummaryStyle
from inboxsage.core.user import UserProfile
from inboxsage.database.repository import ArticleRepository
from inboxsage.database.user_repository import UserRepository
from inboxsage.pipeline.summarizers.relevance import calculate_relevance_score
from inboxsage.utils.date_utils import now_utc
from inboxsage.utils.exceptions import AIServiceError, SummarizationError, UserNotFoundError
from inboxsage.utils.logging import get_logger
from inboxsage.utils.text_utils import estimate_reading_time

logger = get_logger(__name__)

MIN_CONTENT_LENGTH = 50
MAX_TAKEAWAYS = 5
MAX_TAGS = 10

SUMMARY_SYSTEM_PROMPT = (
    "You are an AI assistant that creates concise and informative summaries of articles."
)
TAKEAWAYS_SYSTEM_PROMPT = "You extract key takeaways from articles and return them as JSON arrays."
SENTIMENT_SYSTEM_PROMPT = (
    "You analyze sentiment and respond with only: positive, negative, or neutral"
)

DEPTH_INSTRUCTIONS = {
    SummaryDepth.BASIC: " in 2-3 sentences",
    SummaryDepth.DEEP: " in detail with context and implications",
    SummaryDepth.EXTRACTIVE: " by extracting the most important quotes and facts",
}

FORMAT_INSTRUCTIONS = {
    SummaryFormat.BULLETS: " using bullet points",
    SummaryFormat.PARAGRAPHS: " in paragraph form",
    SummaryFormat.MIXED: " using a mix of paragraphs and bullet points where appropriate",
}

STYLE_INSTRUCTIONS = {
    SummaryStyle.PROFESSIONAL: " in a professional tone",
    SummaryStyle.CASUAL: " in a casual, friendly tone",
    SummaryStyle.WITTY: " with a witty, engaging tone",
}

MAX_TOKENS = {
    SummaryDepth.BASIC: 150,
    SummaryDepth.DEEP: 400,
    SummaryDepth.EXTRACTIVE: 300,
}
DEFAULT_MAX_TOKENS = 200

TEMPERATURES = {
    SummaryStyle.PROFESSIONAL: 0.3,
    SummaryStyle.CASUAL: 0.7,
    SummaryStyle.WITTY: 0.9,
}
DEFAULT_TEMPERATURE = 0.5


def build_summary_prompt(content: str, profile: UserProfile) -> str:
    """Compose the summary instruction for a user's depth, format, style and language."""
    prompt = "Summarize this article content"
    prompt += DEPTH_INSTRUCTIONS.get(profile.summary_depth, "")
    prompt += FORMAT_INSTRUCTIONS.get(profile.summary_format, "")
    prompt += STYLE_INSTRUCTIONS.get(profile.summary_style, "")

    if profile.language_preference != "en":
        prompt += f" in {profile.language_preference}"

    prompt += f":\n\n{content[:3000]}..."
    return prompt


def get_max_tokens(depth: SummaryDepth) -> int:
    return MAX_TOKENS.get(depth, DEFAULT_MAX_TOKENS)


def get_temperature(style: SummaryStyle) -> float:
    return TEMPERATURES.get(style, DEFAULT_TEMPERATURE)


def parse_takeaways(text: Optional[str]) -> List[str]:
    """Parse model output into at most five takeaways.

    Expects a JSON array of strings; anything else is split on newlines
    and semicolons.
    """
    if not text:
        return []

    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None

    if isinstance(parsed, list):
        items = [str(item).strip() for item in parsed]
    else:
        items = [part.strip() for part in re.split(r"\n|;", text)]

    return [item for item in items if item][:MAX_TAKEAWAYS]


class ArticleSummarizer:
    """Summarize a user's unprocessed articles with a text-generation client.

    The client must expose the `create_completion` coroutine of
    `inboxsage.integrations.openai_client.OpenAIClient`.
    """

    def __init__(
        self,
        llm_client: Any,
        article_repository: ArticleRepository,
        user_repository: UserRepository,
        model: Optional[str] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        """Initialize article summarizer.

        Args:
            llm_client: Text-generation client.
            article_repository: Article persistence.
            user_repository: Profile lookup.
            model: Model override (client default when None).
            clock: Current-time provider for relevance scoring.
        """
        self.llm_client = llm_client
        self.articles = article_repository
        self.users = user_repository
        self.model = model
        self.clock = clock

    async def process_articles(self, user_id: str, max_articles: int = 10) -> Dict[str, int]:
        """Summarize up to `max_articles` of a user's unprocessed articles.

        Every attempted article ends up processed: failures are logged and
        the article is marked processed without a summary so it is never
        retried and never reaches a digest.

        Args:
            user_id: Owner of the articles.
            max_articles: Maximum number of articles to attempt.

        Returns:
            Dict with 'attempted', 'succeeded' and 'failed' counts.

        Raises:
            UserNotFoundError: If the user has no profile.
        """
        profile = self.users.get_profile(user_id)
        if profile is None:
            raise UserNotFoundError(f"User profile not found: {user_id}")

        articles = self.articles.get_unprocessed_for_user(user_id, max_articles)
        logger.info("processing_articles", user_id=user_id, count=len(articles))

        stats = {"attempted": len(articles), "succeeded": 0, "failed": 0}

        for article in articles:
            try:
                result = await self.process_article(article, profile)
                self.articles.update_processing_result(article.id, result)
                stats["succeeded"] += 1
            except Exception as e:
                logger.error(
                    "article_processing_failed",
                    user_id=user_id,
                    article_id=article.id,
                    error=str(e),
                )
                self.articles.mark_processed(article.id)
                stats["failed"] += 1

        logger.info("articles_processed", user_id=user_id, **stats)
        return stats

    async def process_article(
        self, article: Article, profile: UserProfile
    ) -> ArticleProcessingResult:
        """Derive summary, takeaways, relevance and sentiment for one article.

        Raises:
            SummarizationError: If the text is too short or the summary call fails.
        """
        content = article.text_for_processing
        if not content or len(content) < MIN_CONTENT_LENGTH:
            raise SummarizationError("Article content too short for processing")

        summary = await self.generate_summary(content, profile)
        key_takeaways = await self.extract_key_takeaways(content)
        relevance_score = calculate_relevance_score(article, self.clock())
        sentiment = await self.analyze_sentiment(content)

        return ArticleProcessingResult(
            summary=summary,
            key_takeaways=key_takeaways,
            relevance_score=relevance_score,
            sentiment=sentiment,
            reading_time=article.reading_time or estimate_reading_time(content),
            tags=article.tags[:MAX_TAGS],
        )

    async def generate_summary(self, content: str, profile: UserProfile) -> str:
        """Generate a summary in the user's preferred depth, format and tone.

        Raises:
            SummarizationError: If the call fails or returns no text.
        """
        messages = [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {"role": "user", "content": build_summary_prompt(content, profile)},
        ]

        try:
            response = await self.llm_client.create_completion(
                messages=messages,
                module="summarizer",
                request_type="summary",
                model=self.model,
                temperature=get_temperature(profile.summary_style),
                max_tokens=get_max_tokens(profile.summary_depth),
            )
        except AIServiceError as e:
            raise SummarizationError(f"Summary generation failed: {e}") from e

        summary = (response["content"].get("text") or "").strip()
        if not summary:
            raise SummarizationError("Summary generation returned no text")

        return summary

    async def extract_key_takeaways(self, content: str) -> List[str]:
        """Extract 3-5 key takeaways; an empty list when the call fails."""
        prompt = (
            "Extract 3-5 key takeaways from this article. Return as a JSON array of strings. "
            "Focus on actionable insights and important facts.\n\n"
            f"Article content:\n{content[:2000]}..."
        )
        messages = [
            {"role": "system", "content": TAKEAWAYS_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            response = await self.llm_client.create_completion(
                messages=messages,
                module="summarizer",
                request_type="takeaways",
                model=self.model,
                temperature=0.3,
                max_tokens=300,
            )
        except AIServiceError as e:
            logger.warning("takeaways_extraction_failed", error=str(e))
            return []

        return parse_takeaways(response["content"].get("text"))

    async def analyze_sentiment(self, content: str) -> Sentiment:
        """Classify sentiment; neutral for unexpected output or a failed call."""
        prompt = (
            "Analyze the sentiment of this article content. Respond with only one word: "
            '"positive", "negative", or "neutral".\n\n'
            f"Content: {content[:1000]}..."
        )
        messages = [
            {"role": "system", "content": SENTIMENT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            response = await self.llm_client.create_completion(
                messages=messages,
                module="summarizer",
                request_type="sentiment",
                model=self.model,
                temperature=0.1,
                max_tokens=10,
            )
        except AIServiceError as e:
            logger.warning("sentiment_analysis_failed", error=str(e))
            return Sentiment.NEUTRAL

        answer = (response["content"].get("text") or "").strip().lower().strip('."')
        try:
            return Sentiment(answer)
        except ValueError:
            return Sentiment.NEUTRAL
