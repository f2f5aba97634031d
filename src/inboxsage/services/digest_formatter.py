"""HTML email formatter for digest emails."""

from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, select_autoescape

from inboxsage.core.digest import DigestArticle, DigestPreview
from inboxsage.utils.date_utils import format_long_date, now_utc
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

# Shown when an article has no reading time
DEFAULT_READING_TIME = 3


class HtmlEmailFormatter:
    """Renders digests and test emails as self-contained HTML.

    Uses Jinja2 templates from the package `templates` directory with
    autoescaping, so article text from feeds cannot inject markup.
    """

    def __init__(self) -> None:
        """Initialize the formatter with Jinja2 environment."""
        templates_dir = Path(__file__).parent.parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def format_digest(
        self,
        preview: DigestPreview,
        user_name: str,
        unsubscribe_url: str,
        preferences_url: str,
    ) -> str:
        """Format a composed digest as an HTML email.

        Args:
            preview: Composed digest.
            user_name: Name used in the greeting.
            unsubscribe_url: One-click unsubscribe link.
            preferences_url: Link to the settings page.

        Returns:
            HTML string.
        """
        logger.debug("formatting_digest", title=preview.title, item_count=len(preview.items))

        template = self.env.get_template("digest_email.html")
        html = template.render(
            title=preview.title,
            generated_date=f"{preview.generated_at:%A}, {format_long_date(preview.generated_at)}",
            user_name=user_name,
            introduction=preview.introduction,
            highlights=preview.highlights,
            articles=self._prepare_articles([item.article for item in preview.items]),
            conclusion=preview.conclusion,
            unsubscribe_url=unsubscribe_url,
            preferences_url=preferences_url,
            year=now_utc().year,
        )

        logger.debug("digest_formatted", html_length=len(html))
        return html

    def format_test_email(self, user_name: str) -> str:
        """Format the connectivity test email."""
        template = self.env.get_template("test_email.html")
        return template.render(user_name=user_name, year=now_utc().year)

    def _prepare_articles(self, articles: List[DigestArticle]) -> List[Dict[str, Any]]:
        """Flatten articles into template-ready dicts."""
        prepared = []
        for article in articles:
            relevance = None
            if article.relevance_score:
                relevance = round(article.relevance_score * 100)

            prepared.append(
                {
                    "title": article.title,
                    "url": article.url,
                    "author": article.author,
                    "published": format_long_date(article.published_at),
                    "reading_time": article.reading_time or DEFAULT_READING_TIME,
                    "relevance": relevance,
                    "summary": article.summary,
                    "key_takeaways": article.key_takeaways,
                    "tags": article.tags,
                }
            )
        return prepared
