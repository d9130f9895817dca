import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class JournalConfig(AppConfig):
    name = "journal"
    verbose_name = "Journal Insights"

    def ready(self):
        # Invalid JOURNAL_INSIGHTS overrides raise here, at startup
        from journal.utils.config import InsightContext
        context = InsightContext.from_settings()
        logger.debug(
            f"Insight engine configured: energy floor {context.energy_high_threshold}, "
            f"stress floor {context.stress_high_threshold}, cache TTL {context.cache_ttl_ms}ms"
        )
