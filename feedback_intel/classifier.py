"""Category classification: oracle first, keyword heuristic when it fails."""
from typing import Optional

from feedback_intel.utils.config import FALLBACK_CATEGORY, EngineConfig
from feedback_intel.utils.logging_config import setup_logger
from feedback_intel.utils.ollama_client import OracleError, TextOracle, consult_oracle

logger = setup_logger(__name__)


class CategoryClassifier:
    """Maps a (title, description) pair onto the category taxonomy."""

    def __init__(
        self,
        oracle: Optional[TextOracle],
        config: EngineConfig = None,
        timeout_seconds: float = 10.0
    ):
        """
        Initialize the classifier.

        Args:
            oracle: Text oracle, or None to always use the heuristic
            config: Engine configuration (categories, keyword families)
            timeout_seconds: Deadline for the oracle call
        """
        self.oracle = oracle
        self.config = config or EngineConfig()
        self.timeout_seconds = timeout_seconds

    def build_prompt(self, title: str, description: str) -> str:
        return (
            "Classify this student feedback into ONE category only.\n\n"
            "Categories:\n"
            f"{', '.join(self.config.categories)}\n\n"
            f"Topic:\n\"{title}\"\n\n"
            f"Description:\n\"{description}\"\n\n"
            "Rules:\n"
            "- Reply ONLY with the category name\n"
            f"- If unsure, reply \"{FALLBACK_CATEGORY}\"\n"
        )

    async def classify_with_oracle(self, title: str, description: str) -> str:
        """
        Ask the oracle for a category.

        An out-of-taxonomy reply yields the fallback category.

        Raises:
            OracleError: If the oracle call itself fails
        """
        reply = await consult_oracle(
            self.oracle,
            self.build_prompt(title, description),
            self.timeout_seconds,
            purpose="category classification"
        )
        if reply in self.config.categories:
            return reply

        logger.info(f"Oracle category reply {reply[:40]!r} is not a known category, using {FALLBACK_CATEGORY}")
        return FALLBACK_CATEGORY

    def classify_by_keywords(self, description: Optional[str]) -> str:
        """Local heuristic: first keyword family found in the description wins."""
        text = (description or "").lower()
        for category, keywords in self.config.keyword_families:
            if any(keyword in text for keyword in keywords):
                return category
        return FALLBACK_CATEGORY

    async def classify(self, title: str, description: str) -> str:
        """
        Resolve the category of a submission.

        The keyword heuristic only runs when the oracle call fails, not when
        the oracle answers with the fallback category.
        """
        try:
            category = await self.classify_with_oracle(title, description)
            logger.debug(f"Oracle classified submission as {category}")
            return category
        except OracleError:
            category = self.classify_by_keywords(description)
            logger.info(f"Oracle unavailable, keyword heuristic classified submission as {category}")
            return category
