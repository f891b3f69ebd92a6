"""Oracle-backed duplicate detection for new feedback."""
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from feedback_intel.utils.logging_config import setup_logger
from feedback_intel.utils.ollama_client import OracleError, TextOracle, consult_oracle

logger = setup_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a duplicate check."""
    matched: bool
    matched_topic: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.matched:
            return {'matched': True, 'matchedTopic': self.matched_topic}
        return {'matched': False}


NO_MATCH = MatchResult(matched=False)


class DuplicateMatcher:
    """
    Decides whether a new title repeats an existing topic.

    There is no local fallback: any oracle failure or unusable reply is
    reported as "no match", so an outage only ever produces new topics.
    """

    def __init__(self, oracle: Optional[TextOracle], timeout_seconds: float = 10.0):
        self.oracle = oracle
        self.timeout_seconds = timeout_seconds

    def build_prompt(self, new_title: str, existing_titles: Sequence[str]) -> str:
        listing = "\n".join(f"- {title}" for title in existing_titles)
        return (
            "You are clustering university feedback topics.\n\n"
            f"Existing topics:\n{listing}\n\n"
            f"New topic:\n\"{new_title}\"\n\n"
            "Rules:\n"
            "- Reply ONLY in JSON\n"
            "- If similar, reply:\n"
            "  {\"matched\": true, \"matchedTopic\": \"<exact existing topic>\"}\n"
            "- If not similar, reply:\n"
            "  {\"matched\": false}\n"
        )

    def parse_reply(self, reply: str, existing_titles: Sequence[str]) -> MatchResult:
        """Accept a match only if it names one of the existing titles exactly."""
        try:
            parsed = json.loads(reply)
        except ValueError:
            logger.warning(f"Duplicate matcher got non-JSON reply: {reply[:80]!r}")
            return NO_MATCH

        if not isinstance(parsed, dict) or parsed.get('matched') is not True:
            return NO_MATCH

        matched_topic = parsed.get('matchedTopic')
        if not isinstance(matched_topic, str) or matched_topic not in existing_titles:
            logger.warning(f"Duplicate matcher named an unknown topic: {matched_topic!r}")
            return NO_MATCH

        return MatchResult(matched=True, matched_topic=matched_topic)

    async def find_match(self, new_title: str, existing_titles: Sequence[str]) -> MatchResult:
        """
        Check `new_title` against `existing_titles`.

        Args:
            new_title: Title of the incoming submission
            existing_titles: Titles of all stored topics

        Returns:
            MatchResult, never raises for oracle problems
        """
        if not existing_titles:
            return NO_MATCH

        try:
            reply = await consult_oracle(
                self.oracle,
                self.build_prompt(new_title, existing_titles),
                self.timeout_seconds,
                json_mode=True,
                purpose="duplicate match"
            )
        except OracleError:
            return NO_MATCH

        result = self.parse_reply(reply, existing_titles)
        logger.debug(f"Duplicate check for {new_title!r}: {result}")
        return result
