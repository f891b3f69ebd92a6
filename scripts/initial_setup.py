#!/usr/bin/env python3
"""
Initial Setup Script.

Seeds the topic store with sample student feedback so the insights and
themes endpoints have data on a fresh install. Submissions go through the
regular ingestion flow, so duplicates merge and categories are resolved the
same way as live traffic.
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedback_intel.classifier import CategoryClassifier
from feedback_intel.ingestion import FeedbackIngestor
from feedback_intel.matcher import DuplicateMatcher
from feedback_intel.utils import OllamaClient, load_config, setup_logger
from feedback_intel.utils.storage import TopicStorage

logger = setup_logger(__name__, "logs/initial_setup.log")

SAMPLE_FEEDBACK = [
    ("WiFi issues in hostel", "The hostel wifi drops every evening after 8pm."),
    ("WiFi problem in hostel room", "Internet in my hostel room is too slow to attend online classes."),
    ("Library needs more seats", "During exam week there are never enough seats in the library."),
    ("Professor rarely available", "Our professor misses office hours and does not answer email."),
    ("Mess food quality", "Hostel mess food is cold and repetitive."),
    ("Exam schedule clash", "Two course exams are scheduled at the same time this semester."),
    ("Fee receipt delays", "Fee receipts take weeks to be issued by the accounts office."),
    ("Projector broken in lab", "The projector in the network lab has been broken for a month."),
]


async def seed(config_path: str, offline: bool):
    config = load_config(config_path)
    storage = TopicStorage(config)
    oracle = None if offline or not config.ollama.enabled else OllamaClient.from_config(config.ollama)
    timeout = config.ollama.timeout_seconds

    ingestor = FeedbackIngestor(
        storage=storage,
        matcher=DuplicateMatcher(oracle, timeout_seconds=timeout),
        classifier=CategoryClassifier(oracle, config.engine, timeout_seconds=timeout)
    )

    merged = 0
    for title, description in SAMPLE_FEEDBACK:
        result = await ingestor.submit(title, description)
        merged += int(result.merged)
        logger.info(f"Seeded {title!r} -> {result.category} (merged={result.merged})")

    return len(SAMPLE_FEEDBACK), merged, storage.topics_path


def run_initial_setup():
    """Seed the topic store from the command line."""
    parser = argparse.ArgumentParser(description="Seed the feedback topic store with sample data")
    parser.add_argument("--config", default="config/config.yaml", help="Path to the YAML config")
    parser.add_argument("--offline", action="store_true", help="Skip Ollama, use the keyword heuristic")
    args = parser.parse_args()

    logger.info("=" * 80)
    logger.info("Seeding topic store")
    logger.info("=" * 80)

    try:
        submitted, merged, path = asyncio.run(seed(args.config, args.offline))
    except Exception as e:
        logger.error(f"Error during initial setup: {e}", exc_info=True)
        print(f"\n✗ Error during initial setup: {e}")
        print("  Check logs at: logs/initial_setup.log")
        sys.exit(1)

    print(f"\n✓ Submitted {submitted} sample topics ({merged} merged into existing topics)")
    print(f"  Topic store: {path}")


if __name__ == "__main__":
    run_initial_setup()
