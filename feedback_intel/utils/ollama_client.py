"""Ollama client utilities used as the engine's text oracle."""
import asyncio
from typing import Optional

import httpx

from feedback_intel.utils.logging_config import setup_logger

logger = setup_logger(__name__)


class OracleError(RuntimeError):
    """The oracle could not produce a usable reply."""


class TextOracle:
    """Single-shot text completion service consulted by the engine."""

    async def complete(self, prompt: str, timeout_seconds: float, json_mode: bool = False) -> str:
        raise NotImplementedError


class OllamaClient(TextOracle):
    """Oracle backed by the Ollama local generate API."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "gemma:2b",
        temperature: float = 0.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the Ollama client.

        Args:
            base_url: Ollama server URL
            model: Model identifier sent with every request
            temperature: Sampling temperature
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.temperature = temperature
        self._transport = transport

    @classmethod
    def from_config(cls, ollama_config) -> "OllamaClient":
        return cls(
            base_url=ollama_config.base_url,
            model=ollama_config.model,
            temperature=ollama_config.temperature,
        )

    async def complete(self, prompt: str, timeout_seconds: float, json_mode: bool = False) -> str:
        """
        Send one non-streaming generate request.

        Args:
            prompt: Prompt text
            timeout_seconds: Per-request timeout
            json_mode: Ask Ollama to constrain the reply to JSON

        Returns:
            The stripped "response" field

        Raises:
            OracleError: On transport errors, non-2xx status or a malformed body
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.temperature}
        }
        if json_mode:
            payload["format"] = "json"

        try:
            async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise OracleError(f"Ollama returned {e.response.status_code}: {e.response.text[:200]}") from e
        except httpx.HTTPError as e:
            raise OracleError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise OracleError(f"Ollama returned a non-JSON body: {e}") from e

        raw = data.get("response") if isinstance(data, dict) else None
        if not isinstance(raw, str):
            raise OracleError("Ollama reply has no 'response' text")
        return raw.strip()


async def consult_oracle(
    oracle: Optional[TextOracle],
    prompt: str,
    timeout_seconds: float,
    json_mode: bool = False,
    purpose: str = "oracle"
) -> str:
    """
    Make exactly one bounded oracle call.

    Every failure mode (no oracle configured, timeout, transport or protocol
    error, unexpected exception) is reported as OracleError so callers have a
    single fallback branch.

    Args:
        oracle: Oracle to consult, or None when disabled
        prompt: Prompt text
        timeout_seconds: Hard deadline for the whole call
        json_mode: Request a JSON reply
        purpose: Label used in log messages

    Returns:
        The oracle reply with surrounding whitespace removed
    """
    if oracle is None:
        raise OracleError(f"{purpose}: no oracle configured")

    try:
        reply = await asyncio.wait_for(
            oracle.complete(prompt, timeout_seconds, json_mode=json_mode),
            timeout=timeout_seconds
        )
    except asyncio.TimeoutError as e:
        logger.warning(f"{purpose}: oracle timed out after {timeout_seconds}s")
        raise OracleError(f"{purpose}: timed out") from e
    except OracleError as e:
        logger.warning(f"{purpose}: oracle failed: {e}")
        raise
    except Exception as e:
        logger.warning(f"{purpose}: oracle raised {type(e).__name__}: {e}")
        raise OracleError(f"{purpose}: {e}") from e

    if not isinstance(reply, str):
        logger.warning(f"{purpose}: oracle returned {type(reply).__name__}, expected text")
        raise OracleError(f"{purpose}: reply is not text")
    return reply.strip()
