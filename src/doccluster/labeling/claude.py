"""Claude-backed cluster label generator."""

import json
import logging
import re
from typing import Any

from ..errors import LabelGenerationError
from .base import LabelGenerator
from .prompts import CLUSTER_LABEL_PROMPT, CLUSTER_LABEL_SYSTEM

logger = logging.getLogger(__name__)


class ClaudeLabelGenerator(LabelGenerator):
    """Names clusters with the Anthropic Messages API."""

    def __init__(self, config: dict[str, Any], client=None):
        labeling_cfg = config.get("labeling", {})
        self.model = config.get("claude_model", "claude-sonnet-4-20250514")
        self.max_tokens = labeling_cfg.get("max_tokens", 500)
        self.temperature = labeling_cfg.get("temperature", 0.3)

        if client is None:
            api_key = config.get("claude_api_key")
            if not api_key:
                raise ValueError("Claude API key required for labeling. Set ANTHROPIC_API_KEY or claude_api_key in config.")

            import anthropic
            client = anthropic.Anthropic(
                api_key=api_key,
                timeout=labeling_cfg.get("timeout", 30.0),
                max_retries=labeling_cfg.get("max_retries", 2),
            )
        self.client = client

    def generate_label(self, documents: list[dict[str, Any]]) -> dict[str, Any]:
        prompt = CLUSTER_LABEL_PROMPT.format(documents=json.dumps(documents, indent=2, ensure_ascii=False))
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=CLUSTER_LABEL_SYSTEM,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.content:
            raise LabelGenerationError("Empty response from Claude")

        text = response.content[0].text
        logger.debug(f"Label reply ({len(text)} chars) from {self.model}")
        return parse_json_response(text)


def parse_json_response(text: str) -> dict:
    """Extract a JSON object from a model reply, handling markdown code blocks."""
    text = text.strip()
    candidates = [text]

    # ```json ... ``` or ``` ... ```
    match = re.search(r"```(?:json)?\s*\n?(.*?)\n?\s*```", text, re.DOTALL)
    if match:
        candidates.append(match.group(1).strip())

    # First { ... } block
    match = re.search(r"\{.*\}", text, re.DOTALL)
    if match:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise LabelGenerationError(f"Could not parse label reply: {text[:100]!r}")


def get_label_generator(config: dict[str, Any]) -> LabelGenerator | None:
    """Return the configured label generator, or None to use fallback labels."""
    if not config.get("labeling", {}).get("enabled", True):
        return None
    try:
        return ClaudeLabelGenerator(config)
    except ValueError as e:
        logger.warning(f"Cluster labeling disabled: {e}")
        return None
