"""Pattern analyzer: asks the generation backend what the matches share."""

from __future__ import annotations

import json
import logging
import re

from patternshift.core.errors import GenerationError
from patternshift.core.models import PatternAnalysis, PatternMatch
from patternshift.providers.base import TextGenerator

logger = logging.getLogger(__name__)

MAX_SAMPLES = 5
MAX_EXCERPT_CHARS = 500

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n(.*?)```", re.DOTALL)
_LIST_FIELDS = ("common_patterns", "variations", "refactoring_opportunities")


class PatternAnalyzer:
    """Extracts common structure, variations and a strategy from matches."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    def analyze_patterns(self, matches: list[PatternMatch], description: str) -> PatternAnalysis:
        """Issue one generation request and parse the reply.

        Never raises on a bad reply: an unparseable response or a backend
        failure yields :meth:`PatternAnalysis.degraded`.
        """
        samples = sorted(matches, key=lambda m: m.similarity_distance)[:MAX_SAMPLES]
        prompt = self._build_prompt(samples, description)

        try:
            response = self.generator.complete(prompt)
        except GenerationError as e:
            logger.warning("Pattern analysis request failed: %s", e)
            return PatternAnalysis.degraded(f"Analysis unavailable: {e}")

        analysis = parse_analysis(response)
        if not analysis.parsed:
            logger.warning("Could not parse analysis response; continuing with raw text")
        return analysis

    def _build_prompt(self, samples: list[PatternMatch], description: str) -> str:
        blocks = []
        for i, match in enumerate(samples, 1):
            blocks.append(
                f"Pattern {i} ({match.file_path}, distance {match.similarity_distance:.2f}):\n"
                f"```\n{match.content[:MAX_EXCERPT_CHARS]}\n```"
            )
        examples = "\n\n".join(blocks)

        return f"""Analyze these similar code patterns related to: {description}

{examples}

Identify:
1. Common patterns shared by all examples
2. Variations between the examples
3. Refactoring opportunities
4. A suggested approach for refactoring them consistently

Respond with a single JSON object in this exact shape:
{{
  "common_patterns": ["..."],
  "variations": ["..."],
  "refactoring_opportunities": ["..."],
  "suggested_approach": "..."
}}
"""


def parse_analysis(text: str) -> PatternAnalysis:
    """Parse a backend reply, falling back to the degraded record."""
    data = _load_json_object(text)
    if data is None:
        return PatternAnalysis.degraded(text)

    approach = data.get("suggested_approach")
    if not isinstance(approach, str) or not approach.strip():
        approach = text

    return PatternAnalysis(
        common_patterns=_string_list(data.get("common_patterns")),
        variations=_string_list(data.get("variations")),
        refactoring_opportunities=_string_list(data.get("refactoring_opportunities")),
        suggested_approach=approach,
    )


def _load_json_object(text: str) -> dict | None:
    candidates = [text.strip()]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and any(k in data for k in (*_LIST_FIELDS, "suggested_approach")):
            return data
    return None


def _string_list(value) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]
