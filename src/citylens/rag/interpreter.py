"""Response interpreter: split model output into answer text and chart payload.

The completion service is asked for a JSON object when a chart is wanted but
is not obliged to produce one. Interpretation therefore never fails:

  1. Take the span from the first ``{`` to the last ``}`` (greedy, not a
     balanced-brace scan; ``json.loads`` does the real validation).
  2. Strip markdown code fences from the span and parse it strictly.
  3. Accept the object only if it has a ``message``, ``answer`` or ``chart``
     field; otherwise the whole raw text is the answer.

Known limitation: a ``}`` in trailing prose after the object widens the span
and makes the parse fail, so the raw text is returned.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

from citylens.db.models import ChartData

logger = logging.getLogger("citylens.rag")

DEFAULT_ANSWER = "Análise realizada:"

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_ANSWER_FIELDS = ("message", "answer", "chart")


@dataclass
class Interpretation:
    answer_text: str
    chart: ChartData | None = None


def interpret(raw_text: str) -> Interpretation:
    """Interpret *raw_text* from the completion service. Never raises."""
    parsed = _parse_candidate(raw_text)
    if parsed is None or not any(key in parsed for key in _ANSWER_FIELDS):
        return Interpretation(answer_text=raw_text)

    answer = parsed.get("message") or parsed.get("answer") or DEFAULT_ANSWER
    chart_raw = parsed.get("chart")
    chart = ChartData.from_dict(chart_raw) if isinstance(chart_raw, dict) else None
    return Interpretation(answer_text=str(answer), chart=chart)


def _parse_candidate(raw_text: str) -> dict | None:
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end < start:
        return None
    candidate = _FENCE_RE.sub("", raw_text[start : end + 1])
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.debug("JSON-like block in response failed to parse: %s", exc)
        return None
    return parsed if isinstance(parsed, dict) else None
