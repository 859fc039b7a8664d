import json
import logging
import re
from typing import List, Optional

from domain.policies import DRAFT_COUNT, FALLBACK_DRAFT

logger = logging.getLogger(__name__)

_EMBEDDED_JSON_RE = re.compile(r'\{[\s\S]*"drafts"[\s\S]*\}')
_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def _clean(items, limit: int = DRAFT_COUNT) -> List[str]:
    # 앞에서 limit 개 → trim → 빈값 제거
    return [s for s in (str(x).strip() for x in list(items)[:limit]) if s]


def _drafts_from_json(text: str) -> Optional[List[str]]:
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        return None
    if isinstance(parsed, dict) and isinstance(parsed.get("drafts"), list):
        return _clean(parsed["drafts"])
    return None


def extract_drafts(raw_text: str) -> List[str]:
    """
    Provider text -> 0..3 non-empty drafts.
      1) strict JSON {"drafts": [...]}
      2) JSON-like span containing "drafts" inside surrounding text
      3) blank-line separated blocks
    """
    text = raw_text or ""

    drafts = _drafts_from_json(text)
    if drafts is not None:
        return drafts

    logger.warning("draft JSON parse failed, using fallback extraction")

    m = _EMBEDDED_JSON_RE.search(text)
    if m:
        drafts = _drafts_from_json(m.group(0))
        if drafts is not None:
            return drafts

    blocks = [b.strip() for b in _BLANK_LINE_RE.split(text)]
    return [b for b in blocks if b][:DRAFT_COUNT]


def pad_drafts(outputs, count: int = DRAFT_COUNT) -> List[str]:
    """
    결과 개수 정확히 맞추기:
      - 공백/빈값 제거
      - 많으면 앞에서 count개만
      - 모자라면 고정 fallback 문장으로 채움
    """
    out = [(o or "").strip() for o in (outputs or []) if (o or "").strip()][:count]
    while len(out) < count:
        out.append(FALLBACK_DRAFT)
    return out
