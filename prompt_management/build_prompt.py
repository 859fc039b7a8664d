# build_prompt.py
from __future__ import annotations

from domain.policies import DRAFT_COUNT, DRAFT_WORD_BUDGET
from domain.schema import Tone, LANGUAGE_AUTO
from prompt_management import templates


def _normalize_lang(lang: str | None) -> str:
    """
    "", None, "auto", "Auto" -> "auto"; anything else is kept verbatim
    so the provider sees the caller's own spelling ("French", "pt-BR").
    """
    raw = (lang or "").strip()
    if not raw or raw.lower() == LANGUAGE_AUTO:
        return LANGUAGE_AUTO
    return raw


def build_system_prompt(tone: Tone | str, language: str | None = LANGUAGE_AUTO) -> str:
    """
    Deterministic system instruction for the completion provider.
    Same (tone, language) always renders the same string.
    """
    tone_value = tone.value if isinstance(tone, Tone) else str(tone)
    lang = _normalize_lang(language)

    rules = "\n".join(
        f"- {rule}"
        for rule in templates.GUARDRAILS
    ).format(word_budget=DRAFT_WORD_BUDGET, tone=tone_value.lower())

    output_format = templates.OUTPUT_FORMAT
    language_line = "" if lang == LANGUAGE_AUTO else templates.LANGUAGE_DIRECTIVE.format(language=lang)

    return templates.SYSTEM_PROMPT.format(
        count=DRAFT_COUNT,
        rules=rules,
        output_format=output_format,
        language_line=language_line,
    ).strip()
