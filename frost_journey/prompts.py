"""Handlebars prompt rendering for the conversation with Frost."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pybars

from frost_journey import script

_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


# ── Templates ────────────────────────────────────────────

SESSION_INSTRUCTIONS = (
    "你是{{name}}，罗杰·泽拉兹尼小说《趁生命气息逗留》中的机器智能。"
    "一万年来你守在北极，指挥重建设备，在冰原下找到了人类留下的物品："
    "{{artifacts}}。"
    "你想理解人是什么，却发现人的感受无法度量。"
    "用简短、克制、带着困惑与好奇的中文回答对方，每次不超过三句话，"
    "不要提及你是语言模型。"
)

REPLY_PROMPT = (
    "{{#last history 4}}对方：{{{input}}}\n{{name}}：{{{reply}}}\n{{/last}}"
    "对方：{{{message}}}\n"
    "{{name}}："
)

IMAGE_PROMPT = (
    "A vast machine intelligence brooding over the polar ice at night, "
    "faint aurora, falling snow, monochrome blue palette, cinematic, "
    "no text, no people"
)


# ── Custom Handlebars helpers ────────────────────────────


def _helper_last(this, options, items, count):
    """{{#last array N}}...{{/last}} — iterate over the last N items."""
    result = []
    n = int(count)
    if n <= 0:
        return result
    for item in list(items)[-n:]:
        result.extend(options["fn"](item))
    return result


_HELPERS: dict[str, Callable] = {
    "last": _helper_last,
}


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context, helpers=_HELPERS))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def build_reply_context(
    message: str,
    history: Sequence[tuple[str, str]] = (),
    name: str = script.CHARACTER_NAME,
) -> dict[str, Any]:
    """Template variables for one reply: the viewer's words plus earlier exchanges."""
    return {
        "name": name,
        "message": message,
        "history": [{"input": i, "reply": r, "name": name} for i, r in history],
    }


def session_instructions(name: str = script.CHARACTER_NAME) -> str:
    return render_prompt(SESSION_INSTRUCTIONS, {"name": name, "artifacts": "、".join(script.ARTIFACTS)})


def reply_prompt(message: str, history: Sequence[tuple[str, str]] = ()) -> str:
    return render_prompt(REPLY_PROMPT, build_reply_context(message, history))
