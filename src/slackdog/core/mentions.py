# src/slackdog/core/mentions.py

from __future__ import annotations

import re

MENTION_RE = re.compile(r"<@([A-Z0-9]+)>")


def extract_user_ids(text: str | None) -> list[str]:
    """
    User ids mentioned as <@U123> tokens, left to right.

    Duplicates are kept: a user mentioned twice gets two DMs.
    """
    if not text:
        return []
    return MENTION_RE.findall(text)
