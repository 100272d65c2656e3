"""Telegram response templates (HTML parse mode)."""

from __future__ import annotations

import html

from xpbot.core.ranking import Podium, RankSummary, RankSummaryKind
from xpbot.models.event import DisplayIdentity

LANGS = ("en", "ja")
MEDALS = ("🥇", "🥈", "🥉")


def resolve_lang(raw: str) -> str:
    lang = (raw or "").strip().lower()
    if lang in LANGS:
        return lang
    return "en"


def _is_ja(lang: str) -> bool:
    return resolve_lang(lang) == "ja"


def _name(user: DisplayIdentity) -> str:
    return html.escape(user.first_name or "")


def start_text(lang: str = "en") -> str:
    if _is_ja(lang):
        return (
            "XP Bot です。グループに追加すると、メンバーのメッセージ数 (XP) を記録します。\n"
            "コマンド:\n"
            " - /xp 自分のXPと順位を表示\n"
            " - /ranks 上位3名を表示"
        )
    return (
        "Hi, I'm XP Bot. Add me to a group and I will track users' message count (XP). "
        "Available commands:\n"
        " - /xp displays the XP count and rank of the user\n"
        " - /ranks displays the top 3"
    )


def private_xp_text(lang: str = "en") -> str:
    if _is_ja(lang):
        return "プライベートチャットではXPを獲得できません。"
    return "Sorry, you can't gain XP in private chats."


def private_ranks_text(lang: str = "en") -> str:
    if _is_ja(lang):
        return "グループに追加してください。"
    return "Please add me to a group."


def not_enough_xp_text(lang: str = "en") -> str:
    if _is_ja(lang):
        return " さん、XPが足りないためこの投稿はできません。会話してXPを貯めましょう 😉"
    return " Sorry, but you don't have enough XP to send that. You can earn XP by talking 😉"


def rank_summary_text(summary: RankSummary, lang: str = "en") -> str:
    """Return the message body; every kind except PRIVATE_CHAT is sent as a mention suffix."""
    ja = _is_ja(lang)
    kind = summary.kind

    if kind == RankSummaryKind.PRIVATE_CHAT:
        return private_xp_text(lang)

    if kind == RankSummaryKind.NOT_RANKED:
        return " さん、まだランク外です 👶" if ja else ", you're not ranked yet 👶"

    if kind == RankSummaryKind.RANK_ONLY:
        if ja:
            return f" さんの順位は {summary.rank} / {summary.total} です。"
        return f", your rank is {summary.rank} / {summary.total}."

    head = (
        f" さん: {summary.score} XP  ◎  順位 {summary.rank} / {summary.total}"
        if ja
        else f", you have {summary.score} XP  ◎  Rank {summary.rank} / {summary.total}"
    )
    if kind == RankSummaryKind.TOP_OF_LEADERBOARD:
        return f"{head}  ◎  𝙺𝚒𝚗𝚐 𝙽𝙸𝙼𝙸𝚀 👑"

    rival = summary.rival or DisplayIdentity(user_id=0, first_name="???")
    if ja:
        return f"{head}  ◎  あと {summary.gap} XP で {_name(rival)} さんを抜けます!"
    return f"{head}  ◎  {summary.gap} to beat {_name(rival)}!"


def podium_text(podium: Podium, lang: str = "en") -> str:
    if podium.private_chat:
        return private_ranks_text(lang)
    lines = []
    for entry, medal in zip(podium.entries, MEDALS):
        lines.append(f"{medal} {_name(entry.user)}: {entry.score} XP")
    return "\n".join(lines)
