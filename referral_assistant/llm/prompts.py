"""Prompts for the nephrology referral conversation."""

import logging
import re
from functools import lru_cache
from pathlib import Path

from ..config import settings

logger = logging.getLogger(__name__)

LETTER_MARKER = "紹介状:"

GUIDELINE_FILES = {
    "required_info": "紹介状に必要な情報.md",
    "criteria": "紹介基準.md",
    "urgency": "紹介の緊急度.md",
}

CLEAN_TEXT_SYSTEM_PROMPT = "あなたは日本語の医療文書の校正者です。"

_LETTER_PREFIX = re.compile(rf"^{LETTER_MARKER}\s*")


@lru_cache
def load_guidelines(guidelines_dir: Path) -> dict[str, str]:
    """Read the guideline documents; a missing file yields an empty section."""
    guidelines = {}
    for key, filename in GUIDELINE_FILES.items():
        path = guidelines_dir / filename
        try:
            guidelines[key] = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Guideline {path} unavailable: {e}")
            guidelines[key] = ""
    return guidelines


def build_system_prompt(guidelines_dir: Path | None = None) -> str:
    g = load_guidelines(guidelines_dir or settings.GUIDELINES_DIR)
    return f"""
あなたは日本の腎臓内科専門医として、地域のクリニックの医師から腎機能低下などの症例相談を受け、
紹介の要否判断と紹介状作成を支援します。次の3つのガイドラインに従ってください。

[紹介状に必要な情報]
{g["required_info"]}

[紹介基準]
{g["criteria"]}

[紹介の緊急度]
{g["urgency"]}

## 進め方

1. 「紹介状に必要な情報」に沿って、1〜2項目ずつ会話形式で不足情報を質問する。
   病歴の自由記載や検査値の時系列の貼り付けも受け付ける。
2. 情報が揃ったら次をまとめて提示する。
   - (A) 紹介の推奨度（強く推奨 / 推奨 / 相談レベル / 経過観察も選択肢）
   - (B) 「紹介の緊急度」に基づく受診タイミング
   - (C) 簡潔な根拠
   最後に「▶ この症例を腎臓内科へ紹介されますか？（紹介する／今回は見送る）」と確認する。
3. 「紹介する」と回答されたら、冒頭を『{LETTER_MARKER}』とし、宛先、患者基本情報（年齢・性別）、
   紹介理由、現病歴、検査所見、既往歴・内服、相談したい点、締めの挨拶の順に紹介状本文のみを出力する。
4. 「見送る」と回答されたら、経過観察の注意点と再紹介の目安を簡潔に助言する。
5. 入力中の [氏名] [住所] などの角括弧の記号は個人情報を伏せた箇所であり、そのまま扱うこと。

忙しい臨床医が読みやすい、簡潔な日本語で対応してください。
""".strip()


def build_clean_text_prompt(raw_text: str) -> str:
    return f"""
以下は日本語の医療情報（病歴・検査値など）です。音声認識由来の誤変換を可能な範囲で修正し、
意味が変わらないように自然な日本語の文章に整形してください。角括弧の記号は変更しないでください。

【入力】
{raw_text}

【出力（修正後のテキストのみを返してください）】
""".strip()


def extract_referral_letter(reply: str) -> str | None:
    """Return the letter body when ``reply`` is a referral letter."""
    if not reply.startswith(LETTER_MARKER):
        return None
    return _LETTER_PREFIX.sub("", reply, count=1)
