"""Ordered redaction rules for Japanese and Western clinical free text."""

import enum
import re
from dataclasses import dataclass


class RedactionCategory(str, enum.Enum):
    """PII categories recognised by the rule set."""

    EMAIL = "email"
    PHONE = "phone"
    POSTAL_CODE = "postal_code"
    DATE_OF_BIRTH = "date_of_birth"
    NAME = "name"
    ADDRESS = "address"
    IDENTIFIER = "identifier"


MARKERS = {
    RedactionCategory.EMAIL: "[メール]",
    RedactionCategory.PHONE: "[電話]",
    RedactionCategory.POSTAL_CODE: "[郵便番号]",
    RedactionCategory.DATE_OF_BIRTH: "[生年月日]",
    RedactionCategory.NAME: "[氏名]",
    RedactionCategory.ADDRESS: "[住所]",
    RedactionCategory.IDENTIFIER: "[ID]",
}
AGE_MARKER = "[年齢]"


@dataclass(frozen=True)
class RedactionRule:
    """A compiled matcher and the template that replaces each match.

    Templates may reference capture groups (``\\1``) to keep a label such as
    ``氏名:`` while only the value is replaced.
    """

    name: str
    category: RedactionCategory
    pattern: re.Pattern
    replacement: str

    def apply(self, text: str) -> tuple[str, int]:
        """Return (new_text, number_of_replacements)."""
        return self.pattern.subn(self.replacement, text)


# Character classes
DIGIT = r"[0-9０-９]"
HYPHEN = r"[-‐－−ー]"
KANJI = r"一-鿿㐀-䶿々〆ヶ"
KATAKANA = r"ァ-ヺー"


# --- Email ---

_AT = r"(?:@|＠|\s*[(\[（]\s*at\s*[)\]）]\s*|[ \t]+at[ \t]+)"
_DOT = r"(?:\.|．|\s*[(\[（]\s*dot\s*[)\]）]\s*|[ \t]+dot[ \t]+)"

EMAIL_PATTERN = re.compile(
    rf"[A-Za-z0-9._%+\-]+{_AT}[A-Za-z0-9\-]+(?:{_DOT}[A-Za-z0-9\-]+)*{_DOT}[A-Za-z]{{2,}}",
    re.IGNORECASE,
)


# --- Phone ---

_PHONE_LABELS = r"電話番号|電話|携帯|連絡先|TEL|Tel|tel|FAX|Fax|fax"

PHONE_LABELED_PATTERN = re.compile(
    rf"(?<![A-Za-z])({_PHONE_LABELS})([ \t]*[:：]?[ \t]*)"
    rf"([+＋]?[(（]?{DIGIT}(?:[-‐－−ー()（）]?{DIGIT}){{5,14}})"
)
PHONE_INTERNATIONAL_PATTERN = re.compile(
    rf"(?<!{DIGIT})[+＋]{DIGIT}{{1,3}}(?:[- \t]?[(（]?{DIGIT}{{1,4}}[)）]?){{2,4}}"
    rf"(?:[ \t]*(?:ext\.?|内線|x)[ \t]*{DIGIT}{{1,5}})?(?!{DIGIT})",
    re.IGNORECASE,
)
# Separator between digit groups
_PHONE_SEP = rf"(?:{HYPHEN}|[(（)）][ \t　]?|[ \t　])"

PHONE_DOMESTIC_PATTERN = re.compile(
    rf"(?<!{DIGIT})[(（]?[0０]{DIGIT}{{1,4}}{_PHONE_SEP}{DIGIT}{{1,4}}{_PHONE_SEP}{DIGIT}{{3,4}}"
    rf"(?:[ \t]*(?:内線|ext\.?)[ \t]*{DIGIT}{{1,5}})?(?!{DIGIT})"
)
PHONE_COMPACT_PATTERN = re.compile(rf"(?<!{DIGIT})[0０]{DIGIT}{{9,10}}(?!{DIGIT})")


# --- Postal code ---

POSTAL_CODE_PATTERN = re.compile(
    rf"(?:〒[ \t　]*{DIGIT}{{3}}{HYPHEN}?{DIGIT}{{4}}|(?<!{DIGIT}){DIGIT}{{3}}{HYPHEN}{DIGIT}{{4}})(?!{DIGIT})"
)


# --- Date of birth ---

_ERA = r"(?:明治|大正|昭和|平成|令和)"
_DATE = (
    rf"{_ERA}[ \t]*(?:{DIGIT}{{1,2}}|元)[ \t]*年[ \t]*{DIGIT}{{1,2}}[ \t]*月[ \t]*{DIGIT}{{1,2}}[ \t]*日"
    rf"|(?<![A-Za-z])[MTSHR]{DIGIT}{{1,2}}[./／]{DIGIT}{{1,2}}[./／]{DIGIT}{{1,2}}(?!{DIGIT})"
    rf"|(?<!{DIGIT}){DIGIT}{{2,4}}[ \t]*年[ \t]*{DIGIT}{{1,2}}[ \t]*月[ \t]*{DIGIT}{{1,2}}[ \t]*日"
    rf"|(?<!{DIGIT})(?:{DIGIT}{{4}}|{DIGIT}{{2}})[/／\-]{DIGIT}{{1,2}}[/／\-]{DIGIT}{{1,2}}(?!{DIGIT})"
)

DOB_LABELED_PATTERN = re.compile(rf"(生年月日)([ \t]*[:：]?[ \t]*)(?:{_DATE})")
DOB_PATTERN = re.compile(rf"(?:{_DATE})")


# --- Personal name ---

_HONORIFIC = r"(?:さん|さま|様|氏|君|くん|ちゃん)"
# Nouns that take honorifics without being names (患者さん, ご家族様)
_NOT_A_NAME = rf"(?!(?:患者|本人|家族|皆){_HONORIFIC})"
_HONORIFIC_NAME = (
    rf"(?<![{KANJI}{KATAKANA}]){_NOT_A_NAME}(?:[{KANJI}]{{1,4}}|[{KATAKANA}]{{2,8}})"
)

NAME_LABELED_PATTERN = re.compile(
    rf"(患者名|お名前|氏名|名前)([ \t]*[:：][ \t]*)"
    rf"(?:[{KANJI}{KATAKANA}]{{1,4}}[ 　][{KANJI}{KATAKANA}]{{1,4}}(?![{KANJI}{KATAKANA}:：])"
    rf"|[A-Za-z]+ [A-Za-z]+"
    rf"|[^\s、,，。]+)"
)
NAME_BARE_LINE_PATTERN = re.compile(rf"^[ \t　]*[{KANJI}]{{2,4}}[ \t　]*$", re.MULTILINE)
NAME_WESTERN_LINE_PATTERN = re.compile(
    r"^[ \t]*(?:[A-Z]{2,}[ \t]+[A-Z][a-z]+|[A-Z][a-z]+[ \t]+[A-Z]{2,})[ \t]*$", re.MULTILINE
)
NAME_WITH_AGE_PATTERN = re.compile(
    rf"{_HONORIFIC_NAME}({_HONORIFIC})([ \t　、,，]*[(（]?)({DIGIT}{{1,3}}[ \t]*(?:歳|才))"
)
NAME_HONORIFIC_PATTERN = re.compile(rf"{_HONORIFIC_NAME}({_HONORIFIC})")
NAME_KANJI_PAIR_PATTERN = re.compile(
    rf"(?<![{KANJI}])[{KANJI}]{{1,3}}[ 　][{KANJI}]{{1,3}}(?![{KANJI}])"
)
NAME_WESTERN_PATTERN = re.compile(
    r"(?<![A-Za-z])[A-Z][a-z]+(?:,[ \t]*|[ \t]+)[A-Z][a-z]+(?![A-Za-z])"
)


# --- Address ---

_PREFECTURES = (
    "北海道|東京都|大阪府|京都府|"
    "青森県|岩手県|宮城県|秋田県|山形県|福島県|茨城県|栃木県|群馬県|埼玉県|千葉県|"
    "神奈川県|新潟県|富山県|石川県|福井県|山梨県|長野県|岐阜県|静岡県|愛知県|三重県|"
    "滋賀県|兵庫県|奈良県|和歌山県|鳥取県|島根県|岡山県|広島県|山口県|徳島県|香川県|"
    "愛媛県|高知県|福岡県|佐賀県|長崎県|熊本県|大分県|宮崎県|鹿児島県|沖縄県"
)

ADDRESS_LABELED_PATTERN = re.compile(r"(住所|所在地)([ \t]*[:：][ \t]*|[ \t　]+)([^\n]+)")
ADDRESS_LINE_PATTERN = re.compile(
    rf"^[ \t　]*(?:(?:\[郵便番号\]|〒?[ \t]*{DIGIT}{{3}}{HYPHEN}?{DIGIT}{{4}})[ \t　]*)?"
    rf"(?:{_PREFECTURES})[^\n]*?[市区町村郡][^\n]*?"
    rf"{DIGIT}+(?:丁目|番地|番|号)?(?:{HYPHEN}{DIGIT}+(?:番地|番|号)?)*[ \t　]*$",
    re.MULTILINE,
)


# --- Identifier ---

ID_LABELED_PATTERN = re.compile(
    r"(?<![A-Za-z])(患者ID|患者番号|カルテ番号|カルテNo\.?|診察券番号|診察券No\.?|ID(?![A-Za-z]))"
    rf"([ \t]*[:：#＃]?[ \t]*)([A-Za-z0-9０-９\-]*{DIGIT}[A-Za-z0-9０-９\-]*)"
)


def _marker(category: RedactionCategory) -> str:
    return MARKERS[category]


def _labeled(category: RedactionCategory) -> str:
    return r"\1\2" + MARKERS[category]


C = RedactionCategory

# Applied top to bottom on every call. Once a span becomes a marker, later
# rules cannot match inside it, so label rules precede generic ones and phone
# rules precede the postal code rule.
RULES: tuple[RedactionRule, ...] = (
    RedactionRule("email", C.EMAIL, EMAIL_PATTERN, _marker(C.EMAIL)),
    RedactionRule("phone_labeled", C.PHONE, PHONE_LABELED_PATTERN, _labeled(C.PHONE)),
    RedactionRule("phone_international", C.PHONE, PHONE_INTERNATIONAL_PATTERN, _marker(C.PHONE)),
    RedactionRule("phone_domestic", C.PHONE, PHONE_DOMESTIC_PATTERN, _marker(C.PHONE)),
    RedactionRule("phone_compact", C.PHONE, PHONE_COMPACT_PATTERN, _marker(C.PHONE)),
    RedactionRule("postal_code", C.POSTAL_CODE, POSTAL_CODE_PATTERN, _marker(C.POSTAL_CODE)),
    RedactionRule("dob_labeled", C.DATE_OF_BIRTH, DOB_LABELED_PATTERN, _labeled(C.DATE_OF_BIRTH)),
    RedactionRule("dob", C.DATE_OF_BIRTH, DOB_PATTERN, _marker(C.DATE_OF_BIRTH)),
    RedactionRule("name_labeled", C.NAME, NAME_LABELED_PATTERN, _labeled(C.NAME)),
    RedactionRule("name_bare_line", C.NAME, NAME_BARE_LINE_PATTERN, _marker(C.NAME)),
    RedactionRule("name_western_line", C.NAME, NAME_WESTERN_LINE_PATTERN, _marker(C.NAME)),
    RedactionRule(
        "name_with_age", C.NAME, NAME_WITH_AGE_PATTERN, _marker(C.NAME) + r"\1\2" + AGE_MARKER
    ),
    RedactionRule("name_honorific", C.NAME, NAME_HONORIFIC_PATTERN, _marker(C.NAME) + r"\1"),
    RedactionRule("name_kanji_pair", C.NAME, NAME_KANJI_PAIR_PATTERN, _marker(C.NAME)),
    RedactionRule("name_western", C.NAME, NAME_WESTERN_PATTERN, _marker(C.NAME)),
    RedactionRule("address_labeled", C.ADDRESS, ADDRESS_LABELED_PATTERN, _labeled(C.ADDRESS)),
    RedactionRule("address_line", C.ADDRESS, ADDRESS_LINE_PATTERN, _marker(C.ADDRESS)),
    RedactionRule("id_labeled", C.IDENTIFIER, ID_LABELED_PATTERN, _labeled(C.IDENTIFIER)),
)


def rule_names() -> list[str]:
    """Names of the rules in application order."""
    return [rule.name for rule in RULES]
