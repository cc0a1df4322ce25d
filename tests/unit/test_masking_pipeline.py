"""Tests for the protect -> redact -> restore masking pipeline."""

import re

import pytest

from referral_assistant.masking.pipeline import Masker, MaskingResult, mask, masker
from referral_assistant.masking.rules import RULES, RedactionCategory, RedactionRule
from referral_assistant.masking.term_protector import ClinicalTerms
from referral_assistant.terms.loader import term_list_loader


class TestMask:
    """Test the public mask function."""

    def test_empty_string_returned_unchanged(self):
        assert mask("", []) == ""

    def test_none_returned_unchanged(self):
        assert mask(None, []) is None

    @pytest.mark.parametrize(
        "text",
        [
            "血圧は安定しています。",
            "eGFR 45 mL/min/1.73m2, stable.",
            "浮腫なし、尿蛋白(2+)",
        ],
    )
    def test_text_without_pii_is_unchanged(self, text):
        assert mask(text, []) == text

    def test_longest_term_protected_whole(self):
        result = mask("慢性腎臓病の疑い", ["慢性腎臓病", "腎臓病"])

        assert result == "慢性腎臓病の疑い"
        assert "[" not in result

    def test_abbreviation_terms_round_trip(self):
        terms = ClinicalTerms.from_iterable(["IgA腎症", "AS", "ER"])

        assert mask("IgA腎症とASの既往、ER受診", terms) == "IgA腎症とASの既往、ER受診"

    def test_clinical_term_redacted_without_allow_list(self):
        assert mask("既往歴 高血圧", []) == "[氏名]"

    def test_clinical_term_preserved_with_allow_list(self):
        assert mask("既往歴 高血圧", ["高血圧"]) == "既往歴 高血圧"

    def test_bare_term_line_preserved_with_allow_list(self):
        assert mask("腎臓病", []) == "[氏名]"
        assert mask("腎臓病", ClinicalTerms.from_iterable(["腎臓病"])) == "腎臓病"

    def test_protected_terms_survive_around_pii(self):
        text = "氏名: 山田太郎\n生年月日: 昭和30年1月2日\n電話: 03-1234-5678\n住所: 東京都新宿区西新宿2-8-1\n慢性腎臓病で通院中。"

        result = mask(text, ["慢性腎臓病"])

        assert result == (
            "氏名: [氏名]\n"
            "生年月日: [生年月日]\n"
            "電話: [電話]\n"
            "住所: [住所]\n"
            "慢性腎臓病で通院中。"
        )

    @pytest.mark.parametrize("text", ["foo@bar.com", "foo(at)bar.com", "foo＠bar.com"])
    def test_email_variants(self, text):
        assert mask(text, []) == "[メール]"

    def test_phone_label_not_postal(self):
        assert mask("電話: 03-1234-5678", []) == "電話: [電話]"

    def test_uses_loaded_allow_list_by_default(self):
        assert mask("腎臓病") == "[氏名]"

        term_list_loader.terms = ClinicalTerms.from_iterable(["腎臓病"])

        assert mask("腎臓病") == "腎臓病"

    @pytest.mark.parametrize(
        "text", ["\n\n", "[]", "(at)", "＠", "〒", "生年月日:", "氏名:", "__MASKTERM0000__"]
    )
    def test_never_raises_on_odd_input(self, text):
        assert isinstance(mask(text, ["腎臓病"]), str)


class TestMaskWithReport:
    """Test the reporting variant."""

    def test_report_counts(self):
        result = masker.mask_with_report(
            "氏名: 山田太郎 電話: 03-1234-5678 慢性腎臓病", ["慢性腎臓病"]
        )

        assert isinstance(result, MaskingResult)
        assert result.text == "氏名: [氏名] 電話: [電話] 慢性腎臓病"
        assert result.redactions == {"name": 1, "phone": 1}
        assert result.protected_terms == 1
        assert result.has_pii is True

    def test_report_no_pii(self):
        result = masker.mask_with_report("血圧は安定", [])

        assert result.has_pii is False
        assert result.to_dict() == {
            "masked_text": "血圧は安定",
            "redactions": {},
            "protected_terms": 0,
        }


class TestRuleIsolation:
    """A failing rule must not stop the others."""

    def test_broken_rule_is_skipped(self):
        broken = RedactionRule("broken", RedactionCategory.NAME, re.compile("foo"), r"\9")
        email_rule = next(rule for rule in RULES if rule.name == "email")
        custom = Masker(rules=[broken, email_rule])

        assert custom.mask("foo a@b.com") == "foo [メール]"
