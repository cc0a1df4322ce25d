"""Tests for clinical term protection."""

from referral_assistant.masking.rules import RULES
from referral_assistant.masking.term_protector import (
    ClinicalTerms,
    make_token,
    normalize_terms,
    protect,
    restore,
)


class TestNormalizeTerms:
    """Test allow-list normalization."""

    def test_trims_and_drops_empty(self):
        result = normalize_terms(["  腎臓病 ", "", "   ", "\t高血圧\n"])

        assert result == ("腎臓病", "高血圧")

    def test_longest_first(self):
        result = normalize_terms(["腎臓病", "慢性腎臓病", "CKD"])

        assert result == ("慢性腎臓病", "腎臓病", "CKD")

    def test_equal_length_keeps_source_order(self):
        result = normalize_terms(["CKD", "AKI", "IgA"])

        assert result == ("CKD", "AKI", "IgA")

    def test_drops_duplicates(self):
        result = normalize_terms(["腎臓病", " 腎臓病", "腎臓病 "])

        assert result == ("腎臓病",)

    def test_clinical_terms_from_iterable(self):
        terms = ClinicalTerms.from_iterable(["腎臓病", "慢性腎臓病"])

        assert list(terms) == ["慢性腎臓病", "腎臓病"]
        assert len(terms) == 2
        assert bool(terms) is True
        assert bool(ClinicalTerms()) is False


class TestProtect:
    """Test placeholder substitution."""

    def test_empty_allow_list_is_identity(self):
        text = "慢性腎臓病の疑い"

        protected, protection_map = protect(text, [])

        assert protected == text
        assert protection_map == {}

    def test_none_allow_list_is_identity(self):
        protected, protection_map = protect("高血圧", None)

        assert protected == "高血圧"
        assert protection_map == {}

    def test_empty_text(self):
        protected, protection_map = protect("", ["高血圧"])

        assert protected == ""
        assert protection_map == {}

    def test_all_occurrences_share_one_token(self):
        protected, protection_map = protect("腎臓病と腎臓病", ["腎臓病"])

        token = make_token(0)
        assert protected == f"{token}と{token}"
        assert protection_map == {token: "腎臓病"}

    def test_counter_advances_only_for_found_terms(self):
        protected, protection_map = protect("高血圧と糖尿病", ["慢性腎臓病", "高血圧", "糖尿病"])

        assert protected == f"{make_token(0)}と{make_token(1)}"
        assert protection_map == {make_token(0): "高血圧", make_token(1): "糖尿病"}

    def test_longer_term_claimed_first(self):
        terms = ClinicalTerms.from_iterable(["腎臓病", "慢性腎臓病"])

        protected, protection_map = protect("慢性腎臓病の疑い", terms)

        assert protected == f"{make_token(0)}の疑い"
        assert protection_map == {make_token(0): "慢性腎臓病"}

    def test_terms_are_matched_literally(self):
        protected, protection_map = protect("abc a.c", ["a.c"])

        assert protected == f"abc {make_token(0)}"
        assert protection_map[make_token(0)] == "a.c"

    def test_regex_metacharacters_in_term(self):
        text = "IgA腎症(疑)+蛋白尿"

        protected, protection_map = protect(text, ["IgA腎症(疑)+"])

        assert protected == f"{make_token(0)}蛋白尿"

    def test_short_term_does_not_split_earlier_token(self):
        terms = ClinicalTerms.from_iterable(["IgA腎症", "AS"])

        protected, protection_map = protect("IgA腎症とASの既往", terms)

        assert protected == f"{make_token(0)}と{make_token(1)}の既往"
        assert protection_map == {make_token(0): "IgA腎症", make_token(1): "AS"}

    def test_term_only_inside_tokens_consumes_no_counter(self):
        protected, protection_map = protect("IgA腎症", ["IgA腎症", "ASK", "TERM"])

        assert protected == make_token(0)
        assert protection_map == {make_token(0): "IgA腎症"}


class TestRestore:
    """Test placeholder reversal."""

    def test_round_trip(self):
        text = "慢性腎臓病と高血圧、慢性腎臓病の進行"
        terms = ClinicalTerms.from_iterable(["高血圧", "慢性腎臓病", "腎臓病"])

        protected, protection_map = protect(text, terms)

        assert "腎臓病" not in protected
        assert restore(protected, protection_map) == text

    def test_empty_map_is_identity(self):
        assert restore("そのまま", {}) == "そのまま"
        assert restore("そのまま", None) == "そのまま"

    def test_fragmented_token_is_left_alone(self):
        fragment = make_token(0)[:-3]

        assert restore(fragment, {make_token(0): "腎臓病"}) == fragment


class TestTokenInertness:
    """Placeholder tokens must never be matched by a redaction rule."""

    def test_no_rule_matches_a_token(self):
        for index in (0, 7, 42, 999, 9999):
            token = make_token(index)
            for rule in RULES:
                assert rule.pattern.search(token) is None, (rule.name, token)

    def test_no_rule_matches_token_on_its_own_line(self):
        text = f"既往歴\n{make_token(3)}\n{make_token(12)} {make_token(13)}"
        for rule in RULES:
            for match in rule.pattern.finditer(text):
                assert "MASKTERM" not in match.group(), rule.name
