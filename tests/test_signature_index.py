"""
Tests for the signature prefix tree.
"""

import pytest

from fnsearch.core.signature_index import SignatureIndex
from fnsearch.models.function import FunctionRecord


TEST_SIGNATURES = [
    ("Int -> Int", 0),
    ("String -> Int", 1),
    ("Int -> Bool", 2),
    ("Bool -> Bool", 3),
    ("Int -> String", 4),
    ("String -> Int", 5),
]


@pytest.fixture
def index():
    return SignatureIndex.build(TEST_SIGNATURES)


class TestSearch:
    """Test exact signature lookup."""

    def test_search_returns_ids_in_insertion_order(self, index):
        assert index.search("String -> Int", 10) == [1, 5]

    def test_search_single(self, index):
        assert index.search("Bool -> Bool", 10) == [3]

    def test_search_limit(self, index):
        assert index.search("String -> Int", 1) == [1]

    def test_search_offset(self, index):
        assert index.search("String -> Int", 1, 1) == [5]
        assert index.search("String -> Int", 10, 1) == [5]
        assert index.search("String -> Int", 10, 0) == [1, 5]

    def test_search_offset_past_end(self, index):
        assert index.search("String -> Int", 10, 2) is None
        assert index.search("String -> Int", 10, 100) is None

    def test_search_unknown_signature(self, index):
        assert index.search("String -> In", 10) is None
        assert index.search("Float", 10) is None

    def test_search_is_exact_about_whitespace(self, index):
        assert index.search("String->Int", 10) is None

    def test_search_zero_limit(self, index):
        assert index.search("String -> Int", 0) == []

    def test_negative_arguments_are_rejected(self, index):
        with pytest.raises(ValueError):
            index.search("String -> Int", -1)
        with pytest.raises(ValueError):
            index.search("String -> Int", 10, -1)

    def test_search_result_does_not_alias_the_index(self, index):
        result = index.search("String -> Int", 10)
        result.append(99)
        assert index.search("String -> Int", 10) == [1, 5]

    def test_pages_cover_all_ids(self, index):
        """Concatenated pages equal the full id list."""
        pages = []
        offset = 0
        while True:
            page = index.search("String -> Int", 1, offset)
            if page is None:
                break
            pages.extend(page)
            offset += 1
        assert pages == [1, 5]


class TestSuggest:
    """Test prefix suggestions."""

    def test_suggest_completes_prefix(self, index):
        assert index.suggest("String -> In", 10) == ["String -> Int"]

    def test_suggest_returns_all_matching(self, index):
        assert set(index.suggest("In", 10)) == {"Int -> Int", "Int -> Bool", "Int -> String"}

    def test_suggest_respects_limit(self, index):
        suggestions = index.suggest("In", 2)
        assert len(suggestions) == 2
        assert set(suggestions) < {"Int -> Int", "Int -> Bool", "Int -> String"}

    def test_suggest_includes_exact_match(self, index):
        assert index.suggest("Int -> Int", 10) == ["Int -> Int"]

    def test_suggest_no_match(self, index):
        assert index.suggest("Ink", 10) is None
        assert index.suggest("Float", 10) is None

    def test_suggest_zero_limit(self, index):
        assert index.suggest("In", 0) is None

    def test_suggest_distinct_signatures(self, index):
        """Duplicate signatures appear once."""
        assert index.suggest("S", 10) == ["String -> Int"]

    def test_suggest_is_deterministic(self, index):
        assert index.suggest("", 10) == index.suggest("", 10)

    def test_suggestions_all_start_with_prefix_and_are_searchable(self, index):
        for prefix in ["", "I", "Int -> ", "B", "String"]:
            for signature in index.suggest(prefix, 10) or []:
                assert signature.startswith(prefix)
                assert index.search(signature, 10)

    def test_negative_limit_is_rejected(self, index):
        with pytest.raises(ValueError):
            index.suggest("In", -1)


class TestBuild:
    """Test index construction."""

    def test_empty_index(self):
        index = SignatureIndex()
        assert len(index) == 0
        assert index.search("Int", 10) is None
        assert index.suggest("", 10) is None

    def test_empty_signature_is_a_key(self):
        index = SignatureIndex.build([("", 7)])
        assert index.search("", 10) == [7]
        assert index.suggest("", 10) == [""]

    def test_duplicate_ids_are_kept(self):
        index = SignatureIndex.build([("A", 1), ("A", 1)])
        assert index.search("A", 10) == [1, 1]

    def test_counts_and_membership(self, index):
        assert len(index) == 6
        assert index.signature_count == 5
        assert "Int -> Int" in index
        assert "Int" not in index
        assert set(index.signatures()) == {
            "Int -> Int", "String -> Int", "Int -> Bool", "Bool -> Bool", "Int -> String"
        }

    def test_from_records(self):
        records = [
            FunctionRecord(id=func_id, packageId="p", name=f"f{func_id}", typeSignature=signature)
            for signature, func_id in TEST_SIGNATURES
        ]
        index = SignatureIndex.from_records(records)
        assert index.search("String -> Int", 10) == [1, 5]
