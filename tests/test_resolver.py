"""
Tests for export resolution.
"""

import pytest

from fnsearch.core.parser import ElmParser
from fnsearch.core.resolver import resolve
from fnsearch.models.elm_module import (
    CommentDeclaration,
    ExportedFunction,
    ExportedType,
    ExposeAll,
    ExposeList,
    FunctionDeclaration,
    IgnoreDeclaration,
    TypeDeclaration,
)


DECLARATIONS = [
    CommentDeclaration(text="-- helpers"),
    FunctionDeclaration(name="alpha", typeSignature=["Int", "Int"]),
    IgnoreDeclaration(),
    FunctionDeclaration(name="beta", typeSignature=["String"]),
    TypeDeclaration(name="Gamma", definition="= Gamma Int"),
    FunctionDeclaration(name="delta", typeSignature=["Bool"]),
    TypeDeclaration(name="Hidden", definition="= Hidden", alias=False),
]


class TestResolveAll:
    """Test exposing (..)."""

    def test_every_function_and_type_is_exported(self):
        exports = resolve(ExposeAll(), DECLARATIONS)

        assert exports.names() == ["alpha", "beta", "Gamma", "delta", "Hidden"]
        assert len(exports.functions()) == 3
        assert len(exports.types()) == 2

    def test_comments_are_never_exported(self):
        exports = resolve(ExposeAll(), [CommentDeclaration(text="{- x -}")])
        assert len(exports) == 0

    def test_counts_functions_of_a_generated_module(self):
        """N annotated functions interleaved with comments give N function entries."""
        lines = ["module Gen exposing (..)"]
        for i in range(25):
            lines += [f"-- {i}", f"f{i} : List Int -> Int", f"f{i} xs = {i}", "{- sep -}"]
        result = ElmParser().parse("\n".join(lines))

        assert len(result.exports.functions()) == 25


class TestResolveList:
    """Test explicit exposing lists."""

    def test_only_listed_names_are_kept(self):
        spec = ExposeList(names=[
            ExportedFunction(name="alpha"),
            ExportedFunction(name="beta"),
            ExportedType(name="Gamma"),
            ExportedFunction(name="missing"),
        ])
        exports = resolve(spec, DECLARATIONS)

        assert exports.names() == ["alpha", "beta", "Gamma"]

    def test_result_is_bounded_by_both_sides(self):
        spec = ExposeList(names=[ExportedFunction(name="alpha"), ExportedFunction(name="nothere")])
        exports = resolve(spec, DECLARATIONS)

        assert len(exports) <= min(len(spec.names), len(DECLARATIONS))
        assert set(exports.names()) <= spec.name_set()

    def test_body_order_is_preserved(self):
        spec = ExposeList(names=[ExportedFunction(name="delta"), ExportedFunction(name="alpha")])
        assert resolve(spec, DECLARATIONS).names() == ["alpha", "delta"]

    def test_duplicate_header_names(self):
        spec = ExposeList(names=[ExportedFunction(name="alpha"), ExportedFunction(name="alpha")])
        assert resolve(spec, DECLARATIONS).names() == ["alpha"]

    def test_header_definition_fills_missing_body_data(self):
        spec = ExposeList(names=[ExportedType(name="Msg", definition="..")])
        exports = resolve(spec, [TypeDeclaration(name="Msg")])

        assert exports.types()[0].definition == ".."

    def test_body_data_wins_over_header(self):
        spec = ExposeList(names=[ExportedType(name="Msg", definition="..")])
        exports = resolve(spec, [TypeDeclaration(name="Msg", definition="= A | B")])

        assert exports.types()[0].definition == "= A | B"

    def test_signatures_are_carried(self):
        spec = ExposeList(names=[ExportedFunction(name="alpha")])
        entry = resolve(spec, DECLARATIONS).functions()[0]

        assert entry.typeSignature == ["Int", "Int"]
        assert entry.normalized_signature == "Int -> Int"

    def test_empty_list_exports_nothing(self):
        assert len(resolve(ExposeList(), DECLARATIONS)) == 0


class TestResolveErrors:
    """Test rejection of unknown variants."""

    def test_unknown_exposing_clause(self):
        with pytest.raises(TypeError):
            resolve("everything", DECLARATIONS)

    def test_unknown_declaration(self):
        with pytest.raises(TypeError):
            resolve(ExposeAll(), [object()])

    def test_unknown_declaration_with_exposing_list(self):
        spec = ExposeList(names=[ExportedFunction(name="alpha")])
        with pytest.raises(TypeError):
            resolve(spec, [object()])
