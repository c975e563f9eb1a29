"""Tests for the clause tokenizer."""

import pytest

from samplebank.capabilities import MalformedQuery
from samplebank.capabilities.tokenizer import Clause, tokenize, validate_attributes


@pytest.mark.parametrize("raw", [None, "", "   ", '""'])
def test_empty_input_yields_no_clauses(raw):
    assert tokenize(raw, "select") == []


def test_splits_clauses_and_peels_suffix():
    clauses = tokenize("balance::100+|balance::1000-|name::Savings", "select")

    assert clauses == [
        Clause(attribute="balance", operand="100", suffix="+"),
        Clause(attribute="balance", operand="1000", suffix="-"),
        Clause(attribute="name", operand="Savings", suffix=None),
    ]


def test_trims_whitespace_and_enclosing_quotes():
    clauses = tokenize('" balance :: 100 + | name::Nem Konto "', "select")

    assert clauses[0] == Clause(attribute="balance", operand="100", suffix="+")
    assert clauses[1] == Clause(attribute="name", operand="Nem Konto")


def test_leading_sign_is_part_of_operand():
    clauses = tokenize("from::-14d|to::now", "interval")

    assert clauses[0].operand == "-14d"
    assert clauses[0].suffix is None


def test_suffix_only_operand():
    (clause,) = tokenize("balance::-", "filter")

    assert clause.operand == ""
    assert clause.suffix == "-"


def test_bare_clause_rejected_unless_allowed():
    with pytest.raises(MalformedQuery) as excinfo:
        tokenize("balance", "select")
    assert excinfo.value.capability == "select"
    assert excinfo.value.raw_fragment == "balance"


def test_bare_clause_allowed_for_sort():
    clauses = tokenize("balance|lastUpdate-", "sort", allow_bare=True)

    assert clauses == [
        Clause(attribute="balance"),
        Clause(attribute="lastUpdate", suffix="-"),
    ]


@pytest.mark.parametrize("raw", ["balance::1||name::x", "balance::1|", "::100"])
def test_empty_clause_or_attribute_is_malformed(raw):
    with pytest.raises(MalformedQuery):
        tokenize(raw, "select")


def test_operand_may_contain_separator_after_first():
    (clause,) = tokenize("origin::a::b", "select")

    assert clause.attribute == "origin"
    assert clause.operand == "a::b"


def test_clause_to_query():
    assert Clause(attribute="balance", operand="100", suffix="+").to_query() == "balance::100+"
    assert Clause(attribute="balance", suffix="-").to_query() == "balance::-"
    assert Clause(attribute="balance").to_query() == "balance"


def test_validate_attributes_is_case_sensitive():
    clauses = tokenize("Balance::100", "select")

    with pytest.raises(MalformedQuery, match="unknown attribute 'Balance'"):
        validate_attributes(clauses, ["balance"], "select")

    validate_attributes(clauses, None, "select")


def test_clause_is_immutable():
    clause = Clause(attribute="balance", operand="100")

    with pytest.raises(Exception):
        clause.operand = "200"


def test_trailing_separator_rejected_for_bare_grammars():
    with pytest.raises(MalformedQuery) as excinfo:
        tokenize("balance::", "sort", allow_bare=True)
    assert excinfo.value.raw_fragment == "balance::"


def test_only_whole_value_double_quotes_are_stripped():
    (clause,) = tokenize("name::'Nem Konto'", "select")

    assert clause.operand == "'Nem Konto'"
