from __future__ import annotations

import pytest

from kiwimodel.db.clause import Clause, quote


def _escape(value: str) -> str:
    return value.replace("'", "''")


class TestQuote:
    def test_none_is_null(self) -> None:
        assert quote(None, _escape) == "NULL"

    def test_strings_are_escaped_and_wrapped(self) -> None:
        assert quote("GP", _escape) == "'GP'"
        assert quote("O'Brien", _escape) == "'O''Brien'"

    def test_empty_string_is_an_empty_literal(self) -> None:
        assert quote("", _escape) == "''"

    def test_numbers_pass_through(self) -> None:
        assert quote(2, _escape) == "2"
        assert quote(-7, _escape) == "-7"
        assert quote(1.5, _escape) == "1.5"

    def test_booleans_become_integers(self) -> None:
        assert quote(True, _escape) == "1"
        assert quote(False, _escape) == "0"

    def test_unsupported_types_raise(self) -> None:
        with pytest.raises(TypeError):
            quote(object(), _escape)


class TestClause:
    def test_empty_clause_renders_nothing(self) -> None:
        clause = Clause(_escape)
        assert str(clause) == ""
        assert not clause

    def test_first_predicate_emits_where(self) -> None:
        clause = Clause(_escape).where("friend_id = ", 2)
        assert str(clause) == " WHERE friend_id = 2"

    def test_later_predicates_are_joined_with_a_space(self) -> None:
        clause = Clause(_escape).where("friend_id = ", 2).where("AND firstname LIKE ", "%ar%")
        assert str(clause) == " WHERE friend_id = 2 AND firstname LIKE '%ar%'"
        assert str(clause).count("WHERE") == 1

    def test_predicate_without_value_is_verbatim(self) -> None:
        clause = Clause(_escape).where("friend_id = 2").where("AND lastname IS NULL")
        assert str(clause) == " WHERE friend_id = 2 AND lastname IS NULL"

    def test_none_value_renders_null(self) -> None:
        clause = Clause(_escape).where("friend_id IS ", None)
        assert str(clause) == " WHERE friend_id IS NULL"

    def test_limit_without_offset(self) -> None:
        assert str(Clause(_escape).limit(5)) == " LIMIT 5"

    def test_limit_with_offset(self) -> None:
        clause = Clause(_escape).where("friend_id = ", 2).limit(5, 10)
        assert str(clause) == " WHERE friend_id = 2 LIMIT 5 OFFSET 10"

    def test_negative_limit_raises(self) -> None:
        with pytest.raises(ValueError):
            Clause(_escape).limit(-1)
        with pytest.raises(ValueError):
            Clause(_escape).limit(1, -1)

    def test_raw_appends_sql(self) -> None:
        clause = Clause(_escape).where("friend_id = ", 2).raw("ORDER BY lastname ASC")
        assert str(clause) == " WHERE friend_id = 2 ORDER BY lastname ASC"

    def test_reset_allows_a_new_where(self) -> None:
        clause = Clause(_escape).where("id = ", 1)
        clause.reset()
        assert str(clause) == ""
        clause.where("id = ", 2)
        assert str(clause) == " WHERE id = 2"

    def test_values_are_escaped_with_the_given_function(self) -> None:
        clause = Clause(lambda value: value.upper()).where("username = ", "gp")
        assert str(clause) == " WHERE username = 'GP'"
