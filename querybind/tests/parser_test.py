"""
Placeholder parser tests.
"""
import pytest

from querybind.errors import TemplateSyntaxError
from querybind.template import Literal, Placeholder, get_template, parse


def test_positional_and_braced_forms_are_equal():
    assert parse("?5").segments == (Placeholder(5, ()),)
    assert parse("?{5}").segments == (Placeholder(5, ()),)
    assert parse("?5").segments == parse("?{5}").segments


def test_braced_path():
    template = parse("UPDATE user SET username = ?{2.author.username}")
    assert template.segments == (
        Literal("UPDATE user SET username = "),
        Placeholder(2, ("author", "username")),
    )


def test_segments_follow_source_order():
    template = parse("UPDATE user SET username = ?1 WHERE id = ?{2} AND x = 'y'")
    assert template.segments == (
        Literal("UPDATE user SET username = "),
        Placeholder(1),
        Literal(" WHERE id = "),
        Placeholder(2),
        Literal(" AND x = 'y'"),
    )
    assert template.max_index == 2


def test_multi_digit_index():
    assert parse("?12").placeholders == (Placeholder(12),)


def test_bare_question_mark_is_literal():
    template = parse("SELECT '?' , ? FROM t WHERE a = ?1")
    assert template.placeholders == (Placeholder(1),)
    assert template.segments[0] == Literal("SELECT '?' , ? FROM t WHERE a = ")


def test_parse_is_deterministic():
    sql = "INSERT INTO t (a, b) VALUES (?{1.a}, ?2)"
    assert parse(sql) == parse(sql)


def test_no_placeholders():
    template = parse("DELETE FROM t")
    assert template.segments == (Literal("DELETE FROM t"),)
    assert template.placeholders == ()
    assert template.max_index == 0


@pytest.mark.parametrize("sql", [
    "UPDATE t SET a = ?{1.name",
    "UPDATE t SET a = ?{}",
    "UPDATE t SET a = ?0",
    "UPDATE t SET a = ?{0}",
    "UPDATE t SET a = ?{x}",
    "UPDATE t SET a = ?{1.}",
    "UPDATE t SET a = ?{1..name}",
    "UPDATE t SET a = ?{1.9name}",
])
def test_malformed_templates(sql):
    with pytest.raises(TemplateSyntaxError):
        parse(sql)


def test_syntax_error_reports_column():
    with pytest.raises(TemplateSyntaxError) as info:
        parse("SET a = ?{1.name")
    assert info.value.column == 9
    assert info.value.template == "SET a = ?{1.name"


def test_render_paramstyles():
    template = parse("UPDATE t SET a = ?{1.a}, pct = '5%' WHERE id = ?2")
    assert template.render('qmark') == "UPDATE t SET a = ?, pct = '5%' WHERE id = ?"
    assert template.render('format') == "UPDATE t SET a = %s, pct = '5%%' WHERE id = %s"
    assert template.render('numeric') == "UPDATE t SET a = :1, pct = '5%' WHERE id = :2"
    assert template.render('named') == "UPDATE t SET a = :p1, pct = '5%' WHERE id = :p2"


def test_render_repeats_marker_for_repeated_argument():
    template = parse("UPDATE t SET a = ?1 WHERE b = ?1")
    assert template.render() == "UPDATE t SET a = ? WHERE b = ?"
    assert len(template.placeholders) == 2


def test_render_unknown_paramstyle():
    with pytest.raises(ValueError):
        parse("?1").render('dollar')


def test_template_cache_returns_same_object():
    sql = "UPDATE t SET a = ?1"
    assert get_template(sql) is get_template(sql)


def test_describe():
    assert Placeholder(1).describe() == "?1"
    assert Placeholder(2, ("author", "username")).describe() == "?{2.author.username}"
