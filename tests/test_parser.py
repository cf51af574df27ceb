"""Tests for reading sphinx.conf text into a document."""

import pytest

from sphinxconf import (
    ConfigParseError,
    ConfigSyntaxError,
    DuplicateSection,
    MalformedPair,
    SectionType,
    UnresolvedParent,
    parse_string,
)

# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def test_sections_in_document_order(conf):
    assert list(conf) == [
        (SectionType.SOURCE, 'base'),
        (SectionType.SOURCE, 'delta'),
        (SectionType.INDEX, 'main'),
        (SectionType.INDEX, 'delta'),
        (SectionType.INDEX, 'delta_rt'),
        (SectionType.INDEXER, None),
        (SectionType.SEARCHD, None),
    ]


def test_plain_values(conf):
    assert conf.get('source', 'base', 'type') == 'mysql'
    assert conf.get('index', 'main', 'path') == '/var/data/main'
    assert conf.get('indexer', None, 'mem_limit') == '32M'
    assert conf.get('searchd', key='listen') == '9312'


def test_continued_value(conf):
    value = conf.get('source', 'base', 'sql_query')
    assert ' '.join(value.split()) == 'SELECT id, title FROM documents'


def test_repeated_key_accumulates(conf):
    assert conf.get('source', 'base', 'sql_attr_uint') == [
        'group_id', 'date_added']


def test_third_occurrence_appends():
    conf = parse_string(
        'index a {\n'
        '    x = v1\n'
        '    x = v2\n'
        '    x = v3\n'
        '}\n')
    assert conf.get('index', 'a', 'x') == ['v1', 'v2', 'v3']


def test_empty_value_is_not_missing():
    conf = parse_string('index a {\n    k =\n}\n')
    assert conf.get('index', 'a', 'k') == ''
    assert conf.get('index', 'a', 'other') is None


def test_brace_glued_to_value_stays_in_value():
    conf = parse_string('index a {\n    q = {x}\n}\n')
    assert conf.get('index', 'a', 'q') == '{x}'


def test_one_line_sections():
    conf = parse_string(
        'searchd { listen = 9312 } indexer { mem_limit = 1M }\n')
    assert conf.get('searchd', key='listen') == '9312'
    assert conf.get('indexer', key='mem_limit') == '1M'


def test_declaration_split_over_lines():
    conf = parse_string('index a {\n    x = 1\n}\nindex\nb\n:\na\n{\n}\n')
    assert conf['index', 'b'].parent == 'a'
    assert conf.get('index', 'b', 'x') == '1'


def test_concrete_scenario():
    conf = parse_string('index A { path = /a }\nindex B : A { }\n')
    assert len(conf) == 2
    assert conf.get('index', 'B', 'path') == '/a'


# ---------------------------------------------------------------------------
# Inheritance at parse time
# ---------------------------------------------------------------------------


def test_child_copies_parent(conf):
    parent = conf.get('index', 'main')
    child = conf['index', 'delta_rt']
    for key, value in conf.get('index', 'delta').items():
        assert conf.get('index', 'delta_rt', key) == value
        assert child.is_inherited(key)
    assert child.parent == 'delta'
    assert conf['index', 'delta'].parent == 'main'
    assert parent['morphology'] == 'stem_en'


def test_local_key_overrides_inherited(conf):
    delta = conf['index', 'delta']
    assert delta['path'] == '/var/data/delta'
    assert not delta.is_inherited('path')
    assert delta['morphology'] == 'stem_en'
    assert delta.is_inherited('morphology')


def test_inherited_list_is_copied(conf):
    base = conf['source', 'base']
    delta = conf['source', 'delta']
    assert delta['sql_attr_uint'] == ['group_id', 'date_added']
    assert delta._data['sql_attr_uint'] is not base._data['sql_attr_uint']


def test_first_local_declaration_replaces_inherited_list():
    conf = parse_string(
        'index a {\n    x = 1\n    x = 2\n}\n'
        'index b : a {\n    x = 3\n}\n'
        'index c : a {\n    x = 4\n    x = 5\n}\n')
    assert conf.get('index', 'b', 'x') == '3'
    assert conf.get('index', 'c', 'x') == ['4', '5']
    assert conf.get('index', 'a', 'x') == ['1', '2']


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_unknown_section_type():
    with pytest.raises(ConfigSyntaxError) as exc:
        parse_string('\nsource a {\n}\nfoo {\n}\n', 'x.conf')
    assert exc.value.lineno == 4
    assert exc.value.filename == 'x.conf'
    assert str(exc.value) == "x.conf:4: Expected section type, got 'foo'"


def test_missing_name():
    with pytest.raises(ConfigSyntaxError, match='section name'):
        parse_string('index {\n}\n')


@pytest.mark.parametrize('text', [
    'index a{\n}\n',
    'index b: a {\n}\n',
    'source x:y {\n}\n',
])
def test_name_glued_to_syntax(text):
    with pytest.raises(ConfigSyntaxError, match='section name'):
        parse_string(text)


def test_nameless_section_cannot_inherit():
    with pytest.raises(ConfigSyntaxError, match="expected '{'"):
        parse_string('searchd : other {\n}\n')


def test_unresolved_parent():
    with pytest.raises(UnresolvedParent) as exc:
        parse_string('index a {\n}\nindex b : missing {\n}\n')
    assert exc.value.lineno == 3
    assert 'missing' in str(exc.value)


def test_parent_must_precede():
    with pytest.raises(UnresolvedParent):
        parse_string('index b : a {\n}\nindex a {\n}\n')


def test_parent_must_have_same_type():
    with pytest.raises(UnresolvedParent):
        parse_string('source base {\n}\nindex b : base {\n}\n')


def test_malformed_pair():
    with pytest.raises(MalformedPair) as exc:
        parse_string('index a {\n    path /a\n}\n')
    assert exc.value.lineno == 2
    assert isinstance(exc.value, ConfigParseError)


def test_duplicate_section():
    with pytest.raises(DuplicateSection) as exc:
        parse_string('index a {\n}\nindex a {\n}\n')
    assert exc.value.lineno == 3


def test_unclosed_section():
    with pytest.raises(ConfigSyntaxError, match='not closed'):
        parse_string('index a {\n    path = /a\n')


def test_incomplete_declaration():
    with pytest.raises(ConfigSyntaxError, match='end of input'):
        parse_string('index a\n')
