"""Tests for the JSON and YAML structured dumps."""

import json

import pytest

from sphinxconf import (
    InvalidArgument,
    SphinxConfig,
    SphinxConfJsonParser,
    SphinxConfYamlParser,
)


@pytest.mark.parametrize('handler_cls, name', [
    (SphinxConfJsonParser, 'dump.json'),
    (SphinxConfYamlParser, 'dump.yaml'),
])
def test_dump_and_load(tmp_path, conf, handler_cls, name):
    conf.set('index', 'main', 'morphology', 'none')
    handler = handler_cls(str(tmp_path / name))
    handler.write(conf)
    loaded = handler.read()
    assert loaded.as_string() == conf.as_string()
    assert loaded.to_records() == conf.to_records()
    # inheritance keeps working after loading
    loaded.set('index', 'main', 'morphology', 'stem_ru')
    assert loaded.get('index', 'delta_rt', 'morphology') == 'stem_ru'


def test_json_layout(tmp_path, conf):
    path = tmp_path / 'dump.json'
    SphinxConfJsonParser(str(path)).write(conf)
    src = json.loads(path.read_text(encoding='utf-8'))
    assert src['protocol'] == 1
    assert src['preserve_inheritance'] is True
    first = src['sections'][0]
    assert first['type'] == 'source'
    assert first['name'] == 'base'
    assert first['data']['sql_attr_uint'] == ['group_id', 'date_added']


def test_mode_survives(tmp_path, conf):
    conf.preserve_inheritance(False)
    handler = SphinxConfYamlParser(str(tmp_path / 'dump.yaml'))
    handler.write(conf)
    assert handler.read().preserve_inheritance() is False


def test_records_need_parent_first():
    records = [
        {'type': 'index', 'name': 'child', 'parent': 'main', 'data': {}},
        {'type': 'index', 'name': 'main', 'data': {}},
    ]
    with pytest.raises(InvalidArgument):
        SphinxConfig.from_records(records)


def test_not_a_dump(tmp_path):
    path = tmp_path / 'bad.json'
    path.write_text('[1, 2, 3]', encoding='utf-8')
    with pytest.raises(InvalidArgument):
        SphinxConfJsonParser(str(path)).read()
