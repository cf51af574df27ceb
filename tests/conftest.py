"""Shared fixtures for the sphinxconf test suite."""

import pytest

from sphinxconf import SphinxConfig, parse_string

SAMPLE = """\
# main configuration
source base
{
    type = mysql
    sql_host = localhost
    sql_query = SELECT id, title \\
        FROM documents
    sql_attr_uint = group_id
    sql_attr_uint = date_added
}

source delta : base
{
    sql_query = SELECT id FROM documents WHERE id > 1000
}

index main
{
    source = base
    path = /var/data/main   # trailing comment
    morphology = stem_en
}

index delta : main
{
    source = delta
    path = /var/data/delta
}

index delta_rt : delta
{
}

indexer
{
    mem_limit = 32M
}

searchd
{
    listen = 9312
}
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE


@pytest.fixture
def conf() -> SphinxConfig:
    return parse_string(SAMPLE, 'sphinx.conf')
