"""Tests for configuration loading."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from apictl.core.loader import discover, load, parse
from apictl.errors import ConfigError
from apictl.schema import FormBody, MultipartBody, NoBody, RawBody

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem

if TYPE_CHECKING:
    from apictl.schema import Document


def test_sample_document(document: 'Document') -> None:
    """Load contexts, requests and tests with their names."""
    assert list(document.contexts) == ['local', 'remote']
    assert document.contexts['local']['pagination_limit'] == '10'

    create_post = document.requests['create-post']

    assert create_post.name == 'create-post'
    assert create_post.method == 'POST'
    assert create_post.header('content-type') == 'application/json'
    assert isinstance(create_post.body, RawBody)
    assert isinstance(document.requests['get-posts'].body, NoBody)
    assert isinstance(document.requests['create-todo'].body, FormBody)

    posts = document.tests['posts']

    assert posts.name == 'posts'
    assert [step.request for step in posts.steps] == ['get-posts', 'get-user-from-first-post']


@pytest.mark.parametrize('content', (
    pytest.param('', id='empty file'),
    pytest.param('contexts:\nrequests:\ntests:\n', id='empty sections'),
))
def test_empty_documents(content: str) -> None:
    """Treat empty documents and sections as empty."""
    document = parse(content)

    assert document.contexts == {}
    assert document.requests == {}
    assert document.tests == {}


def test_aliases() -> None:
    """Accept the short query and legacy payload keys."""
    document = parse('''
requests:
  upload:
    method: put
    url: http://localhost/upload
    query:
      dry_run: true
    payload:
      type: multipart
      data:
        file:
          type: file
          path: data.bin
''')

    upload = document.requests['upload']

    assert upload.query_parameters == {'dry_run': 'true'}
    assert isinstance(upload.body, MultipartBody)


@pytest.mark.parametrize('content, message', (
    pytest.param('requests: [unclosed', 'Invalid YAML', id='yaml syntax'),
    pytest.param('- a list', 'Configuration document must be a mapping', id='not a mapping'),
    pytest.param('requests:\n  get:\n    method: GET\n', 'Field required', id='missing url'),
    pytest.param('requests:\n  get:\n    url: x\n    verb: GET\n', 'Extra inputs are not permitted', id='unknown field'),
    pytest.param('requests:\n  get:\n    url: x\n    body:\n      type: json\n', 'does not match any of the expected tags',
                 id='unknown body type'),
    pytest.param('requests:\n  get.posts:\n    url: x\n', 'String should match pattern', id='dotted request name'),
    pytest.param('tests:\n  t:\n    steps:\n      - name: s\n        request: r\n        asserts:\n'
                 '          - type: regex\n            key: k\n            value: "("\n',
                 'Invalid regular expression', id='invalid regex'),
))
def test_invalid_documents(content: str, message: str) -> None:
    """Report malformed documents as configuration errors."""
    with pytest.raises(ConfigError, match=message) as error:
        parse(content, filename='apictl.yaml')

    assert 'apictl.yaml' in str(error.value)


def test_load_directory(fs: 'FakeFilesystem') -> None:
    """Merge every YAML file of a directory in sorted order."""
    fs.create_file('/config/10-base.yaml', contents='''
contexts:
  local:
    base_url: http://localhost:3000
requests:
  ping:
    url: ${base_url}/ping
''')
    fs.create_file('/config/20-override.yml', contents='''
contexts:
  local:
    token: abc
requests:
  ping:
    url: ${base_url}/health
  list:
    url: ${base_url}/list
''')
    fs.create_file('/config/nested/30-tests.yaml', contents='''
tests:
  smoke:
    steps:
      - name: ping
        request: ping
''')
    fs.create_file('/config/README.md', contents='not: yaml: at all')

    document = load('/config')

    assert document.contexts == {'local': {'token': 'abc'}}
    assert document.requests['ping'].url == '${base_url}/health'
    assert list(document.requests) == ['ping', 'list']
    assert list(document.tests) == ['smoke']


def test_discover_order(fs: 'FakeFilesystem') -> None:
    """List YAML files below a directory in path order."""
    for name in ('/c/b.yaml', '/c/a.yml', '/c/sub/a.yaml', '/c/skip.json'):
        fs.create_file(name)

    paths = discover(Path('/c'))

    assert [path.as_posix() for path in paths] == ['/c/a.yml', '/c/b.yaml', '/c/sub/a.yaml']


def test_load_single_file(fs: 'FakeFilesystem') -> None:
    """Load a single configuration file."""
    fs.create_file('.apictl.yaml', contents='requests:\n  ping:\n    url: http://localhost/ping\n')

    assert list(load('.apictl.yaml').requests) == ['ping']


def test_load_missing(fs: 'FakeFilesystem') -> None:  # noqa: ARG001
    """Fail on a configuration path that does not exist."""
    with pytest.raises(ConfigError, match='Configuration not found'):
        load('/missing.yaml')


def test_error_location(fs: 'FakeFilesystem') -> None:
    """Point configuration errors to the file and line."""
    fs.create_file('/config/broken.yaml', contents='requests:\n  ping:\n    url: [\n')

    with pytest.raises(ConfigError) as error:
        load('/config')

    message = str(error.value)

    assert 'Invalid YAML' in message
    assert '/config/broken.yaml' in message
    assert 'line' in message


def test_mapping_key_names_definitions() -> None:
    """Name requests and tests after their mapping keys."""
    document = parse(
        'requests:\n  ping:\n    name: pong\n    url: x\n'
        'tests:\n  smoke:\n    name: other\n    steps: []\n',
    )

    assert document.requests['ping'].name == 'ping'
    assert document.tests['smoke'].name == 'smoke'
