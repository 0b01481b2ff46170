# Path: catalog_validator/tests/test_file_enumerator.py
"""File enumerator tests: include/exclude patterns and default excludes."""

import pytest

from catalog_validator.artifacts.file_enumerator import enumerate_files, match_path, tokenize_pattern
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.tests.fixtures import write_text


@pytest.mark.parametrize('pattern, path, expected', [
    ('**/*.xml', 'a.xml', True),
    ('**/*.xml', 'docs/api/v1.xml', True),
    ('docs/*.xml', 'docs/api/v1.xml', False),
    ('docs/**/*.xml', 'docs/v1.xml', True),
    ('docs/', 'docs/api/v1.xml', True),
    ('?.xml', 'a.xml', True),
    ('?.xml', 'ab.xml', False),
    ('**/test/**', 'src/test/data/a.xml', True),
    ('**/test/**', 'src/tests/a.xml', False),
])
def test_match_path(pattern, path, expected):
    assert match_path(pattern, path) is expected, f"{pattern!r} vs {path!r}"


def test_tokenize_pattern():
    assert tokenize_pattern('docs/') == ('docs', '**')
    assert tokenize_pattern('docs\\api\\*.xml') == ('docs', 'api', '*.xml')


def make_tree(base):
    for relative in (
        'a.xml',
        'docs/b.xml',
        'docs/notes.txt',
        'docs/draft/c.xml',
        '.git/config.xml',
        'docs/b.xml~',
    ):
        write_text(base / relative, '<x/>')


def test_default_include_selects_everything_but_scm_files(tmp_path):
    make_tree(tmp_path)

    found = [p.relative_to(tmp_path.resolve()).as_posix() for p in enumerate_files(tmp_path)]

    assert found == ['a.xml', 'docs/b.xml', 'docs/draft/c.xml', 'docs/notes.txt']


def test_includes_and_excludes(tmp_path):
    make_tree(tmp_path)

    found = enumerate_files(tmp_path, includes=['**/*.xml'], excludes=['**/draft/**'])

    assert [p.name for p in found] == ['a.xml', 'b.xml']
    assert all(p.is_absolute() for p in found)


def test_default_excludes_can_be_disabled(tmp_path):
    make_tree(tmp_path)

    found = enumerate_files(tmp_path, includes=['**/*.xml'], default_excludes=False)

    assert '.git/config.xml' in [p.relative_to(tmp_path.resolve()).as_posix() for p in found]


def test_missing_base_directory(tmp_path):
    with pytest.raises(CatalogConfigurationError):
        enumerate_files(tmp_path / 'missing')
