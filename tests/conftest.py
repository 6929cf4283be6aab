"""Shared test configuration for reviewdiff."""

import json

import pytest


@pytest.fixture
def structural_conflict():
    """One conflict between a common line before and after."""
    return '\n'.join([
        'before',
        '<<<<<<< HEAD',
        'ours',
        '=======',
        'theirs',
        '>>>>>>> branch',
        'after',
    ])


@pytest.fixture
def diff3_conflict():
    """A conflict with a ||||||| base section."""
    return '\n'.join([
        'line before',
        '<<<<<<< HEAD',
        'our change',
        '||||||| merged common ancestors',
        'original line',
        '=======',
        'their change',
        '>>>>>>> feature-branch',
        'line after',
    ])


@pytest.fixture
def adjacent_conflicts():
    """Two conflicts with no lines between them."""
    return '\n'.join([
        '<<<<<<< HEAD',
        'ours A',
        '=======',
        'theirs A',
        '>>>>>>> branch',
        '<<<<<<< HEAD',
        'ours B',
        '=======',
        'theirs B',
        '>>>>>>> branch',
    ])


@pytest.fixture
def sample_patch():
    """A git-style unified diff with two hunks."""
    return '\n'.join([
        'diff --git a/app.py b/app.py',
        'index 83db48f..bf269f4 100644',
        '--- a/app.py',
        '+++ b/app.py',
        '@@ -1,3 +1,3 @@ def main():',
        ' import os',
        '-x = compute(a, b)',
        '+x = compute(a, c)',
        ' print(x)',
        '@@ -10,2 +10,3 @@',
        ' return x',
        '+# done',
        ' end',
        '',
    ])


@pytest.fixture
def settings_path(tmp_path):
    """Path for a settings file that does not exist yet."""
    return tmp_path / 'config' / 'settings.json'


@pytest.fixture
def write_settings(tmp_path):
    """Write a settings document and return its path."""
    def _write(data):
        path = tmp_path / 'settings.json'
        path.write_text(json.dumps(data), encoding='utf-8')
        return path
    return _write
