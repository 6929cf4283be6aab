"""Tests for settings persistence."""

import json
import logging
import os

import pytest

from reviewdiff.core.diff import WordDiffOptions
from reviewdiff.services.settings import (
    ApplicationSettings,
    OutputFormat,
    SettingsManager,
    WordDiffSettings,
)


class TestOutputFormat:
    """Tests for parsing output format names."""

    def test_from_value(self):
        assert OutputFormat.from_string('json') == OutputFormat.JSON

    def test_from_name(self):
        assert OutputFormat.from_string('TEXT') == OutputFormat.TEXT

    def test_unknown_falls_back_to_text(self):
        assert OutputFormat.from_string('yaml') == OutputFormat.TEXT


class TestSettingsManager:
    """Tests for loading and saving settings."""

    def test_defaults_when_missing(self, settings_path):
        settings = SettingsManager(settings_path).settings
        assert settings == ApplicationSettings()
        assert settings.word_diff.max_alignment_cells == 250_000
        assert settings.conflicts.show_base

    def test_save_and_load(self, settings_path):
        manager = SettingsManager(settings_path)
        settings = ApplicationSettings()
        settings.output.format = OutputFormat.JSON
        settings.word_diff.tab_size = 8
        settings.conflicts.show_base = False
        assert manager.save(settings)

        loaded = SettingsManager(settings_path).load()
        assert loaded.output.format == OutputFormat.JSON
        assert loaded.word_diff.tab_size == 8
        assert not loaded.conflicts.show_base

    def test_enums_stored_by_name(self, settings_path):
        manager = SettingsManager(settings_path)
        settings = ApplicationSettings()
        settings.output.format = OutputFormat.JSON
        manager.save(settings)
        data = json.loads(settings_path.read_text(encoding='utf-8'))
        assert data['output']['format'] == 'JSON'

    def test_partial_file_keeps_defaults(self, write_settings):
        path = write_settings({'word_diff': {'tab_size': 2}})
        settings = SettingsManager(path).load()
        assert settings.word_diff.tab_size == 2
        assert settings.word_diff.pair_only_mixed
        assert settings.output.format == OutputFormat.TEXT

    def test_unknown_enum_falls_back(self, write_settings):
        path = write_settings({'output': {'format': 'XML'}})
        assert SettingsManager(path).load().output.format == OutputFormat.TEXT

    def test_corrupt_file_uses_defaults(self, tmp_path, caplog):
        path = tmp_path / 'settings.json'
        path.write_text('{not json', encoding='utf-8')
        with caplog.at_level(logging.WARNING):
            settings = SettingsManager(path).load()
        assert settings == ApplicationSettings()
        assert 'Could not load settings' in caplog.text

    def test_non_object_root_uses_defaults(self, write_settings):
        path = write_settings([1, 2, 3])
        assert SettingsManager(path).load() == ApplicationSettings()

    def test_null_section_uses_defaults(self, write_settings):
        path = write_settings({'word_diff': None, 'output': {'format': 'JSON'}})
        settings = SettingsManager(path).load()
        assert settings.word_diff == WordDiffSettings()
        assert settings.output.format == OutputFormat.JSON

    def test_wrong_typed_values_use_defaults(self, write_settings):
        path = write_settings({
            'word_diff': {'tab_size': True, 'max_alignment_cells': '10'},
            'conflicts': {'show_base': 'no', 'ours_title': 3},
            'output': {'column_width': 'wide', 'color': 1, 'format': 5},
        })
        settings = SettingsManager(path).load()
        assert settings == ApplicationSettings()

    def test_null_alignment_budget_is_unbounded(self, write_settings):
        path = write_settings({'word_diff': {'max_alignment_cells': None}})
        assert SettingsManager(path).load().word_diff.max_alignment_cells is None

    def test_save_failure_returns_false(self, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('x', encoding='utf-8')
        manager = SettingsManager(blocker / 'settings.json')
        assert not manager.save(ApplicationSettings())

    def test_observers_notified(self, settings_path):
        manager = SettingsManager(settings_path)
        seen = []
        manager.add_observer(seen.append)
        manager.reset()
        assert seen == [ApplicationSettings()]

        manager.remove_observer(seen.append)
        manager.reset()
        assert len(seen) == 1

    @pytest.mark.skipif(os.name == 'nt', reason='APPDATA is used on Windows')
    def test_default_path_uses_xdg(self, monkeypatch, tmp_path):
        monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
        assert SettingsManager().settings_path == tmp_path / 'reviewdiff' / 'settings.json'


class TestWordDiffSettings:
    """Tests for converting settings to engine options."""

    def test_to_options(self):
        assert WordDiffSettings(max_alignment_cells=10).to_options() == WordDiffOptions(max_alignment_cells=10)

    def test_unbounded(self):
        assert WordDiffSettings(max_alignment_cells=None).to_options().max_alignment_cells is None
