from __future__ import annotations

import pytest

from conftest import read_plist
from core.domain.errors import ConfigurationError
from core.domain.models import BranchKeys
from core.services.info_plist import InfoPlistUpdater


@pytest.fixture
def info_plist_path(tmp_path):
    return (tmp_path / "Sample" / "Info.plist").resolve()


def test_single_live_key_is_stored_as_string(sample_project, info_plist_path):
    updater = InfoPlistUpdater(sample_project)
    path = updater.set_branch_keys("Sample", BranchKeys(live="key_live_abc"), "Release")

    assert path == info_plist_path
    assert read_plist(path) == {"CFBundleName": "Sample", "branch_key": "key_live_abc"}
    assert updater.changes.paths == [info_plist_path]


def test_single_test_key_is_stored_as_string(sample_project, info_plist_path):
    InfoPlistUpdater(sample_project).set_branch_keys(None, BranchKeys(test="key_test_abc"), "Release")
    assert read_plist(info_plist_path)["branch_key"] == "key_test_abc"


def test_both_keys_are_stored_as_mapping(sample_project, info_plist_path):
    keys = BranchKeys(live="key_live_abc", test="key_test_abc")
    InfoPlistUpdater(sample_project).set_branch_keys(None, keys, "Release")
    assert read_plist(info_plist_path)["branch_key"] == {"live": "key_live_abc", "test": "key_test_abc"}


def test_no_keys_raises(sample_project):
    with pytest.raises(ConfigurationError):
        InfoPlistUpdater(sample_project).set_branch_keys(None, BranchKeys(), "Release")


def test_universal_link_domains_are_written(sample_project, info_plist_path):
    domains = ["example.app.link", "links.example.com"]
    updater = InfoPlistUpdater(sample_project)
    assert updater.set_universal_link_domains(None, domains, "Release") == info_plist_path
    assert read_plist(info_plist_path)["branch_universal_link_domains"] == domains


def test_short_link_only_domains_leave_plist_untouched(sample_project, info_plist_path):
    before = info_plist_path.read_bytes()
    updater = InfoPlistUpdater(sample_project)

    result = updater.set_universal_link_domains(None, ["a.app.link", "a-alternate.app.link"], "Release")

    assert result is None
    assert info_plist_path.read_bytes() == before
    assert len(updater.changes) == 0


def test_custom_short_link_suffix(sample_project, info_plist_path):
    updater = InfoPlistUpdater(sample_project, short_link_suffix="test-app.link")
    assert updater.set_universal_link_domains(None, ["x.test-app.link"], "Release") is None
    assert updater.set_universal_link_domains(None, ["x.app.link"], "Release") == info_plist_path


def test_missing_infoplist_setting_raises(sample_project):
    with pytest.raises(ConfigurationError, match="Info.plist not found for configuration Debug"):
        InfoPlistUpdater(sample_project).set_universal_link_domains(None, ["example.com"], "Debug")


def test_malformed_infoplist_raises(sample_project, info_plist_path):
    info_plist_path.write_bytes(b"not a plist")
    with pytest.raises(ConfigurationError, match="Failed to parse"):
        InfoPlistUpdater(sample_project).set_branch_keys(None, BranchKeys(live="k"), "Release")


class TestCheckWritable:
    def test_returns_path_without_writing(self, sample_project, info_plist_path):
        before = info_plist_path.read_bytes()
        updater = InfoPlistUpdater(sample_project)

        path = updater.check_writable(None, ["links.example.com"], BranchKeys(), "Release")

        assert path == info_plist_path
        assert info_plist_path.read_bytes() == before
        assert len(updater.changes) == 0

    def test_nothing_to_write_skips_lookup(self, sample_project):
        updater = InfoPlistUpdater(sample_project)
        assert updater.check_writable(None, ["a.app.link"], BranchKeys(), "Debug") is None

    def test_keys_require_info_plist(self, sample_project):
        with pytest.raises(ConfigurationError, match="Info.plist not found for configuration Debug"):
            InfoPlistUpdater(sample_project).check_writable(None, ["a.app.link"], BranchKeys(live="k"), "Debug")

    def test_malformed_info_plist_raises(self, sample_project, info_plist_path):
        info_plist_path.write_bytes(b"not a plist")
        with pytest.raises(ConfigurationError, match="Failed to parse"):
            InfoPlistUpdater(sample_project).check_writable(None, ["links.example.com"], BranchKeys(), "Release")
