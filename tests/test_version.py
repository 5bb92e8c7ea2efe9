import pytest

from kindtool import version as v


@pytest.mark.parametrize(
    "value, max_len, expected",
    [
        ("A Really Long String", 1, "A"),
        ("A Short String", 10, "A Short St"),
        ("Under Max Length String", 1000, "Under Max Length String"),
    ],
)
def test_truncate(value, max_len, expected):
    result = v.truncate(value, max_len)
    assert len(result) <= max_len
    assert result == expected


@pytest.mark.parametrize(
    "core, pre_release, commit, commit_count, want",
    [
        ("v0.27.0", "alpha", "mocked-hash", "mocked-count", "v0.27.0-alpha.mocked-count+mocked-hash"),
        ("v0.27.0", "beta", "mocked-hash", "", "v0.27.0-beta+mocked-hash"),
        ("v0.30.0", "alpha", "", "mocked-count", "v0.30.0-alpha.mocked-count"),
        ("v0.27.0", "alpha", "", "", "v0.27.0-alpha"),
        ("v0.27.0", "", "", "", "v0.27.0"),
        ("v0.27.0", "", "mocked-commit", "mocked-count", "v0.27.0"),
    ],
)
def test_build_version(core, pre_release, commit, commit_count, want):
    assert v.build_version(core, pre_release, commit, commit_count) == want


def test_build_version_truncates_commit_hash():
    result = v.build_version("1.0.0", "alpha", "0123456789abcdef0123", "")
    assert result == "1.0.0-alpha+" + "0123456789abcdef0123"[:14]


def test_version_uses_core_and_pre_release():
    assert v.version().startswith(v.VERSION_CORE + "-" + v.VERSION_PRE_RELEASE)


def test_display_version_contains_version():
    assert v.display_version().startswith("kind v" + v.version() + " ")


def test_main_quiet_prints_semver(capsys):
    assert v.main(["-q"]) == 0
    assert capsys.readouterr().out == v.version() + "\n"


def test_main_prints_display_version(capsys):
    assert v.main([]) == 0
    assert capsys.readouterr().out == v.display_version() + "\n"