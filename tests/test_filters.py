"""Tests for directory filtering."""

from pathlib import Path, PurePosixPath

from depsweep.filters import PathFilter, is_dangerous
from depsweep.models import ScanConfig


def make_filter(**kwargs) -> PathFilter:
    return PathFilter(ScanConfig(root=Path("/root"), **kwargs))


class TestShouldEnter:
    def test_enters_ordinary_directory(self):
        assert make_filter().should_enter(PurePosixPath("/root/project"))

    def test_skips_excluded_name(self):
        path_filter = make_filter(exclude=frozenset({"vendor"}))
        assert not path_filter.should_enter(PurePosixPath("/root/vendor"))
        assert path_filter.should_enter(PurePosixPath("/root/vendored"))

    def test_exclude_matches_basename_not_substring(self):
        """An entry like 'b' must not exclude every path containing a 'b'."""
        path_filter = make_filter(exclude=frozenset({"b"}))
        assert path_filter.should_enter(PurePosixPath("/root/abc"))
        assert not path_filter.should_enter(PurePosixPath("/root/x/b"))

    def test_skips_excluded_fragment(self):
        path_filter = make_filter(exclude=frozenset({"work/legacy"}))
        assert not path_filter.should_enter(PurePosixPath("/root/work/legacy"))
        assert path_filter.should_enter(PurePosixPath("/root/home/legacy"))
        assert path_filter.should_enter(PurePosixPath("/root/work"))

    def test_hidden_directories_entered_by_default(self):
        assert make_filter().should_enter(PurePosixPath("/root/.cache"))

    def test_skips_hidden_when_requested(self):
        path_filter = make_filter(exclude_hidden=True)
        assert not path_filter.should_enter(PurePosixPath("/root/.cache"))
        assert path_filter.should_enter(PurePosixPath("/root/cache"))


class TestIsTarget:
    def test_exact_name(self):
        assert make_filter().is_target(PurePosixPath("/root/app/node_modules"))

    def test_case_sensitive(self):
        assert not make_filter().is_target(PurePosixPath("/root/app/Node_Modules"))

    def test_custom_target(self):
        path_filter = make_filter(target_name="target")
        assert path_filter.is_target(PurePosixPath("/root/crate/target"))
        assert not path_filter.is_target(PurePosixPath("/root/crate/node_modules"))

    def test_excluded_target_is_not_entered(self):
        """A directory both named like the target and excluded is skipped."""
        path_filter = make_filter(exclude=frozenset({"node_modules"}))
        path = PurePosixPath("/root/app/node_modules")
        assert path_filter.is_target(path)
        assert not path_filter.should_enter(path)


class TestIsDangerous:
    def test_hidden_file_unix(self):
        assert is_dangerous("/home/user/.hidden_dir/node_modules")

    def test_hidden_directory_windows(self):
        assert is_dangerous("C:\\Users\\user\\.hidden_dir\\node_modules")

    def test_mac_app_bundle(self):
        assert is_dangerous("/Applications/MyApp.app/Contents/Resources/node_modules")

    def test_windows_app_data(self):
        assert is_dangerous("C:\\Users\\user\\AppData\\Local\\node_modules")

    def test_safe_path_unix(self):
        assert not is_dangerous("/home/user/projects/web/node_modules")

    def test_safe_path_windows(self):
        assert not is_dangerous("C:\\Users\\user\\Documents\\node_modules")

    def test_root_path(self):
        assert not is_dangerous("/")

    def test_empty_path(self):
        assert not is_dangerous("")

    def test_dot_paths(self):
        assert not is_dangerous(".")
        assert not is_dangerous("..")
