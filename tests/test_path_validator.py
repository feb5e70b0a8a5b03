import pytest

from path_validator import validate_path


def test_missing_file(tmp_path):
    assert validate_path(str(tmp_path / "nope.exe")) == (False, "File does not exist")
    assert validate_path("") == (False, "File does not exist")


def test_directory_is_rejected(tmp_path):
    assert validate_path(str(tmp_path)) == (False, "Selected path is not a file")


@pytest.mark.parametrize("name, kind", [
    ("SPT.Server.exe", "server"),
    ("aki.server.exe", "server"),
    ("SPT.Launcher.exe", "client"),
    ("Launcher.EXE", "client"),
])
def test_known_names_are_valid(tmp_path, touch, name, kind):
    assert validate_path(touch(tmp_path / name), kind) == (True, None)


def test_wrong_role_lists_expected_names(tmp_path, touch):
    launcher = touch(tmp_path / "SPT.Launcher.exe")
    valid, error = validate_path(launcher, "server")
    assert not valid
    assert error.startswith("Invalid server executable. Expected one of: ")
    assert "SPT.Server.exe" in error

    valid, error = validate_path(touch(tmp_path / "notepad.exe"), "client")
    assert not valid
    assert error.startswith("Invalid client launcher. Expected one of: ")


def test_existence_only_without_kind(tmp_path, touch):
    assert validate_path(touch(tmp_path / "readme.txt")) == (True, None)
