import dataclasses

import pytest

from exe_to_msi.request import InstallerRequest, InvalidRequest, normalize_package_name


class TestNormalizePackageName:
    @pytest.mark.parametrize(
        "raw",
        ["App", "App.msi", "App.MSI", "App.msi.msi", "App .msi", " My App ", "Tool.msix", "x"],
    )
    def test_idempotent(self, raw):
        once = normalize_package_name(raw)
        assert normalize_package_name(once) == once

    def test_suffix_is_optional(self):
        assert normalize_package_name("App") == normalize_package_name("App.msi") == "App"

    def test_suffix_case_insensitive(self):
        assert normalize_package_name("App.MSI") == "App"

    def test_only_trailing_suffix_removed(self):
        assert normalize_package_name("my.msi.tools") == "my.msi.tools"


class TestInstallerRequest:
    def test_name_stored_without_extension(self):
        req = InstallerRequest(exe_path="C:\\a\\b.exe", exe_arguments="", package_name="App.msi", package_version="1.0.0.1")

        assert req.package_name == "App"
        assert req.msi_file_name == "App.msi"

    @pytest.mark.parametrize("version", ["1.0.0", "1.0.0.1.2", "1.0.0.a", "v1.0.0.1", "", "1..0.1", "1.0.0.1\n", "1.0.0.1 "])
    def test_rejects_bad_version(self, version):
        with pytest.raises(InvalidRequest):
            InstallerRequest(exe_path="C:\\a\\b.exe", exe_arguments="", package_name="App", package_version=version)

    def test_rejects_empty_name(self):
        with pytest.raises(InvalidRequest):
            InstallerRequest(exe_path="C:\\a\\b.exe", exe_arguments="", package_name=".msi", package_version="1.0.0.1")

    @pytest.mark.parametrize(
        "field, value",
        [
            ("exe_arguments", "/quiet\x00"),
            ("exe_arguments", "/log \x1b[31m"),
            ("exe_path", "C:\\a\\b\x07.exe"),
            ("package_name", "Ap\x0cp"),
            ("package_name", "App\ufffe"),
        ],
    )
    def test_rejects_characters_not_allowed_in_xml(self, field, value):
        fields = dict(exe_path="C:\\a\\b.exe", exe_arguments="", package_name="App", package_version="1.0.0.1")
        fields[field] = value

        with pytest.raises(InvalidRequest, match=field):
            InstallerRequest(**fields)

    def test_allows_tab_in_arguments(self):
        req = InstallerRequest(exe_path="C:\\a\\b.exe", exe_arguments="/a\t/b", package_name="App", package_version="1.0.0.1")

        assert req.exe_arguments == "/a\t/b"

    def test_is_immutable(self):
        req = InstallerRequest(exe_path="C:\\a\\b.exe", exe_arguments="", package_name="App", package_version="1.0.0.1")

        with pytest.raises(dataclasses.FrozenInstanceError):
            req.package_name = "Other"

    def test_create_resolves_existing_exe(self, exe_file, monkeypatch):
        monkeypatch.chdir(exe_file.parent)

        req = InstallerRequest.create(
            exe_path="setup.exe",
            exe_arguments=None,
            package_name="App",
            package_version="1.2.3.4",
        )

        assert req.exe_path == str(exe_file.resolve())
        assert req.exe_name == "setup.exe"
        assert req.work_dir == exe_file.resolve().parent
        assert req.exe_arguments == ""

    def test_create_strips_surrounding_quotes(self, exe_file):
        req = InstallerRequest.create(
            exe_path=str(exe_file),
            exe_arguments='"/quiet /norestart"',
            package_name="App",
            package_version="1.0.0.1",
        )

        assert req.exe_arguments == "/quiet /norestart"

    def test_create_rejects_missing_exe(self, tmp_path):
        with pytest.raises(InvalidRequest, match="Executable not found"):
            InstallerRequest.create(
                exe_path=str(tmp_path / "nope.exe"),
                exe_arguments="",
                package_name="App",
                package_version="1.0.0.1",
            )
