"""Tests for lnkrecord.resolver."""

import os

from lnkrecord.resolver import resolve_path


def _exists_only(*paths):
    wanted = {os.path.normpath(p) for p in paths}
    return lambda p: os.path.normpath(p) in wanted


class TestResolvePath:
    """Order of the candidates tried for a relative hint."""

    def test_cached_wins(self):
        assert resolve_path("app.exe", "/links", "/opt", cached="/cached") == "/cached"

    def test_no_hint(self):
        assert resolve_path(None, "/links", "/opt") is None
        assert resolve_path("", "/links", "/opt") is None

    def test_link_dir_first(self):
        exists = _exists_only("/links/app.exe", "/opt/app/app.exe")
        result = resolve_path("app.exe", "/links", "/opt/app", exists=exists)
        assert result == os.path.abspath("/links/app.exe")

    def test_working_dir_second(self):
        exists = _exists_only("/opt/app/app.exe")
        result = resolve_path("app.exe", "/links", "/opt/app", exists=exists)
        assert result == os.path.abspath("/opt/app/app.exe")

    def test_fallback_is_hint(self):
        result = resolve_path("app.exe", "/links", "/opt/app", exists=lambda p: False)
        assert result == "app.exe"

    def test_missing_bases_skipped(self):
        result = resolve_path("app.exe", None, None, exists=lambda p: True)
        assert result == "app.exe"

    def test_canonicalizes(self):
        exists = _exists_only("/opt/app/bin/app.exe")
        result = resolve_path(
            "../bin/app.exe", "/links", "/opt/app/lib", exists=exists,
        )
        assert result == os.path.abspath("/opt/app/bin/app.exe")

    def test_backslash_hint(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "app.exe").write_bytes(b"MZ")
        result = resolve_path("sub\\app.exe", str(tmp_path), None)
        assert result == str(tmp_path / "sub" / "app.exe")

    def test_real_filesystem(self, tmp_path):
        (tmp_path / "app.exe").write_bytes(b"MZ")
        assert resolve_path("app.exe", str(tmp_path), None) == str(tmp_path / "app.exe")

    def test_exists_error_is_not_found(self):
        def exists(path):
            raise OSError("permission denied")

        assert resolve_path("app.exe", "/links", "/opt", exists=exists) == "app.exe"

    def test_canonicalize_error_keeps_candidate(self):
        def canonicalize(path):
            raise ValueError("bad path")

        result = resolve_path(
            "app.exe", "/links", None, exists=lambda p: True, canonicalize=canonicalize
        )
        assert result == os.path.join("/links", "app.exe")
