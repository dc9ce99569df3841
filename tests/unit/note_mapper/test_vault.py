"""Unit tests for note_mapper.vault module."""

import os

import pytest

from src.note_mapper.errors import FilesystemError, VaultPathError
from src.note_mapper.vault import Vault, normalize_path


class TestNormalizePath:

    @pytest.mark.parametrize("path, expected", [
        ("Instapaper Notes//Article.md", "Instapaper Notes/Article.md"),
        ("/notes/", "notes"),
        ("a\\b\\c.md", "a/b/c.md"),
        ("non\u00a0breaking\u202fspace", "non breaking space"),
        ("", "/"),
        ("///", "/"),
    ])
    def test_normalization(self, path, expected):
        assert normalize_path(path) == expected

    def test_nfc(self):
        decomposed = "Cafe\u0301.md"

        assert normalize_path(decomposed) == "Caf\u00e9.md"


class TestVaultFiles:

    def test_create_and_read(self, vault):
        note = vault.create_file("//note.md", "hello")

        assert note.path == "note.md"
        assert vault.read("note.md") == "hello"

    def test_create_existing_raises(self, vault):
        vault.create_file("note.md")

        with pytest.raises(FilesystemError) as exc_info:
            vault.create_file("note.md")

        assert exc_info.value.operation == 'create'

    def test_get_file_by_path(self, vault):
        assert vault.get_file_by_path("missing.md") is None

        vault.create_file("present.md")

        note = vault.get_file_by_path("/present.md")
        assert note is not None
        assert note.path == "present.md"
        assert note.basename == "present"

    def test_folder_is_not_a_file(self, vault):
        vault.create_folder("Notes")

        assert vault.exists("Notes")
        assert vault.get_file_by_path("Notes") is None

    def test_append(self, vault):
        vault.create_file("note.md", "a\n")
        vault.append("note.md", "b\n")

        assert vault.read("note.md") == "a\nb\n"

    def test_modify_replaces_content_without_leftovers(self, vault):
        vault.create_file("note.md", "old")

        vault.modify("note.md", "new")

        assert vault.read("note.md") == "new"
        assert os.listdir(vault.root) == ["note.md"]

    def test_line_endings_preserved(self, vault):
        vault.create_file("note.md", "a\r\nb\r\n")

        assert vault.read("note.md") == "a\r\nb\r\n"

    def test_read_missing_raises(self, vault):
        with pytest.raises(FilesystemError):
            vault.read("missing.md")

    def test_path_traversal_rejected(self, vault):
        with pytest.raises(FilesystemError, match="Path traversal"):
            vault.create_file("../outside.md")

    def test_nul_in_path_rejected(self, vault):
        with pytest.raises(VaultPathError) as exc_info:
            vault.read("a\x00b.md")

        assert exc_info.value.operation == 'validate'

    def test_unencodable_content_raises_filesystem_error(self, vault):
        vault.create_file("note.md", "")

        with pytest.raises(FilesystemError):
            vault.append("note.md", "lone \ud800 surrogate")
