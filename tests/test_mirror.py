"""Tests for the local prompt mirror."""

from latitude_mcp.core.mirror import LocalMirror


class TestLocalMirror:
    def test_filename_flattens_separators(self, tmp_path):
        mirror = LocalMirror(tmp_path)
        assert mirror.filename_for("agents/support/greeting") == "agents_support_greeting.promptl"
        assert mirror.filename_for("plain") == "plain.promptl"

    def test_clear_only_removes_mirror_files(self, tmp_path):
        (tmp_path / "old.promptl").write_text("x")
        (tmp_path / "notes.md").write_text("keep")
        mirror = LocalMirror(tmp_path)
        assert mirror.clear() == ["old.promptl"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.md"]

    def test_ensure_directory_creates_nested(self, tmp_path):
        mirror = LocalMirror(tmp_path / "x" / "y")
        mirror.ensure_directory()
        assert mirror.directory.is_dir()

    def test_write_and_load(self, tmp_path):
        mirror = LocalMirror(tmp_path)
        assert mirror.write("a/b", "content") == "a_b.promptl"
        loaded = mirror.load()
        assert [(p.name, p.content) for p in loaded] == [("a_b", "content")]

    def test_existing_files_missing_directory(self, tmp_path):
        assert LocalMirror(tmp_path / "missing").existing_files() == []

    def test_custom_extension(self, tmp_path):
        mirror = LocalMirror(tmp_path, extension=".txt")
        mirror.write("p", "1")
        assert (tmp_path / "p.txt").read_text() == "1"
