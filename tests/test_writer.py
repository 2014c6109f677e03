"""Tests for writing generated files."""

from pathlib import Path
from tempfile import TemporaryDirectory

from phpts.writer import typescript_file_path, write_typescript_files


def test_typescript_file_path():
    assert typescript_file_path(Path("types"), "UserDTO") == Path("types/UserDTO.ts")


def test_writes_one_file_per_entity():
    with TemporaryDirectory() as tmpdir:
        written = write_typescript_files(tmpdir, {
            "UserDTO": "export interface UserDTO {\n}\n",
            "AddressDTO": "export interface AddressDTO {\n}\n",
        })

        assert [path.name for path in written] == ["UserDTO.ts", "AddressDTO.ts"]
        assert (Path(tmpdir) / "UserDTO.ts").read_text() == "export interface UserDTO {\n}\n"


def test_creates_missing_output_directory():
    with TemporaryDirectory() as tmpdir:
        output_dir = Path(tmpdir) / "frontend" / "types"

        write_typescript_files(output_dir, {"UserDTO": "x"})

        assert (output_dir / "UserDTO.ts").exists()


def test_overwrites_existing_files():
    with TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "UserDTO.ts").write_text("old")

        write_typescript_files(tmpdir, {"UserDTO": "new"})

        assert (Path(tmpdir) / "UserDTO.ts").read_text() == "new"


def test_empty_mapping_writes_nothing():
    with TemporaryDirectory() as tmpdir:
        assert write_typescript_files(tmpdir, {}) == []
