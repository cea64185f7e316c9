import pytest

from algo_harness.tempfiles import TempFileGenerator


def test_files_are_removed_on_close(tmp_path):
    generator = TempFileGenerator(tmp_path / "spill")

    first = generator.get_temp_file()
    second = generator.get_temp_file()
    first.write_text("x", encoding="utf-8")

    assert first != second
    assert first.parent == tmp_path / "spill"
    assert generator.files == [first, second]

    generator.close()
    generator.close()

    assert not first.exists()
    assert not second.exists()
    # Requested directories belong to the operator.
    assert (tmp_path / "spill").is_dir()


def test_files_are_kept_without_cleanup(tmp_path):
    with TempFileGenerator(tmp_path, cleanup=False) as generator:
        path = generator.get_temp_file()

    assert path.exists()


def test_own_directory_is_removed():
    generator = TempFileGenerator()
    directory = generator.directory
    generator.get_temp_file()

    generator.close()

    assert not directory.exists()


def test_closed_generator_hands_out_nothing(tmp_path):
    generator = TempFileGenerator(tmp_path)
    generator.close()

    with pytest.raises(RuntimeError, match="closed"):
        generator.get_temp_file()
