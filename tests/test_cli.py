from vdrive.cli import main
from vdrive.disk import BLOCK_SIZE, HEADER_SIZE, load_header


def _make_disk(tmp_path, blocks="2"):
    path = tmp_path / "disk.img"
    assert main(["create", str(path), blocks]) == 0
    return path


def test_usage_when_too_few_arguments(capsys):
    assert main(["ls"]) == 1
    assert "Usage" in capsys.readouterr().out


def test_invalid_command(capsys):
    assert main(["frobnicate", "x"]) == 0
    assert "Invalid command or arguments." in capsys.readouterr().out


def test_wrong_argument_count(capsys, tmp_path):
    assert main(["create", str(tmp_path / "d.img")]) == 0
    assert "Invalid command or arguments." in capsys.readouterr().out


def test_create(capsys, tmp_path):
    path = _make_disk(tmp_path, "2")
    out = capsys.readouterr().out
    assert "created with size of 2 blocks" in out
    assert path.stat().st_size == 2 * BLOCK_SIZE + HEADER_SIZE


def test_create_parses_leading_digits(tmp_path):
    path = _make_disk(tmp_path, "3abc")
    assert path.stat().st_size == 3 * BLOCK_SIZE + HEADER_SIZE


def test_create_rejects_zero_blocks(capsys, tmp_path):
    assert main(["create", str(tmp_path / "d.img"), "zero"]) == 1
    assert "less than 1 data block" in capsys.readouterr().err


def test_copy_in_list_copy_out_remove(capsys, tmp_path):
    disk = _make_disk(tmp_path)
    host = tmp_path / "note.txt"
    host.write_bytes(b"hello disk")
    assert main(["copyin", str(disk), str(host)]) == 0
    assert "Copied 'note.txt' into virtual disk" in capsys.readouterr().out

    assert main(["ls", str(disk)]) == 0
    assert "note.txt" in capsys.readouterr().out

    out = tmp_path / "back.txt"
    assert main(["copyout", str(disk), "note.txt", str(out)]) == 0
    assert out.read_bytes() == b"hello disk"

    assert main(["rm", str(disk), "note.txt"]) == 0
    assert "removed from virtual disk" in capsys.readouterr().out
    with open(disk, "rb") as f:
        assert load_header(f).find("note.txt") is None


def test_copy_in_missing_disk_fails(capsys, tmp_path):
    host = tmp_path / "a"
    host.write_bytes(b"x")
    assert main(["copyin", str(tmp_path / "none.img"), str(host)]) == 1
    assert "Could not open virtual disk" in capsys.readouterr().err


def test_copy_in_long_name_is_not_fatal(capsys, tmp_path):
    disk = _make_disk(tmp_path)
    host = tmp_path / ("x" * 40)
    host.write_bytes(b"x")
    assert main(["copyin", str(disk), str(host)]) == 0
    assert "Filename too long!" in capsys.readouterr().err


def test_copy_out_missing_file(capsys, tmp_path):
    disk = _make_disk(tmp_path)
    assert main(["copyout", str(disk), "ghost", str(tmp_path / "o")]) == 0
    assert "File 'ghost' not found on virtual disk." in capsys.readouterr().err


def test_map(capsys, tmp_path):
    disk = _make_disk(tmp_path, "2")
    capsys.readouterr()
    assert main(["map", str(disk)]) == 0
    out = capsys.readouterr().out
    assert out.count("FREE") == 2
    assert "USED" not in out


def test_about(capsys, tmp_path):
    disk = _make_disk(tmp_path)
    assert main(["about", str(disk)]) == 0
    assert "Drive name:" in capsys.readouterr().out


def test_delete(capsys, tmp_path):
    disk = _make_disk(tmp_path)
    assert main(["delete", str(disk)]) == 0
    assert not disk.exists()
    assert f"Disk {disk} deleted." in capsys.readouterr().out