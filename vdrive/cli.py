"""Command-line front end for virtual disk images."""

from __future__ import annotations

import re
import sys
from typing import Callable

from .disk import (
    DiskError,
    about_drive,
    copy_in,
    copy_out,
    create_disk,
    delete_disk,
    list_directory,
    remove_file,
    show_map,
)

USAGE = "Usage: vdrive [command] [args...]"


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _create(name: str, count: str) -> None:
    blocks = _atoi(count)
    header = create_disk(name, blocks)
    print(
        f"Disk \033[0;33m{name}\033[0m created with size of {blocks} blocks "
        f"({header.size} bytes including header)."
    )


def _delete(name: str) -> None:
    delete_disk(name)
    print(f"Disk {name} deleted.")


def _copy_in(disk: str, host: str) -> None:
    entry = copy_in(disk, host)
    print(
        f"Copied '{entry.name}' into virtual disk ({entry.size} bytes, "
        f"blocks {entry.start_block}-{entry.end_block})."
    )


def _copy_out(disk: str, name: str, output: str) -> None:
    copy_out(disk, name, output)
    print(f"Copied '{name}' from virtual disk to '{output}'.")


def _remove(disk: str, name: str) -> None:
    remove_file(disk, name)
    print(f"File '{name}' removed from virtual disk.")


def _list(disk: str) -> None:
    entries = list_directory(disk)
    rule = "=" * 87
    line = "-" * 87
    print(rule)
    print("\033[0;32m" + " " * 34 + "Directory contents" + " " * 35 + "\033[0m")
    print(rule + "\n")
    print(line)
    print("| File number |     File name [with extention]   | Size [bytes] |  Location (blocks)  |")
    print(line)
    for index, entry in entries:
        print(
            f"| {index:10d}. | {entry.name:>32} | {entry.size:10d} B |"
            f"  {entry.start_block:6d}  -  {entry.end_block:6d}  |"
        )


def _map(disk: str) -> None:
    rows = show_map(disk)
    rule = "=" * 51
    print(rule)
    print("\033[0;34m                 Disk data block map               \033[0m")
    print(rule + "\n")
    print("-" * 51)
    print("| Block number |    Adress range [dec]   | Status |")
    print("-" * 51)
    for row in rows:
        status = "USED" if row.used else "FREE"
        print(f"|{row.number:13d} | {row.start:10d} - {row.end:10d} |  {status}  |")


def _about(disk: str) -> None:
    print(about_drive(disk))


_COMMANDS: dict[str, tuple[int, Callable[..., None]]] = {
    "create": (2, _create),
    "delete": (1, _delete),
    "copyin": (2, _copy_in),
    "copyout": (3, _copy_out),
    "rm": (2, _remove),
    "ls": (1, _list),
    "about": (1, _about),
    "map": (1, _map),
}


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print(USAGE)
        return 1

    command, rest = args[0], args[1:]
    spec = _COMMANDS.get(command)
    if spec is None or spec[0] != len(rest):
        print("Invalid command or arguments.")
        return 0

    try:
        spec[1](*rest)
    except DiskError as exc:
        print(exc, file=sys.stderr)
        if command == "create":
            return 1
        if command == "copyin" and isinstance(exc.__cause__, OSError):
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())