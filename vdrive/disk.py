"""Virtual disk image: a fixed-size header followed by equally sized data blocks."""

from __future__ import annotations

import os
import struct
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, NamedTuple

MAX_DISK_NAME = 32
MAX_FILENAME = 32
MAX_FILES = 128
BLOCK_SIZE = 4096
MAX_BLOCKS = 25600
MIN_BLOCKS = 1
HEADER_SIZE = 31808

_PREFIX = struct.Struct("<32sQ5I")
_ENTRY = struct.Struct("<32s4i")
_COUNT = struct.Struct("<i")


class DiskError(Exception):
    """Raised when a virtual disk operation cannot be carried out."""


def _encode_name(text: str, limit: int) -> bytes:
    return os.fsencode(text)[:limit]


def _decode_name(raw: bytes) -> str:
    return os.fsdecode(raw.split(b"\0", 1)[0])


@dataclass
class FileEntry:
    """One directory slot describing a file stored in contiguous blocks."""

    name: str = ""
    size: int = 0
    start_block: int = 0
    block_count: int = 0
    valid: bool = False

    @property
    def end_block(self) -> int:
        return self.start_block + self.block_count - 1

    def _pack(self) -> bytes:
        return _ENTRY.pack(
            _encode_name(self.name, MAX_FILENAME),
            self.size,
            self.start_block,
            self.block_count,
            int(self.valid),
        )

    @classmethod
    def _unpack(cls, raw: bytes) -> FileEntry:
        name, size, start, count, valid = _ENTRY.unpack(raw)
        return cls(_decode_name(name), size, start, count, bool(valid))


@dataclass
class DiskHeader:
    """The header stored at the start of every disk image."""

    disk_name: str
    size: int
    max_filename: int = MAX_FILENAME
    max_files: int = MAX_FILES
    block_size: int = BLOCK_SIZE
    max_blocks: int = MAX_BLOCKS
    header_size: int = HEADER_SIZE
    files: list[FileEntry] = field(default_factory=list)
    block_map: bytearray = field(default_factory=lambda: bytearray(MAX_BLOCKS))

    def pack(self) -> bytes:
        """Serialise the header into exactly HEADER_SIZE bytes."""
        if len(self.files) > MAX_FILES:
            raise DiskError("Directory full.")
        padding = [FileEntry() for _ in range(MAX_FILES - len(self.files))]
        block_map = bytes(self.block_map)[:MAX_BLOCKS].ljust(MAX_BLOCKS, b"\0")
        return b"".join(
            [
                _PREFIX.pack(
                    _encode_name(self.disk_name, MAX_DISK_NAME - 1),
                    self.size,
                    self.max_filename,
                    self.max_files,
                    self.block_size,
                    self.max_blocks,
                    self.header_size,
                ),
                *(entry._pack() for entry in [*self.files, *padding]),
                _COUNT.pack(len(self.files)),
                block_map,
            ]
        )

    @classmethod
    def unpack(cls, data: bytes) -> DiskHeader:
        """Parse a header from the first HEADER_SIZE bytes of ``data``."""
        if len(data) < HEADER_SIZE:
            raise DiskError("Not a virtual disk: header is truncated.")
        name, size, max_filename, max_files, block_size, max_blocks, header_size = (
            _PREFIX.unpack_from(data, 0)
        )
        entries_offset = _PREFIX.size
        count_offset = entries_offset + MAX_FILES * _ENTRY.size
        (count,) = _COUNT.unpack_from(data, count_offset)
        count = max(0, min(count, MAX_FILES))
        files = [
            FileEntry._unpack(
                data[entries_offset + i * _ENTRY.size : entries_offset + (i + 1) * _ENTRY.size]
            )
            for i in range(count)
        ]
        map_offset = count_offset + _COUNT.size
        return cls(
            disk_name=_decode_name(name),
            size=size,
            max_filename=max_filename,
            max_files=max_files,
            block_size=block_size,
            max_blocks=max_blocks,
            header_size=header_size,
            files=files,
            block_map=bytearray(data[map_offset : map_offset + MAX_BLOCKS]),
        )

    def find(self, name: str) -> FileEntry | None:
        """Return the first valid entry with this name, if any."""
        return next((e for e in self.files if e.valid and e.name == name), None)

    def data_block_count(self) -> int:
        """Number of data blocks that follow the header."""
        if self.block_size <= 0:
            raise DiskError("Not a virtual disk: invalid block size.")
        blocks = (self.size - self.header_size) // self.block_size
        return max(0, min(blocks, len(self.block_map)))


class BlockStatus(NamedTuple):
    number: int
    start: int
    end: int
    used: bool


def base_name(path: str) -> str:
    """Return the last component of ``path``, splitting on '/', '\\' and ':'."""
    cut = max(path.rfind(sep) for sep in "/\\:")
    return path[cut + 1 :]


def load_header(disk: BinaryIO) -> DiskHeader:
    disk.seek(0)
    return DiskHeader.unpack(disk.read(HEADER_SIZE))


def save_header(disk: BinaryIO, header: DiskHeader) -> None:
    disk.seek(0)
    disk.write(header.pack())


@contextmanager
def _open_disk(name: str, mode: str) -> Iterator[BinaryIO]:
    try:
        disk = open(name, mode)
    except OSError as exc:
        raise DiskError(f"Could not open virtual disk: {exc.strerror}") from exc
    with disk:
        yield disk


def _copy_bytes(src: BinaryIO, dst: BinaryIO, count: int) -> None:
    remaining = count
    while remaining > 0:
        chunk = src.read(min(BLOCK_SIZE, remaining))
        if not chunk:
            break
        dst.write(chunk)
        remaining -= len(chunk)


def _first_fit(header: DiskHeader, blocks_needed: int) -> int | None:
    last_start = header.data_block_count() - blocks_needed
    for start in range(last_start + 1):
        if not any(header.block_map[start : start + blocks_needed]):
            return start
    return None


def create_disk(name: str, block_count: int) -> DiskHeader:
    """Create a zero-filled disk image holding ``block_count`` data blocks."""
    if block_count > MAX_BLOCKS:
        raise DiskError(
            f"Disk size cannot be greater than {MAX_BLOCKS * BLOCK_SIZE} bytes! "
            f"So maximum number of blocks is {MAX_BLOCKS}"
        )
    if block_count < MIN_BLOCKS:
        raise DiskError("Disk cannot have less than 1 data block!")
    header = DiskHeader(disk_name=name, size=block_count * BLOCK_SIZE + HEADER_SIZE)
    try:
        with open(name, "wb") as disk:
            disk.write(header.pack())
            disk.truncate(header.size)
    except OSError as exc:
        raise DiskError(f"Error creating disk: {exc.strerror}") from exc
    return header


def delete_disk(name: str) -> None:
    try:
        os.remove(name)
    except OSError as exc:
        raise DiskError(f"Error deleting disk: {exc.strerror}") from exc


def copy_in(disk_name: str, host_path: str) -> FileEntry:
    """Store a host file in the first run of free blocks large enough for it."""
    with _open_disk(disk_name, "r+b") as disk:
        try:
            src = open(host_path, "rb")
        except OSError as exc:
            raise DiskError(f"Could not open host file: {exc.strerror}") from exc
        with src:
            file_size = os.fstat(src.fileno()).st_size
            blocks_needed = -(-file_size // BLOCK_SIZE)
            header = load_header(disk)
            name = base_name(host_path)
            if len(os.fsencode(name)) > header.max_filename:
                raise DiskError("Filename too long!")
            if len(header.files) >= MAX_FILES:
                raise DiskError("Directory full.")
            start = _first_fit(header, blocks_needed)
            if start is None:
                raise DiskError("Not enough space on virtual disk.")

            disk.seek(HEADER_SIZE + start * BLOCK_SIZE)
            _copy_bytes(src, disk, file_size)

            header.block_map[start : start + blocks_needed] = b"\x01" * blocks_needed
            entry = FileEntry(name, file_size, start, blocks_needed, True)
            header.files.append(entry)
            save_header(disk, header)
    return entry


def copy_out(disk_name: str, file_name: str, output: str) -> FileEntry:
    """Write the contents of a stored file to ``output`` on the host."""
    with _open_disk(disk_name, "rb") as disk:
        header = load_header(disk)
        entry = header.find(file_name)
        if entry is None:
            raise DiskError(f"File '{file_name}' not found on virtual disk.")
        try:
            dst = open(output, "wb")
        except OSError as exc:
            raise DiskError(f"Could not create output file: {exc.strerror}") from exc
        with dst:
            disk.seek(HEADER_SIZE + entry.start_block * BLOCK_SIZE)
            _copy_bytes(disk, dst, entry.size)
    return entry


def remove_file(disk_name: str, file_name: str) -> FileEntry:
    """Free a stored file's blocks and mark its directory slot invalid."""
    with _open_disk(disk_name, "r+b") as disk:
        header = load_header(disk)
        entry = header.find(file_name)
        if entry is None:
            raise DiskError(f"File '{file_name}' not found on virtual disk.")
        end = entry.start_block + entry.block_count
        header.block_map[entry.start_block : end] = bytes(entry.block_count)
        entry.valid = False
        save_header(disk, header)
    return entry


def list_directory(disk_name: str) -> list[tuple[int, FileEntry]]:
    """Return (slot index, entry) for every valid file on the disk."""
    with _open_disk(disk_name, "rb") as disk:
        header = load_header(disk)
    return [(index, entry) for index, entry in enumerate(header.files) if entry.valid]


def show_map(disk_name: str) -> list[BlockStatus]:
    """Return the address range and usage of every data block."""
    with _open_disk(disk_name, "rb") as disk:
        header = load_header(disk)
    size = header.block_size
    return [
        BlockStatus(i, i * size, (i + 1) * size, bool(header.block_map[i]))
        for i in range(header.data_block_count())
    ]


def about_drive(disk_name: str) -> str:
    """Return a formatted summary of the disk's header."""
    with _open_disk(disk_name, "rb") as disk:
        header = load_header(disk)
    rule = "======================================="
    lines = [
        f"\033[34;1m{rule}\033[0m",
        "\033[34;1mSummary information about virtual drive\033[0m",
        f"\033[34;1m{rule}\033[0m",
        "",
        rule,
        "\033[0;34m              General Info             \033[0m",
        rule,
        f"\033[0;34mDrive name:\033[0m {header.disk_name}",
        f"\033[0;34mDrive size [bytes]:\033[0m {header.size} ",
        f"\033[0;34mSaved files:\033[0m {len(header.files)} ",
        "",
        rule,
        "\033[0;37m          Drive settings Info                  \033[0m",
        rule,
        f"\033[0;37mMax filename length:\033[0m {header.max_filename}",
        f"\033[0;37mMax files in drive:\033[0m {header.max_files} ",
        f"\033[0;37mMax blocks:\033[0m {header.max_blocks} ",
        f"\033[0;37mBlock size [bytes]:\033[0m {header.block_size} ",
        f"\033[0;37mMax drive size [bytes]:\033[0m {header.block_size * header.max_blocks} ",
    ]
    return "\n".join(lines)