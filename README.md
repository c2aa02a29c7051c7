# vdrive

`vdrive` keeps a small virtual drive inside one ordinary file. The drive file
starts with a fixed 31808-byte header. Data blocks of 4096 bytes follow it.
The header holds:

- the drive's name and total size,
- a flat directory of up to 128 entries, each with a name of up to 32 bytes,
- a block map that marks each data block as used or free.

Each stored file takes a run of contiguous blocks.

## Installation

```
pip install .
```

To run the tests, install the `test` extra as well:

```
pip install .[test]
pytest
```

## Command line

```
vdrive create  DISK BLOCKS         # create a drive with BLOCKS data blocks (1..25600)
vdrive delete  DISK                # delete the drive file
vdrive copyin  DISK HOST_FILE      # copy a host file onto the drive
vdrive copyout DISK NAME OUTPUT    # copy a file from the drive to OUTPUT
vdrive rm      DISK NAME           # remove a file from the drive
vdrive ls      DISK                # list the directory
vdrive about   DISK                # show drive summary and settings
vdrive map     DISK                # show the data block map
```

When you copy a file in, only its base name is kept. Everything up to the
last `/`, `\` or `:` is dropped. The file goes into the first run of free
blocks that is long enough to hold it. `BLOCKS` is read like C's `atoi`: a
leading integer is used and anything after it is ignored.

With fewer than two arguments, the command prints a usage line and exits with
status 1. With an unknown command or the wrong number of arguments, it prints
`Invalid command or arguments.` and exits with status 0. Errors are printed to
standard error. The exit status is 1 in two cases:

- `create` fails,
- `copyin` cannot open the drive or the host file.

In every other case the status is 0.

### Example

```
vdrive create disk.img 16
vdrive copyin disk.img notes/readme.txt
vdrive ls disk.img
vdrive copyout disk.img readme.txt restored.txt
vdrive rm disk.img readme.txt
vdrive map disk.img
vdrive delete disk.img
```

## Library use

The same operations are available from `vdrive.disk`:

```python
from vdrive.disk import (
    create_disk, copy_in, copy_out, remove_file,
    list_directory, show_map, about_drive, load_header,
)

create_disk("disk.img", 16)                 # returns the DiskHeader written
entry = copy_in("disk.img", "notes/readme.txt")
print(entry.name, entry.start_block, entry.end_block)

copy_out("disk.img", "readme.txt", "restored.txt")

for slot, entry in list_directory("disk.img"):
    print(slot, entry.name, entry.size)

used = [block.number for block in show_map("disk.img") if block.used]
print(about_drive("disk.img"))              # formatted summary text

with open("disk.img", "rb") as disk:
    header = load_header(disk)
    print(header.data_block_count(), header.find("readme.txt"))

remove_file("disk.img", "readme.txt")
```

`DiskHeader.pack()` serialises a header to exactly 31808 bytes, and
`save_header(disk, header)` writes it to the start of an open drive file.
`base_name(path)` gives the name that `copy_in` would store for a path.

Failures raise `vdrive.disk.DiskError`. For example:

- the block count is out of range,
- a name is too long,
- the directory is full,
- there is too little free space,
- the file is not on the drive,
- a file cannot be opened.

## Limitations

- There are no subdirectories. All files share one flat directory.
- Removing a file frees its blocks, but its directory slot is only marked
  invalid and is never reused. Removed files still count toward the 128-entry
  limit and toward "Saved files" in `about`.
- Blocks are never moved. Free space split into small gaps can make a large
  file fail to fit even when enough blocks are free in total.
- Names are not checked for duplicates. Copying in a second file with the same
  name adds another entry. `copyout` and `rm` act on the first valid match.