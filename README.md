# bonsaidb

A small database engine that keeps fixed-size records in 4 KiB pages inside a
single file. It indexes the records by id with an on-disk B+ tree. It also
provides an interactive shell and a generator for sample CSV data.

Each record (`bonsaidb.record.Record`) holds:

- `id`: a 32-bit integer
- `name`: up to 49 bytes of UTF-8
- `age`: a 32-bit integer
- `balance`: a float

`Record.serialize()` raises `ValueError` when the name is too long or a field
is out of range.

## Installation

```
pip install .
```

## The shell

```
bonsaidb mydata.db
```

The shell opens the file, or creates it if it does not exist. It then reads
commands from standard input, one per line:

| Command | Effect |
| --- | --- |
| `insert <id> <name> <age> <balance>` | Store a new record. Names longer than 49 bytes are cut short. If the id is already in the index, the index keeps its earlier entry. |
| `select <id>` | Look up a record by id. |
| `delete <id>` | Remove the id from the index. The record's bytes stay in their data page. |
| `dump` | Print every indexed record as `id,name,age,balance`. |
| `help` | Show the command list. |
| `exit` / `quit` | Leave the shell. |

The shell stops at end of input.

Example session:

```
bonsaidb> insert 1 Alice 30 1500.75
bonsaidb> select 1
bonsaidb> dump
bonsaidb> exit
```

## Using the engine from Python

```python
from bonsaidb.engine import DatabaseEngine
from bonsaidb.record import Record

with DatabaseEngine("mydata.db") as db:
    page_id = db.insert(Record(id=1, name="Alice", age=30, balance=1500.75))
    found = db.find(1)          # a Record, or None
    everything = db.dump_all()  # list of Record
    db.remove(1)                # True if the id was in the index
```

`insert` returns the id of the data page the record was written to. The
engine serialises every operation with a lock, so several threads can share
one instance. Inserts and removals are logged at INFO level through the
`bonsaidb.engine` logger.

Lower layers are also available:

- `bonsaidb.page.Page`: a page of records (`add_record`, `records`,
  `serialize`, `deserialize`, `num_records`, `free_space`).
- `bonsaidb.file_manager.FileManager`: page-level file access. Reading a page
  past the end of the file raises `PageNotFoundError`.
- `bonsaidb.bplustree.BPlusTree`: the index (`insert`, `search`, `remove`,
  `get_all_data_page_ids`). Its nodes are `BPlusNode` objects.
- `bonsaidb.utils.split`: splits text on one character and drops empty pieces.

## Generating sample data

```
bonsaidb-generate
```

The command asks for three things:

- **Directory**: where to write the file. On Windows, press Enter to use the
  Desktop folder when it exists. Otherwise the path you type is used, and an
  empty answer means the current directory.
- **File name**: given without extension. The default is `data`.
- **Number of rows**: a positive integer. The command asks again until it
  gets one.

It then writes a CSV file with the header `id,nombre,edad,saldo`. Row `i` has
the name `User<i>`, a random age from 18 to 65, and a random balance from 0
to 10000. Missing directories are created.

The same thing is available from code:

```python
import random
from bonsaidb.generate import generate_csv

generate_csv("sample.csv", 1000, random.Random(42))
```

## File format

All values are little-endian.

- **Page 0** is a metadata page. Its first four bytes hold the page number of
  the index root.
- **Data pages** start with a 4-byte page id and a 2-byte record count. They
  are followed by records of 66 bytes each: a 4-byte id, a 50-byte
  NUL-padded name, a 4-byte age, and an 8-byte double balance. This gives
  room for 61 records per page.
- **All other pages** hold B+ tree nodes.

## What it does not do

- Records cannot be updated in place.
- Removing a record only takes its id out of the index. The space is not
  reclaimed, and tree nodes are not merged or rebalanced after a removal.
- The shell's `insert` does not load CSV files. The generated CSV is sample
  data only.
- There is no server, no query language beyond the shell commands above, and
  no transactions.