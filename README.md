# ftmalloc

A `malloc` / `free` / `realloc` allocator that works on a simulated address
space. Memory is a set of integer-addressed, page-aligned mappings. You read
and write them as bytes. Each request goes into one of three size classes:

- **tiny**: requests up to `TINY_ALLOC_SIZE` bytes (224). These come from
  tiny zones, which use the 256-byte block class.
- **small**: requests up to `SMALL_ALLOC_SIZE` bytes (2016). These come from
  small zones, which use the 2048-byte block class.
- **large**: anything bigger. Each one gets its own page-aligned mapping, and
  a block header sits at the start of it. A freed large block goes on a free
  list. A later request reuses it when that request needs a mapping of the
  same length.

Each zone is one mapping. It holds its free blocks in address order. The
first free block that fits is used. It is split when it is more than 64 bytes
larger than the request, and the split point is rounded up to 16 bytes. A
freed block is merged with any free neighbour next to it. When no zone has
room, a new zone is mapped.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from ftmalloc.allocator import Allocator
from ftmalloc.report import format_alloc_mem

heap = Allocator()

address = heap.malloc(15)
heap.write(address, b"Hello, World!\0")

address = heap.realloc(address, 40)
print(heap.read(address, 13))      # b'Hello, World!'

print(format_alloc_mem(heap))
heap.free(address)
```

The `Allocator` methods:

- `malloc(size)` returns the address of a new buffer. It raises
  `MemoryError` when the address space cannot provide a mapping, and
  `ValueError` for a negative size.
- `free(address)` releases a buffer. `None` is ignored. An address that is
  not an allocated buffer raises `ValueError`.
- `realloc(address, size)` allocates when `address` is `None`. It frees the
  buffer and returns `None` when `size` is 0. It keeps the buffer in place
  when the block is already big enough. Otherwise it allocates a new buffer,
  copies the contents across and frees the old one.
- `block(address)` returns the `Block` behind a buffer.
- `read(address, size)` and `write(address, data)` access the memory.
- `tiny_zones`, `small_zones`, `used_large_blocks` and `free_large_blocks`
  show the allocator's state. Every call holds `allocator.lock`, which is a
  re-entrant lock.

An `Allocator` creates its own `AddressSpace` unless you pass one in. The
`AddressSpace` constructor takes `page_size`, `limit` and `base`. Set `limit`
to cap the total number of bytes mapped. When a mapping would go past the
limit, `AddressSpace.map` raises `MappingFailed`, and the allocator turns
this into `MemoryError`.

### Report

`format_alloc_mem(allocator)` returns the report as text.
`show_alloc_mem(allocator, stream)` writes it to `stream`, or to standard
output if you give no stream. The report lists, in address order:

1. every tiny and then every small zone that has blocks in use, with the
   blocks it uses;
2. the large blocks in use;
3. the total.

```
TINY : 0x...
0x... - 0x... : 48 bytes
Total allocated: 48 bytes
```

The report gives the size of each block. For a zone block this is the size
after rounding, so it can be larger than the request. For a large block it is
the size requested.

### Other modules

- `ftmalloc.layout` holds the constants and the size helpers `align`,
  `aligned_large_block_size` and `zone_size`.
- `ftmalloc.memory` holds `AddressSpace` and `MappingFailed`. Mappings are
  filled with zeros, and an unmapped guard page follows each one.
- `ftmalloc.zones` holds `Block`, `Zone` and `ZoneList`, the bookkeeping for
  zones.

## Command line

```
ftmalloc [--seed N]
```

This runs the classic demonstration:

1. It allocates a 15-byte string.
2. It grows the string with `realloc` to 40 bytes and then to 10000 bytes,
   and appends text each time.
3. It frees the string.
4. It makes twenty allocations of random sizes between 1 and 7000 bytes.
5. It prints the report and frees the twenty allocations.

`--seed` makes the random sizes repeatable.

## What it does not do

- It manages only its own simulated memory. It does not replace the memory
  allocator of Python or of the process.
- Mappings are never returned to the address space. Empty zones and freed
  large blocks stay mapped for reuse.
- It has no benchmark or timing comparison.