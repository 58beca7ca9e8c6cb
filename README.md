# ethbridge

Building blocks for a node that serves Ethereum-style JSON-RPC on top of another chain:

- **JSON-RPC value types**:
  - `Bytes` and the hash and quantity helpers `parse_hash`, `format_hash`, `parse_quantity` and `format_quantity` (`ethbridge.hexdata`).
  - Block numbers, tags and hash references (`ethbridge.block_number`).
  - Indices (`ethbridge.index`).
  - Logs (`ethbridge.log`) and work packages (`ethbridge.work`).
  - Call requests and access lists (`ethbridge.call_request`).
  - Transaction requests and the unsigned messages they turn into (`ethbridge.transaction_request`).
  - Transactions (`ethbridge.transaction`), receipts (`ethbridge.receipt`) and blocks (`ethbridge.block`).
  - Sync and peer information (`ethbridge.sync`) and account information (`ethbridge.account_info`).
  - Fee history with a bounded cache (`ethbridge.fee`).
  - Subscription kinds, parameters and results (`ethbridge.pubsub`).

  Most types have a `to_json()` method that returns the camelCase JSON form, and request types have a `from_json()` method. Hashes are `bytes`, and quantities are `int`.
- **Log filtering** with 2048-bit blooms (`ethbridge.bloom`, `ethbridge.filter`). This covers single and multiple addresses, and topics with wildcards and alternatives.
- **A mapping database** (`ethbridge.backend`). It maps Ethereum block and transaction hashes to the block hashes of the underlying chain. It also keeps the current syncing tips and the storage-schema cache. Values are stored in a compact binary encoding (`ethbridge.scale`) through a small column-keyed store (`ethbridge.kvstore`). The store is kept in an SQLite file or held in memory.
- **A command-line tool**, `ethbridge-db`, to create, read, update and delete entries in that database.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Using the types

```python
from ethbridge.hexdata import Bytes
from ethbridge.block_number import parse_block_number, BlockTag
from ethbridge.index import parse_index

Bytes.from_json("0x0123").to_json()     # "0x0123"
parse_block_number("0x45")              # 69
parse_block_number("42")                # 42
parse_block_number("latest")            # BlockTag.LATEST
parse_index("0xa")                      # 10
```

`TransactionRequest.to_message()` chooses the kind of unsigned message from the fields that are set:

- A gas price on its own gives a `LegacyTransactionMessage`.
- An access list without a max fee gives an `EIP2930TransactionMessage`.
- A max fee without a gas price, or no fee fields at all, gives an `EIP1559TransactionMessage`.
- A gas price together with a max fee gives `None`.

## Filtering logs by bloom

```python
from ethbridge.bloom import Bloom
from ethbridge.filter import Filter, FilteredParams

address = bytes.fromhex("10" + "00" * 19)
topic = bytes.fromhex("10" + "00" * 31)

block_bloom = Bloom()
block_bloom.accrue(address)
block_bloom.accrue(topic)

flt = Filter.from_json({
    "address": "0x" + address.hex(),
    "topics": ["0x" + topic.hex(), None],
})
params = FilteredParams(flt)
address_bloom = FilteredParams.addresses_bloom_filter(flt.address)
topic_blooms = FilteredParams.topics_bloom_filter(params.flat_topics)
matches = (
    FilteredParams.address_in_bloom(block_bloom, address_bloom)
    and FilteredParams.topics_in_bloom(block_bloom, topic_blooms)
)  # True
```

`FilteredParams` can also check single logs exactly, with `filter_block_range`, `filter_block_hash`, `filter_address` and `filter_topics`.

## The mapping database

```python
from ethbridge.backend import Backend, MappingCommitment
from ethbridge.kvstore import DatabaseSettings, DatabaseSource

with Backend(DatabaseSettings(DatabaseSource.rocksdb("data/frontier/db"))) as backend:
    backend.meta.current_syncing_tips()          # [] on a fresh database
    backend.mapping.write_hashes(
        MappingCommitment(b"\x01" * 32, b"\x02" * 32, (b"\x03" * 32,))
    )
    backend.mapping.block_hash(b"\x02" * 32)     # b"\x01" * 32
    backend.mapping.transaction_metadata(b"\x03" * 32)
```

Whatever the source kind, the data goes into one SQLite file, `frontier.sqlite3`, inside the directory that the source names. The kinds `rocksdb` and `paritydb` differ only in that directory. `Backend.open(source, base)` uses `base/frontier/db` for `rocksdb` and `base/frontier/paritydb` for `paritydb`. An `auto` source opens an existing database in the first directory, and otherwise opens or creates one in the second. For a store that lives in memory only, use `kvstore.MemoryDatabase`.

## Command line

```
ethbridge-db read meta --key CURRENT_SYNCING_TIPS --base-path ./data
ethbridge-db create meta --key :ethereum_schema_cache --value schema.json --base-path ./data
ethbridge-db read block --key 0x<32-byte ethereum block hash> --base-path ./data
```

- The first argument is the operation: `create`, `read`, `update` or `delete`.
- The second is the column: `meta`, `block` or `transaction`.
- `-k`/`--key` gives the key. On the meta column it is `CURRENT_SYNCING_TIPS` or `:ethereum_schema_cache`. On the other columns it is a 32-byte hash.
- `--base-path` is the node's database directory.
- `--database` is one of `rocksdb` (the default), `paritydb` or `auto`.

For `create` and `update`, the value is JSON. It is read from the file named by `--value`, or from standard input when `--value` is left out:

- Sync tips are a list of 0x-prefixed hashes.
- The schema cache is an object that maps block hashes to `"V1"`, `"V2"` or `"V3"`.
- A mapping value is a single block hash.

On the meta column, `update` and `delete` print the existing value and the new one. They go ahead only after you type `confirm`. The command exits with status 1 and prints the error when an operation fails.

## What this package does not do

- There is no JSON-RPC server. The package provides the types and the filter logic, not the endpoints.
- There is no chain sync worker and no block import check.
- The command line has no access to a chain's runtime state. So `ethbridge-db` cannot create or update block mappings: these need the transaction statuses stored in a block. From Python, `FrontierDbCmd.run(client, backend)` and `MappingCommand` do this. They take any `client` with a `current_transaction_statuses(block_hash)` method that returns the block's transaction hashes.