# openingexplorer

This package is the data model behind a chess opening explorer. It gathers game
results for each position and stores them as compact binary records. It has no
runtime dependencies.

## Records

There are three kinds of record:

- `openingexplorer.lichess.LichessEntry` holds online games. They are split by
  `Speed` and by `RatingGroup`, and each group keeps up to 8 recent games.
- `openingexplorer.masters.MastersEntry` holds over-the-board master games. It
  keeps the 15 highest-rated games, plus any game that is the only one for its
  move.
- `openingexplorer.player.PlayerEntry` holds one player's games. They are split
  by `Speed` and by `Mode` (rated or casual), and each group keeps up to 8
  recent games.

Every record has the same methods:

- `new_single(...)` makes a record for a single game.
- `write(out)` encodes the record to a binary stream.
- `extend_from_reader(reader)` reads the rest of a stream and merges the
  encoded record into this one. Games that are merged in count as newer than
  the games already in the record.
- `prepare(...)` builds a `PreparedResponse`. This holds the `total` stats, the
  `moves` (a list of `PreparedMove`, most played first, cut to the limit you
  give) and the `top_games` and `recent_games` as `(UciMove, GameId)` pairs.

`LichessEntry.total(query_filter)` sums the stats that a filter selects.

You pass in the filter and limits objects that `prepare` reads. The package
does not define them. It only uses these members:

- Lichess filters: `contains_speed(speed)`, `contains_rating_group(group)` and
  `top_group()`.
- Lichess limits: `moves`, `top_games`, `recent_games` and `games_wanted()`.
- Player filters: `speeds` and `modes`. Each is a collection, or `None` to
  select everything.
- Player limits: `moves` and `recent_games`.
- Masters limits: `moves` and `top_games`.

## Building blocks

- `openingexplorer.stats`:
  - `Stats` holds white/draw/black counts and a rating sum. It gives
    `average_rating()` and FIDE `performance(color)`, and has its own binary
    form through `read`/`write`.
  - `Outcome` is a game result. `str()` gives `1-0`, `0-1` or `1/2-1/2`.
- `openingexplorer.game_id.GameId` is an 8-character base-62 id, stored in 6
  little-endian bytes.
- `openingexplorer.uci`:
  - `Color` and `Role`.
  - `parse_square` and `square_name`.
  - `UciMove` is a normal move, a drop or the null move. It parses and prints
    UCI text.
  - `RawUciMove` is a move packed into 16 bits.
- `openingexplorer.date`:
  - `Year` covers the years 1952 to 3000.
  - `Month` prints as `YYYY-MM` and parses `YYYY-MM` or `YYYY/MM`.
  - `LaxDate` is a `YYYY.MM.DD` date whose month and day may be `??`. It is
    only partially ordered.
- `openingexplorer.history`: `HistoryBuilder` turns running totals for each
  month into a list of `HistorySegment` differences and fills in missing
  months. If you give no `until` month, it leaves out the last month.
- `openingexplorer.key`: `KeyBuilder` (`player`, `masters`, `lichess`),
  `KeyPrefix` and `Key` build 14-byte database keys. Each key is a 12-byte
  prefix, taken from a position hash XOR-ed with a `Variant` mask and a base,
  followed by a big-endian month or year. Keys that share a prefix sort by
  month.
- `openingexplorer.lichess_game`: `LichessGame` and `GamePlayer` hold the
  metadata of a single online game.
- `openingexplorer.user`: `UserName` compares without regard to ASCII case, and
  `UserId` is the lowercased name.
- `openingexplorer.speed` and `openingexplorer.mode`: `Speed`, `BySpeed`,
  `Mode` and `ByMode`.
- `openingexplorer.uint`: `read_uint` and `write_uint` read and write the
  7-bit variable-length integers that every record uses.
- `openingexplorer.util`:
  - `sort_by_key_and_truncate`, `midpoint` and `ByColor`.
  - The async helpers `dedup_by_key`, which skips consecutive items that have
    the same key, and `spawn_blocking`, which runs a function in a thread while
    holding a semaphore permit.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import io

from openingexplorer.game_id import GameId
from openingexplorer.masters import MastersEntry
from openingexplorer.stats import Outcome
from openingexplorer.uci import UciMove

entry = MastersEntry.new_single(
    UciMove.parse("e2e4"),
    GameId.parse("aaaaaaaa"),
    Outcome.from_winner(None),
    1600,
    1700,
)

out = io.BytesIO()
entry.write(out)

merged = MastersEntry()
merged.extend_from_reader(io.BytesIO(out.getvalue()))
```

## What this package does not do

This package is only the data model and the binary formats. It does not
include:

- an HTTP server or API;
- a database or other storage engine (keys and values are plain bytes that you
  store yourself);
- chess rules or position hashing (`KeyBuilder.with_zobrist` takes a hash that
  you have already computed);
- opening classification;
- PGN export;
- a way to import games from any service.