from crossword_sync.realtime.registry import ConnectionRegistry, LiveConnection
from crossword_sync.realtime.relay import GridRelay, RelayConnection
