"""
Rites - Command implementations for the Augury CLI.

- scry:   Read-only queries (chain id, blocks, transactions, traces, code, proofs)
- fork:   Steer a forked Anvil / dev node (reset, mine, overrides, replay)
- replay: Re-execute a historical transaction on a forked node
"""
