"""Core interfaces and abstractions.

Why:
- Defines the contracts (Protocol) that concrete adapters implement.
- Services depend on the contract, so tests swap in a recording fake.
"""
