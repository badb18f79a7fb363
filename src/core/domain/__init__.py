"""Domain models and rules.

Why:
- Pure data and pure rules live here (tokens, verbs, key grammar, errors).
- The domain knows nothing about subprocesses, files, or the CLI.
"""
