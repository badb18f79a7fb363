"""Run script.

Why it exists:
- Lets the host launch the backend with `python src/main.py bridge`.
- Keeps a plain entrypoint next to the console script.
"""

from __future__ import annotations

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
