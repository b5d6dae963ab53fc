"""Punto de entrada: python -m glucofood."""

from __future__ import annotations

from glucofood.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
