#!/usr/bin/env python3
"""Convenience entry script for the capture enhancer."""

from __future__ import annotations

from capture_enhancer.cli import main


if __name__ == "__main__":
    main()
