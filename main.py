#!/usr/bin/env python3
"""
Main CLI for fontview
=====================

Renders font specimens inline in graphics-capable terminals.
"""

from fontview.cli import main

if __name__ == "__main__":
    main()
