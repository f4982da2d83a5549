"""Parsing helpers shared by CLI commands."""

from __future__ import annotations

import click


def parse_pairs(raw: str, label: str = "ProductName") -> list[tuple[str, int]]:
    """Parse 'Widget:3,Gadget:5' into [(name, qty), ...]."""
    pairs: list[tuple[str, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected '{label}:Quantity'."
            )
        name, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for '{name.strip()}'."
            )
        pairs.append((name.strip(), qty))
    if not pairs:
        raise click.BadParameter("At least one item is required.")
    return pairs
