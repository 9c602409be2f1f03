"""
Example generating a stone/dirt/grass tile map.

Stone may never touch grass on a face; dirt fits anywhere.
"""

import argparse

from py_wfc import Pixel, generate
from py_wfc.utils.logging import configure_logging

STONE, DIRT, GRASS = "stone", "dirt", "grass"
CLASHES = {STONE: GRASS, GRASS: STONE}
SYMBOLS = {STONE: "##", DIRT: "YY", GRASS: "//", None: "  "}


def terrain():
    return [(GRASS, 4.0), (DIRT, 1.0), (STONE, 3.0)]


def no_stone_next_to_grass(view, location, value, weight):
    clash = CLASHES.get(value)
    if clash is None:
        return True
    # Undetermined neighbours never block a value
    return not any(
        pixel.determined_value == clash
        for _, pixel in view.unidirectional_neighbors(location)
    )


def render(values):
    rows = []
    for y in range(values.shape[1]):
        rows.append("".join(SYMBOLS[values[x, y]] for x in range(values.shape[0])))
    return "\n".join(rows)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--size", type=int, default=30)
    parser.add_argument("--seed", default="terrain_demo")
    parser.add_argument("--chance", type=float, default=0.05)
    parser.add_argument("--animate", action="store_true", help="Print the map after every round")
    args = parser.parse_args()

    configure_logging()

    def show(view):
        print(render(view.values()))
        print()

    def pin_center(grid):
        center = tuple(n // 2 for n in grid.size)
        grid.set_item(center, Pixel.fixed(STONE))

    print(f"Generating {args.size}x{args.size} terrain (seed={args.seed!r})...")
    grid = generate(
        (args.size, args.size),
        terrain,
        no_stone_next_to_grass,
        weighted=True,
        chance=args.chance,
        seed=args.seed,
        on_update=show if args.animate else None,
        prepare=pin_center,
    )

    print(render(grid.values()))

    print("\nTile distribution:")
    flat = list(grid.values().flat)
    for name in (GRASS, DIRT, STONE):
        count = flat.count(name)
        print(f"  {name}: {count} cells ({count / len(flat) * 100:.1f}%)")


if __name__ == "__main__":
    main()
