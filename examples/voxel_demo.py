"""
Example collapsing a small 3D voxel volume layer by layer.

Air may only sit above air, and sand never rests directly on air.
"""

from py_wfc import AleaPRNG, Grid, Pixel

AIR, SAND, ROCK = "air", "sand", "rock"
SYMBOLS = {AIR: ".", SAND: ":", ROCK: "#"}


def materials():
    return [AIR, AIR, SAND, ROCK, ROCK]


def layered(view, location, value):
    x, y, z = location
    above = view.check_loc((x, y, z + 1))
    below = view.check_loc((x, y, z - 1))
    if value == AIR and above is not None:
        if view.determined_value(above) not in (None, AIR):
            return False
    if value != AIR and below is not None:
        if view.determined_value(below) == AIR:
            return False
    if value == SAND and below is not None:
        return view.determined_value(below) != AIR
    return True


def main():
    size = (8, 8, 4)
    prng = AleaPRNG("voxel_demo")

    attempt = 0
    while True:
        attempt += 1
        grid = Grid(size, materials)
        # Bedrock everywhere on the bottom layer
        for x in range(size[0]):
            for y in range(size[1]):
                grid.set_item((x, y, 0), Pixel.fixed(ROCK))

        result = grid.wfc(layered, effect_distance=1, rng=prng, chance=0.1)
        if result:
            break
        print(f"Attempt {attempt} failed at {result.location}, retrying...")

    print(f"Solved in {result.iterations} rounds with {result.contradictions} rollbacks\n")

    values = grid.values()
    for z in reversed(range(size[2])):
        print(f"Layer z={z}:")
        for y in range(size[1]):
            print("  " + "".join(SYMBOLS[values[x, y, z]] for x in range(size[0])))
        print()


if __name__ == "__main__":
    main()
