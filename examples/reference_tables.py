"""Print the arbitration / opponent reference tables for the color game.

For every hint ("no hint" plus each color) and every color the player
could hold, shows the normalized probability that the arbiter holds
each color (row ``P(A.x)``) and that the opponent holds it (row
``P(O.x)``). The most likely entry of each table is printed in bold.
"""

import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import compute_posteriors
import secret_prisoner


def main() -> None:
    tables = compute_posteriors.build_reference_tables(
        secret_prisoner.COLORS, show_progress=True,
    )
    for table in tables:
        compute_posteriors.print_reference_table(table)


if __name__ == "__main__":
    main()
