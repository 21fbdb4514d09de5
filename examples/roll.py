"""
Standalone arguments without a command: parse, then act on the result.

    $ python examples/roll.py --times 3 --sides 20 --seed 7 -v
"""

import logging
import random

from declarg import ArgumentHelp, Flag, Option, ParsableArguments, setup_logging

logger = logging.getLogger("declarg")


class RollOptions(ParsableArguments):
    times: int = Option(
        default=1, help=ArgumentHelp("Rolls the dice <n> times.", value_name="n")
    )
    sides: int = Option(
        default=6,
        help=ArgumentHelp(
            "Rolls an <m>-sided dice.",
            discussion="Use this option to override the default value of a six-sided die.",
            value_name="m",
        ),
    )
    seed: int | None = Option(help="A seed to use for repeatable random generation.")
    verbose: bool = Flag(name=["-v", "--verbose"], help="Show all roll results.")


def main():
    setup_logging(console_log_level=logging.INFO)
    options = RollOptions.parse_or_exit()
    logger.info("Rolling %d d%d", options.times, options.sides)

    rng = random.Random(options.seed)
    rolls = [rng.randint(1, options.sides) for _ in range(options.times)]

    if options.verbose:
        for number, roll in enumerate(rolls, start=1):
            print(f"Roll {number}: {roll}")

    print(sum(rolls))


if __name__ == "__main__":
    main()
