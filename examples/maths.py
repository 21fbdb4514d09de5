"""
A nested command tree: `math add`, `math multiply` and `math stats ...`.

    $ python examples/maths.py 1 2 3
    6
    $ python examples/maths.py multiply -x 4 4
    10
    $ python examples/maths.py stats average --kind median 3 1 2
    2.0
    $ python examples/maths.py help stats
"""

from collections import Counter
from enum import Enum
from statistics import pstdev

from declarg import (
    Argument,
    ArgumentHelp,
    CommandConfiguration,
    ExitCode,
    Flag,
    Option,
    OptionGroup,
    ParsableArguments,
    ParsableCommand,
    ValidationError,
)


def format_result(result: int, use_hex: bool) -> str:
    return format(result, "x") if use_hex else str(result)


class Options(ParsableArguments):
    hexadecimal_output: bool = Flag(
        name=["--hex-output", "-x"], help="Use hexadecimal notation for the result."
    )
    values: list[int] = Argument(
        default_factory=list, help="A group of integers to operate on."
    )


class Add(ParsableCommand):
    configuration = CommandConfiguration(abstract="Print the sum of the values.")

    options: Options = OptionGroup()

    def run(self):
        print(format_result(sum(self.options.values), self.options.hexadecimal_output))


class Multiply(ParsableCommand):
    configuration = CommandConfiguration(abstract="Print the product of the values.")

    options: Options = OptionGroup()

    def run(self):
        result = 1
        for value in self.options.values:
            result *= value
        print(format_result(result, self.options.hexadecimal_output))


class Kind(Enum):
    MEAN = "mean"
    MEDIAN = "median"
    MODE = "mode"


class Average(ParsableCommand):
    configuration = CommandConfiguration(
        abstract="Print the average of the values.", version="1.5.0-alpha"
    )

    kind: Kind = Option(default=Kind.MEAN, help="The kind of average to provide.")
    values: list[float] = Argument(
        default_factory=list, help="A group of floating-point values to operate on."
    )

    def validate(self):
        if self.kind is not Kind.MEAN and not self.values:
            raise ValidationError(
                f"Please provide at least one value to calculate the {self.kind.value}."
            )

    def mean(self) -> float:
        return sum(self.values) / len(self.values) if self.values else 0.0

    def median(self) -> float:
        ordered = sorted(self.values)
        middle = len(ordered) // 2
        if len(ordered) % 2 == 0:
            return (ordered[middle - 1] + ordered[middle]) / 2
        return ordered[middle]

    def mode(self) -> list[float]:
        counts = Counter(self.values)
        highest = max(counts.values())
        return [value for value, count in counts.items() if count == highest]

    def run(self):
        if self.kind is Kind.MEAN:
            print(self.mean())
        elif self.kind is Kind.MEDIAN:
            print(self.median())
        else:
            print(" ".join(str(value) for value in self.mode()))


class StandardDeviation(ParsableCommand):
    configuration = CommandConfiguration(
        command_name="stdev", abstract="Print the standard deviation of the values."
    )

    values: list[float] = Argument(
        default_factory=list, help="A group of floating-point values to operate on."
    )

    def run(self):
        print(pstdev(self.values) if self.values else 0.0)


class Quantiles(ParsableCommand):
    configuration = CommandConfiguration(abstract="Print the quantiles of the values (TBD).")

    values: list[float] = Argument(
        default_factory=list, help="A group of floating-point values to operate on."
    )
    test_success_exit_code: bool = Flag(help=ArgumentHelp.hidden())
    test_failure_exit_code: bool = Flag(help=ArgumentHelp.hidden())
    test_validation_exit_code: bool = Flag(help=ArgumentHelp.hidden())
    test_custom_exit_code: int | None = Option(help=ArgumentHelp.hidden())

    def validate(self):
        if self.test_success_exit_code:
            raise ExitCode.SUCCESS
        if self.test_failure_exit_code:
            raise ExitCode.FAILURE
        if self.test_validation_exit_code:
            raise ExitCode.VALIDATION_FAILURE
        if self.test_custom_exit_code is not None:
            raise ExitCode(self.test_custom_exit_code)


class Statistics(ParsableCommand):
    configuration = CommandConfiguration(
        command_name="stats",
        abstract="Calculate descriptive statistics.",
        subcommands=[Average, StandardDeviation, Quantiles],
    )


class Math(ParsableCommand):
    configuration = CommandConfiguration(
        abstract="A utility for performing maths.",
        version="1.0.0",
        subcommands=[Add, Multiply, Statistics],
        default_subcommand=Add,
    )


if __name__ == "__main__":
    Math.main()
