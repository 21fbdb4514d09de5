"""
An async command: parsing is synchronous, `run()` is awaited by `main()`.

    $ python examples/repeat.py --count 3 --include-counter hello
    $ python examples/repeat.py --delay 0.5 hello
"""

import asyncio

from declarg import (
    Argument,
    AsyncParsableCommand,
    CommandConfiguration,
    Flag,
    Option,
    ValidationError,
)


class Repeat(AsyncParsableCommand):
    configuration = CommandConfiguration(abstract="Repeats your input phrase.")

    count: int | None = Option(help="The number of times to repeat 'phrase'.")
    include_counter: bool = Flag(help="Include a counter with each repetition.")
    delay: float = Option(default=0.0, help="Seconds to wait between repetitions.")
    phrase: str = Argument(help="The phrase to repeat.")

    def validate(self):
        if self.count is not None and self.count < 0:
            raise ValidationError("'count' must not be negative.")

    async def run(self):
        count = 2 if self.count is None else self.count
        for number in range(1, count + 1):
            if self.include_counter:
                print(f"{number}: {self.phrase}")
            else:
                print(self.phrase)
            if self.delay:
                await asyncio.sleep(self.delay)


if __name__ == "__main__":
    Repeat.main()
