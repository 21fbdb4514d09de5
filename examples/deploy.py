"""
Prompts for whatever the command line leaves out when run in a terminal.

    $ python examples/deploy.py
    ? Please enter 'service': api
    1. dev
    2. staging
    3. prod
    ? Please select 'environment': 3
    ...
"""

from enum import Enum

from declarg import (
    Argument,
    CommandConfiguration,
    Flag,
    Option,
    ParsableCommand,
    ParserConfiguration,
)


class Environment(Enum):
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class Strategy(Enum):
    ROLLING = "rolling"
    RECREATE = "recreate"


class Deploy(ParsableCommand):
    configuration = CommandConfiguration(abstract="Deploy a service.")

    service: str = Argument(help="The service to deploy.")
    environment: Environment = Option(help="Where to deploy.")
    replicas: int = Option(default=1, help="How many replicas to run.")
    strategy: Strategy = Flag(help="How to replace running replicas.")
    dry_run: bool = Flag(help="Print the plan without deploying.")

    def run(self):
        verb = "Would deploy" if self.dry_run else "Deploying"
        print(
            f"{verb} {self.service} to {self.environment.value} "
            f"({self.replicas} replicas, {self.strategy.value})"
        )


if __name__ == "__main__":
    Deploy.main(configuration=ParserConfiguration(prompt_for_missing=True))
