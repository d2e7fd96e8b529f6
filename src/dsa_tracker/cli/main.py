"""DSA Tracker CLI entry point"""

import click

from .command.init import init
from .command.start import start
from .command.stop import stop


@click.group(
    name="dsa-tracker",
    help="DSA Tracker - personal study tracker for data structures and algorithms",
)
def main():
    """Main CLI entry point"""
    pass


# Register commands
main.add_command(init)
main.add_command(start)
main.add_command(stop)


if __name__ == "__main__":
    main()
