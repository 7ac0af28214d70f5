"""Allow ``python -m deskwatch``."""

from deskwatch.cli import main

main(prog_name="deskwatch")
