"""Allow ``python -m acetap game.tap``."""

from acetap.cli.acetap2tzx import main

if __name__ == "__main__":
    main(prog_name="acetap2tzx")
