"""Run the coursesite CLI with ``python -m coursesite``."""

from coursesite.cli import main

if __name__ == "__main__":
    main()
