"""Allow ``python -m lofi_automator``."""

from lofi_automator.cli import main

main()
