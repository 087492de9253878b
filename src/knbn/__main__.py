"""Allow ``python -m knbn``."""

from knbn.cli import main

main()
