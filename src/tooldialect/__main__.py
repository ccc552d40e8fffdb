"""Allow ``python -m tooldialect``."""

from tooldialect.cli import main

main()
