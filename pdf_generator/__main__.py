"""Allow running the service with ``python -m pdf_generator``."""

from .app import main

main()
