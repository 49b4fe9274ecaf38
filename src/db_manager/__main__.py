"""Allow ``python -m db_manager``."""

from db_manager.adapters.inbound.cli import main

if __name__ == "__main__":
    main()
