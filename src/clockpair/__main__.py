"""Launch the desktop application: ``python -m clockpair``."""
from clockpair.main import main

if __name__ == "__main__":
    main()
