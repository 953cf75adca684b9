import sys
from pathlib import Path

# Add src to path to ensure photos2map package is found
sys.path.append(str(Path(__file__).parent / "src"))

from photos2map.main import main

if __name__ == "__main__":
    sys.exit(main())
