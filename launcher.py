# launcher.py
import sys
from pathlib import Path

# ---------------- Paths & import setup ----------------
REPO_ROOT = Path(__file__).resolve().parent

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def main():
    from src.app.cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
