"""
Wrapper to run the reverse-commands package CLI.

Usage:
  python main.py install --dry-run
  python main.py install --path-filter="/usr/bin:/bin"
  python main.py install --force-sensitive --confirm="I_ACCEPT_RISK"
  python main.py uninstall
"""

from reverse_commands import main


if __name__ == "__main__":
    main()
