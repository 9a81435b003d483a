"""
Print the bcrypt digest of a password read from standard input.

Used to provision employee credentials out of band:

    python -m scripts.hash_password            (prompts)
    echo -n 's3cret' | python -m scripts.hash_password
"""

import getpass
import sys

from app.core.security import hash_password


def read_password() -> str:
    if sys.stdin.isatty():
        return getpass.getpass("Enter the password to hash: ")
    return sys.stdin.readline().rstrip("\r\n")


def main() -> int:
    password = read_password()
    if not password:
        print("Password cannot be empty.", file=sys.stderr)
        return 1

    print("\n--- BCRYPT HASH ---")
    print(hash_password(password))
    print("-------------------\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
