import sys

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash

    Args:
        password: Plaintext password from the login form
        password_hash: Hash stored on the user row

    Returns:
        True on match, False on mismatch or an unreadable hash
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def main(argv=None) -> int:
    """Print a bcrypt hash for provisioning a user by hand."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: tasks-hash-password <password>", file=sys.stderr)
        return 1
    print(f"Hash: {hash_password(args[0])}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
