"""Centralized exit codes for the cindex CLI."""


class ExitCodes:
    """Standard exit codes for cindex."""

    SUCCESS = 0

    # Run aborted: bad encoding config, unreadable content, failed publish
    FATAL = 1

    # Invalid flag usage (click's own usage-error status)
    USAGE = 2

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success",
            cls.FATAL: "Indexing aborted - published index left unchanged or partially staged",
            cls.USAGE: "Invalid command line usage",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
