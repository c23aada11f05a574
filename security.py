#!/usr/bin/env python3
"""Security validation utilities for github2gitea-mirror."""

import re
from typing import List, Optional


class SecurityValidator:
    """Security validation utilities for input sanitization and validation."""

    MAX_URL_LENGTH = 2048
    MAX_NAME_LENGTH = 100

    # GitHub logins, Gitea users/orgs and repository names share this alphabet
    SAFE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

    # Classic/OAuth/app tokens carry a 36 character body; fine-grained ones are longer
    GITHUB_TOKEN_PATTERN = re.compile(
        r"\b(?:gh[pousr]_[A-Za-z0-9]{36,}|github_pat_[A-Za-z0-9_]{22,})"
    )

    @classmethod
    def validate_url(cls, url: str, allowed_schemes: Optional[List[str]] = None) -> str:
        """Validate URL for security."""
        if not url or not isinstance(url, str):
            raise ValueError("URL must be a non-empty string")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValueError(f"URL exceeds maximum length of {cls.MAX_URL_LENGTH}")

        if "\x00" in url or any(ord(c) < 32 for c in url):
            raise ValueError("URL contains null bytes or control characters")

        if not (url.startswith(("http://", "https://")) or url.startswith("git@")):
            raise ValueError("URL must use http, https, or SSH (git@) scheme")

        if allowed_schemes:
            if url.startswith("git@"):
                scheme = "ssh"
            else:
                scheme = url.split("://")[0].lower()
            if scheme not in allowed_schemes:
                raise ValueError(
                    f"URL scheme '{scheme}' not in allowed schemes: {allowed_schemes}"
                )

        return url

    @classmethod
    def validate_name(cls, name: str, kind: str = "Name") -> str:
        """Validate an account, organization or repository name."""
        if not name or not isinstance(name, str):
            raise ValueError(f"{kind} must be a non-empty string")

        if len(name) > cls.MAX_NAME_LENGTH:
            raise ValueError(f"{kind} exceeds maximum length of {cls.MAX_NAME_LENGTH}")

        if "\x00" in name or any(ord(c) < 32 for c in name):
            raise ValueError(f"{kind} contains null bytes or control characters")

        if name in (".", "..") or not cls.SAFE_NAME_PATTERN.match(name):
            raise ValueError(f"{kind} contains invalid characters")

        return name

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Sanitize message for safe logging by removing potential credentials."""
        if not message:
            return message

        patterns = [
            (r"https?://[^:/@\s]+:[^@\s]+@", "https://[REDACTED]@"),  # URL credentials
            (r'"auth_password"\s*:\s*"[^"]*"', '"auth_password": "[REDACTED]"'),
            (
                r"(authorization['\"]?\s*[=:]?\s*['\"]?)(bearer|token)\s+[^\s,'\"}]+",
                r"\1[REDACTED]",
            ),
            (r"token\s*[=:]\s*[^\s]+", "token=[REDACTED]"),
            (r"password\s*[=:]\s*[^\s]+", "password=[REDACTED]"),
        ]

        sanitized = str(message)
        for pattern, replacement in patterns:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        # Token prefixes are case-sensitive; short matches are repository names
        sanitized = cls.GITHUB_TOKEN_PATTERN.sub("[GITHUB_TOKEN_REDACTED]", sanitized)

        return sanitized
