#!/usr/bin/env python3
"""Console logger for github2gitea-mirror.

Every line is prefixed with the tool name and pid and passed through
``SecurityValidator.sanitize_for_logging`` first, because migration payloads
and error bodies can carry the GitHub token used for private mirrors.
"""

import os
import sys
import time
from typing import Iterable, TextIO

import colorama

from security import SecurityValidator

colorama.init(autoreset=True)


class Logger:
    """Colored, redacting output for mirror runs.

    Progress goes to stdout; errors and security events go to stderr.
    """

    PROCESS_NAME = "github2gitea-mirror"

    @classmethod
    def debug(cls, *messages: str) -> None:
        cls._emit(sys.stdout, colorama.Fore.LIGHTBLACK_EX, messages)

    @classmethod
    def info(cls, *messages: str) -> None:
        cls._emit(sys.stdout, colorama.Fore.CYAN, messages)

    @classmethod
    def success(cls, *messages: str) -> None:
        """Report a repository or organization created in Gitea."""
        cls._emit(sys.stdout, colorama.Fore.GREEN, messages)

    @classmethod
    def warn(cls, *messages: str) -> None:
        cls._emit(sys.stdout, colorama.Fore.YELLOW, messages)

    @classmethod
    def error(cls, *messages: str) -> None:
        cls._emit(sys.stderr, colorama.Fore.RED, messages)

    @classmethod
    def security_event(cls, event_type: str, details: str) -> None:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        cls._emit(
            sys.stderr,
            colorama.Fore.MAGENTA,
            [f"[SECURITY:{event_type}] {timestamp}: {details}"],
        )

    @classmethod
    def _emit(cls, stream: TextIO, color: str, messages: Iterable[str]) -> None:
        text = " ".join(
            SecurityValidator.sanitize_for_logging(str(m)) for m in messages
        )
        header = f"[{cls.PROCESS_NAME}:{os.getpid()}]"
        stream.write(f"{color}{header}{colorama.Style.RESET_ALL} {text}\n")
