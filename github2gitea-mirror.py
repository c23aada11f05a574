#!/usr/bin/env python3
"""
GitHub to Gitea Mirror - Mirror GitHub repositories into a Gitea instance.

Repositories are enumerated from a GitHub organization, a user's own
repositories, a user's starred list or a single repository URL, and each one
is registered in Gitea as a pull mirror through the migrate API. Runs are
idempotent: repositories that already exist in Gitea are skipped, so the tool
can be scheduled.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from mirror_orchestrator import MirrorOrchestrator


def main() -> NoReturn:
    cfg = parse_arguments()
    orchestrator = MirrorOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
