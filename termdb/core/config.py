from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable.

    Security notes:
    - Env vars are treated as trusted configuration, but a malformed or
      non-positive value falls back to the default instead of disabling a limit.

    """

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        value = int(raw)
    except ValueError:
        return int(default)
    return value if value > 0 else int(default)


@dataclass(frozen=True, slots=True)
class Limits:
    """Resource bounds applied to untrusted capability data.

    - max_program_nodes: instructions a single compiled capability may hold
    - max_conditional_depth: nesting depth of %? ... %; blocks
    - max_tc_depth: length of a termcap tc= inheritance chain

    """

    max_program_nodes: int = 4096
    max_conditional_depth: int = 32
    max_tc_depth: int = 32

    @staticmethod
    def from_env() -> "Limits":
        """Create limits from environment variables.

        - TERMDB_MAX_PROGRAM_NODES (default 4096)
        - TERMDB_MAX_CONDITIONAL_DEPTH (default 32)
        - TERMDB_MAX_TC_DEPTH (default 32)

        """

        return Limits(
            max_program_nodes=_env_int("TERMDB_MAX_PROGRAM_NODES", 4096),
            max_conditional_depth=_env_int("TERMDB_MAX_CONDITIONAL_DEPTH", 32),
            max_tc_depth=_env_int("TERMDB_MAX_TC_DEPTH", 32),
        )


DEFAULT_LIMITS = Limits()
