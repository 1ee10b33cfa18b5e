"""Environment placeholder expansion for endpoint config values.

A config value such as ``"${OPENROUTER_KEY}"`` is replaced by the variable's
value when it is set and non-empty. Otherwise the value comes back unchanged,
so callers detect a missing variable by checking whether the *resolved* value
still looks like a placeholder.
"""

import os
import re
from collections.abc import Mapping

ENV_VAR_PATTERN = re.compile(r"^\$\{(.+)\}$")

# Config value meaning "fetch this credential from the user's stored keys"
USER_PROVIDED = "user_provided"


def extract_env_variable(value: str, env: Mapping[str, str] | None = None) -> str:
    if env is None:
        env = os.environ

    match = ENV_VAR_PATTERN.match(value)
    if not match:
        return value

    resolved = env.get(match.group(1))
    return resolved if resolved else value


def is_unresolved_placeholder(value: str) -> bool:
    return ENV_VAR_PATTERN.match(value) is not None


def is_user_provided(value: str | None) -> bool:
    return value == USER_PROVIDED
