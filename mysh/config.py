# Interpreter settings: defaults, then environment overrides, then CLI flags.

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

DEFAULT_PROMPT = "mysh> "
DEFAULT_WHICH_DIRS: Tuple[str, ...] = ("/usr/local/bin", "/usr/bin", "/bin")


@dataclass(frozen=True)
class ShellConfig:
    prompt: str = DEFAULT_PROMPT
    trace: bool = False
    which_dirs: Tuple[str, ...] = DEFAULT_WHICH_DIRS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ShellConfig":
        env = os.environ if env is None else env
        config = cls()
        if "MYSH_PROMPT" in env:
            config = replace(config, prompt=env["MYSH_PROMPT"])
        if env.get("MYSH_TRACE") == "1":
            config = replace(config, trace=True)
        which_path = env.get("MYSH_WHICH_PATH")
        if which_path:
            dirs = tuple(d for d in which_path.split(":") if d)
            if dirs:
                config = replace(config, which_dirs=dirs)
        return config

    def with_overrides(self, prompt: Optional[str] = None, trace: Optional[bool] = None) -> "ShellConfig":
        config = self
        if prompt is not None:
            config = replace(config, prompt=prompt)
        if trace:
            config = replace(config, trace=True)
        return config
