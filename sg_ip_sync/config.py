import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from sg_ip_sync.request import DEFAULT_IP_URL


def load_env(directory):
    # values from .env win over the shell
    env_path = os.path.join(os.path.abspath(directory), ".env")
    load_dotenv(env_path, override=True)


def _number(name, default, cast):
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class Settings:
    ip_url: str = DEFAULT_IP_URL
    ip_timeout: float = 10.0
    ip_tries: int = 1
    profile: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def from_env(cls, env_dir=None):
        load_env(env_dir or os.getcwd())
        ip_tries = _number("SG_IP_SYNC_IP_TRIES", 1, int)
        if ip_tries < 1:
            raise ValueError("SG_IP_SYNC_IP_TRIES must be at least 1")
        return cls(
            ip_url=os.environ.get("SG_IP_SYNC_IP_URL") or DEFAULT_IP_URL,
            ip_timeout=_number("SG_IP_SYNC_IP_TIMEOUT", 10.0, float),
            ip_tries=ip_tries,
            profile=os.environ.get("AWS_PROFILE") or None,
            region=os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or None,
        )
