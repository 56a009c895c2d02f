from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

_SIGNAL_USER_ENV = "SIGNAL_USER"
_SIGNAL_GROUP_ENV = "SIGNAL_GROUP"
_SIGNAL_RECIPIENT_ENV = "SIGNAL_RECIPIENT"


@dataclass(frozen=True)
class CLIConfig:
    signal_user: Optional[str] = None
    signal_group: Optional[str] = None
    signal_recipients: Tuple[str, ...] = field(default_factory=tuple)


def _read_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _split_recipients(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(part for part in value.split(" ") if part)


def load_config(
    signal_user: Optional[str] = None,
    signal_group: Optional[str] = None,
    signal_recipient: Optional[str] = None,
) -> CLIConfig:
    user = _read_optional(signal_user) or _read_optional(os.getenv(_SIGNAL_USER_ENV))
    group = _read_optional(signal_group) or _read_optional(os.getenv(_SIGNAL_GROUP_ENV))
    recipient = _read_optional(signal_recipient) or _read_optional(
        os.getenv(_SIGNAL_RECIPIENT_ENV)
    )
    return CLIConfig(
        signal_user=user,
        signal_group=group,
        signal_recipients=_split_recipients(recipient),
    )
