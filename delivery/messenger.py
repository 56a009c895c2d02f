"""Report delivery through the ``signal-cli`` command line client."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

SIGNAL_CLI = "signal-cli"


class DeliveryError(Exception):
    """signal-cli exited with a failure status."""


class SignalMessenger:

    def __init__(
        self,
        user: Optional[str],
        group: Optional[str] = None,
        recipients: Sequence[str] = (),
        executable: str = SIGNAL_CLI,
    ) -> None:
        self.user = user
        self.group = group
        self.recipients = list(recipients)
        self.executable = executable

    @property
    def enabled(self) -> bool:
        return bool(self.user) and (bool(self.group) or bool(self.recipients))

    def send(self, text: str, attachments: Sequence[Path]) -> None:
        """Send the alert text and chart attachments, if delivery is configured."""
        if not self.enabled:
            logger.info("Signal delivery not configured; skipping")
            return

        # Pending messages have to be received before signal-cli accepts a send.
        self._run([self.executable, "-u", str(self.user), "receive"])
        self._run(self.build_send_command(text, attachments))
        logger.info("Report delivered", extra={"chart_count": len(attachments)})

    def build_send_command(self, text: str, attachments: Sequence[Path]) -> List[str]:
        command = [self.executable, "-u", str(self.user), "send"]
        if self.group:
            command.extend(["-g", self.group])
        else:
            command.extend(self.recipients)
        if text:
            command.extend(["-m", text])
        if attachments:
            command.append("-a")
            command.extend(str(path) for path in attachments)
        return command

    def _run(self, command: List[str]) -> None:
        logger.debug("Running %s", " ".join(command[:4]))
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise DeliveryError(f"signal-cli failed - {exc}") from exc
        if completed.returncode != 0:
            raise DeliveryError(f"signal-cli failed - {(completed.stdout or '').strip()}")
