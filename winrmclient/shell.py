"""A remote WinRM shell in which commands run."""

from __future__ import annotations

import threading
from typing import Any, Optional

from winrmclient.command import Command
from winrmclient.request import delete_shell_request, execute_command_request
from winrmclient.response import parse_execute_command_response


class Shell:
    """The local view of a remote shell owned by a client."""

    def __init__(self, client: Any, shell_id: str) -> None:
        self.client = client
        self.id = shell_id

    def execute(self, command: str, *args: str, cancel: Optional[threading.Event] = None) -> Command:
        """Start ``command`` with ``args``; setting ``cancel`` terminates it."""
        request = execute_command_request(
            self.client.url, self.id, command, args, self.client.parameters
        )
        response = self.client.send_request(request)
        command_id = parse_execute_command_response(response)
        return Command(self, command_id, cancel)

    def close(self) -> None:
        """Delete the remote shell; no command can be started afterwards."""
        request = delete_shell_request(self.client.url, self.id, self.client.parameters)
        self.client.send_request(request)