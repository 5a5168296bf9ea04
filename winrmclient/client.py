"""Client for running commands on a remote host over WinRM."""

from __future__ import annotations

import io
import threading
from typing import BinaryIO, Callable, Optional

from winrmclient.endpoint import Endpoint
from winrmclient.errors import WinRMError
from winrmclient.parameters import DEFAULT_PARAMETERS, Parameters
from winrmclient.powershell import powershell
from winrmclient.request import open_shell_request
from winrmclient.response import parse_open_shell_response
from winrmclient.shell import Shell
from winrmclient.soap.message import SoapMessage
from winrmclient.transport import HttpTransport, Transporter

_COPY_CHUNK = 32 * 1024


def _pump(read: Callable[[int], bytes], write: Callable[[bytes], object]) -> None:
    """Copy from ``read`` to ``write`` until end of data; errors end the copy."""
    try:
        while True:
            data = read(_COPY_CHUNK)
            if not data:
                return
            write(data)
    except Exception:  # noqa: BLE001 - a broken stream simply ends the copy
        return


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class Client:
    """A WinRM client for one endpoint.

    Creating a client opens no connection; that happens when a shell is created.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        username: str,
        password: str,
        params: Optional[Parameters] = None,
    ) -> None:
        params = params or DEFAULT_PARAMETERS
        self.parameters = params
        self.username = username
        self.password = password
        self.url = endpoint.url()
        self.use_https = endpoint.https

        if params.transport_decorator is not None:
            transport: Transporter = params.transport_decorator()
        else:
            transport = HttpTransport(dial=params.dial)
        try:
            transport.configure(endpoint)
        except (WinRMError, OSError, ValueError) as exc:
            raise WinRMError(f"can't parse this key and certs: {exc}") from exc
        self.http = transport

    def create_shell(self) -> Shell:
        """Create a remote shell, the prerequisite for running commands."""
        request = open_shell_request(self.url, self.parameters)
        response = self.send_request(request)
        return self.new_shell(parse_open_shell_response(response))

    def new_shell(self, shell_id: str) -> Shell:
        """Return the local view of the existing shell ``shell_id``."""
        return Shell(self, shell_id)

    def send_request(self, request: SoapMessage) -> str:
        """Send ``request`` through the transport and return the response body."""
        return self.http.post(self, request)

    def run(
        self,
        command: str,
        stdout: BinaryIO,
        stderr: BinaryIO,
        stdin: Optional[BinaryIO] = None,
        cancel: Optional[threading.Event] = None,
    ) -> int:
        """Run ``command``, copying its output to ``stdout`` and ``stderr``.

        Data read from ``stdin``, if given, is sent as the command's input.
        Setting ``cancel`` terminates the remote command. Returns the exit
        code; raises the error the command ended with, if any.
        """
        shell = self.create_shell()
        try:
            cmd = shell.execute(command, cancel=cancel)

            def feed_input() -> None:
                if stdin is None:
                    return
                try:
                    _pump(stdin.read, cmd.stdin.write)
                finally:
                    try:
                        cmd.stdin.close()
                    except (WinRMError, OSError):
                        pass

            workers = [
                threading.Thread(target=feed_input, daemon=True),
                threading.Thread(target=_pump, args=(cmd.stdout.read, stdout.write), daemon=True),
                threading.Thread(target=_pump, args=(cmd.stderr.read, stderr.write), daemon=True),
            ]
            for worker in workers:
                worker.start()

            cmd.wait()
            for worker in workers:
                worker.join()
            try:
                cmd.close()
            except (WinRMError, OSError):
                pass

            if cmd.error is not None:
                raise cmd.error
            return cmd.exit_code()
        finally:
            try:
                shell.close()
            except (WinRMError, OSError):
                pass

    def run_with_string(
        self, command: str, stdin: str = "", cancel: Optional[threading.Event] = None
    ) -> tuple[str, str, int]:
        """Run ``command`` with ``stdin`` as input; return stdout, stderr and exit code."""
        out, err = io.BytesIO(), io.BytesIO()
        code = self.run(command, out, err, io.BytesIO(stdin.encode("utf-8")), cancel)
        return _decode(out.getvalue()), _decode(err.getvalue()), code

    def run_cmd(
        self, command: str, cancel: Optional[threading.Event] = None
    ) -> tuple[str, str, int]:
        """Run ``command`` without input; return stdout, stderr and exit code."""
        out, err = io.BytesIO(), io.BytesIO()
        code = self.run(command, out, err, None, cancel)
        return _decode(out.getvalue()), _decode(err.getvalue()), code

    def run_powershell(
        self,
        command: str,
        stdin: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> tuple[str, str, int]:
        """Run a PowerShell script; return stdout, stderr and exit code.

        Without ``stdin`` no input is sent to the script.
        """
        encoded = powershell(command)
        if stdin is None:
            return self.run_cmd(encoded, cancel)
        return self.run_with_string(encoded, stdin, cancel)