"""A command running in a remote shell, with its stdin, stdout and stderr."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from winrmclient.errors import WinRMError
from winrmclient.request import get_output_request, send_input_request, signal_request
from winrmclient.response import parse_output_response

if TYPE_CHECKING:
    from winrmclient.shell import Shell

EOF_EXIT_CODE = 16001
_ENVELOPE_MARGIN = 1000


class _Pipe:
    """A buffered byte pipe that may be closed cleanly or with an error."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._buffer = bytearray()
        self._closed = False
        self._error: Optional[BaseException] = None

    def write(self, data: bytes) -> None:
        with self._cond:
            if not self._closed:
                self._buffer.extend(data)
                self._cond.notify_all()

    def close(self, error: Optional[BaseException] = None) -> None:
        with self._cond:
            if not self._closed:
                self._closed = True
                self._error = error
            self._cond.notify_all()

    def read(self, size: int = -1) -> bytes:
        with self._cond:
            while not self._buffer and not self._closed:
                self._cond.wait()
            if self._buffer:
                count = len(self._buffer) if size < 0 else min(size, len(self._buffer))
                data = bytes(self._buffer[:count])
                del self._buffer[:count]
                return data
            if self._error is not None:
                raise self._error
            return b""


class CommandReader:
    """Readable output stream of a command."""

    def __init__(self, stream: str) -> None:
        self.stream = stream
        self._pipe = _Pipe()

    def read(self, size: int = -1) -> bytes:
        """Block until data is available; return b"" at end of stream.

        Raises the error the stream was closed with once its data is drained.
        """
        return self._pipe.read(size)


class CommandWriter:
    """Writable stdin stream of a command."""

    def __init__(self, command: Command) -> None:
        self._command = command
        self._lock = threading.Lock()
        self._eof = False

    def write(self, data: bytes) -> int:
        """Send ``data``, in chunks that fit the envelope size."""
        with self._lock:
            if self._eof:
                raise BrokenPipeError("write on closed pipe")
            return self._write(bytes(data))

    def _write(self, data: bytes) -> int:
        chunk = max(1, self._command.client.parameters.envelope_size - _ENVELOPE_MARGIN)
        written = 0
        for start in range(0, len(data), chunk):
            piece = data[start : start + chunk]
            try:
                self._command._send_input(piece, False)
            except WinRMError as exc:
                raise WinRMError(f"short write: {written} of {len(data)} bytes") from exc
            written += len(piece)
        return written

    def write_close(self, data: bytes) -> int:
        """Write ``data`` and then signal end of input."""
        written = self.write(data)
        self.close()
        return written

    def close(self) -> None:
        """Signal end of input to the remote command."""
        with self._lock:
            if self._eof:
                raise BrokenPipeError("close of closed pipe")
            self._eof = True
            self._command._send_input(b"", True)


class Command:
    """A command started on a shell; output is fetched in the background.

    Setting the ``cancel`` event terminates the remote command.
    """

    def __init__(self, shell: Shell, command_id: str, cancel: Optional[threading.Event] = None) -> None:
        self.shell = shell
        self.client = shell.client
        self.id = command_id
        self.error: Optional[BaseException] = None
        self._exit_code = 0
        self._done = threading.Event()
        self._cancelled = threading.Event()
        self.stdin = CommandWriter(self)
        self.stdout = CommandReader("stdout")
        self.stderr = CommandReader("stderr")
        self._thread = threading.Thread(target=self._fetch_output, args=(cancel,), daemon=True)
        self._thread.start()

    def _fetch_output(self, cancel: Optional[threading.Event]) -> None:
        watch = cancel
        while True:
            if self._cancelled.is_set():
                self._slurp_all_output()
                error = WinRMError("canceled")
                self._close_streams(error)
                self._done.set()
                return
            if watch is not None and watch.is_set():
                self.error = WinRMError("context canceled")
                watch = None
                try:
                    self.close()
                except WinRMError:
                    pass
                continue
            finished, error = self._slurp_all_output()
            if finished:
                self.error = error
                self._done.set()
                return

    def _check(self) -> None:
        if not self.id:
            raise WinRMError("Command has already been closed")
        if self.shell is None:
            raise WinRMError("Command has no associated shell")
        if self.client is None:
            raise WinRMError("Command has no associated client")

    def _close_streams(self, error: Optional[BaseException] = None) -> None:
        self.stdout._pipe.close(error)
        self.stderr._pipe.close(error)

    def _slurp_all_output(self) -> tuple[bool, Optional[BaseException]]:
        try:
            self._check()
        except WinRMError as exc:
            self._close_streams(exc)
            return True, exc

        request = get_output_request(
            self.client.url, self.shell.id, self.id, "stdout stderr", self.client.parameters
        )
        try:
            response = self.client.send_request(request)
        except Exception as exc:  # noqa: BLE001 - any transport failure ends or retries
            if isinstance(exc, TimeoutError) or "OperationTimeout" in str(exc):
                return False, exc
            if "EOF" in str(exc):
                self._exit_code = EOF_EXIT_CODE
            self._close_streams(exc)
            return True, exc

        try:
            result = parse_output_response(response)
        except WinRMError as exc:
            self._close_streams(exc)
            return True, exc
        if result.stdout:
            self.stdout._pipe.write(result.stdout)
        if result.stderr:
            self.stderr._pipe.write(result.stderr)
        if result.finished:
            self._exit_code = result.exit_code
            self._close_streams()
        return result.finished, None

    def _send_input(self, data: bytes, eof: bool) -> None:
        self._check()
        request = send_input_request(
            self.client.url, self.shell.id, self.id, data, eof, self.client.parameters
        )
        self.client.send_request(request)

    def close(self) -> None:
        """Terminate the running command."""
        self._check()
        self._cancelled.set()
        request = signal_request(self.client.url, self.shell.id, self.id, self.client.parameters)
        self.client.send_request(request)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the remote command ends; False if ``timeout`` ran out."""
        return self._done.wait(timeout)

    def exit_code(self) -> int:
        """The exit code once finished; 0 before that."""
        return self._exit_code