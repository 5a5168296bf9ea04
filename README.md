# winrmclient

A client library for Windows Remote Management (WinRM). It opens a remote
shell over the WS-Management SOAP protocol, runs commands or PowerShell
scripts, streams their standard input and output, and reports their exit
code. It uses only the standard library.

No connection is made when a client is created; the first request goes out
when a shell is opened.

## Installation

```
pip install winrmclient
```

## Running a command

```python
from winrmclient.client import Client
from winrmclient.endpoint import Endpoint

endpoint = Endpoint(host="server.example.com", port=5985)
password = "password"
client = Client(endpoint, "Administrator", password=password)

stdout, stderr, exit_code = client.run_cmd("ipconfig /all")
print(exit_code)
print(stdout)
```

`Endpoint` builds the service URL from its host, port and whether HTTPS is
used: `endpoint.url()` gives `http://server.example.com:5985/wsman` here, or
`https://...` with `https=True`. `timeout` is in seconds and bounds the wait
for response headers; zero, the default, means 60 seconds. `insecure=True`
skips certificate checks, `ca_cert` takes PEM data to trust, and
`tls_server_name` overrides the name the server certificate is checked
against.

## PowerShell

```python
stdout, stderr, exit_code = client.run_powershell("Get-Process")
```

`winrmclient.powershell.powershell` turns a script into a
`powershell.exe -EncodedCommand ...` command line, with progress output
turned off so it does not show up on stderr. `run_powershell` takes an
optional `stdin` string to send as the script's input.

## Feeding standard input

```python
stdout, stderr, exit_code = client.run_with_string("findstr foo", "foo\nbar\n")
```

`Client.run(command, stdout, stderr, stdin=None, cancel=None)` takes binary
file-like objects, writes the output to them as it arrives, and returns the
exit code. If the command ended with an error, that error is raised.

## Working with shells directly

```python
shell = client.create_shell()
try:
    command = shell.execute("dir", "C:\\")
    data = command.stdout.read()
    command.wait()
    print(command.exit_code())
finally:
    shell.close()
```

A `Command` fetches output in a background thread. `command.stdout` and
`command.stderr` are readers whose `read()` blocks until data is available
and returns `b""` at the end of the stream. `command.stdin.write(data)` sends
input in chunks that fit the envelope size, and `command.stdin.close()`
signals end of input. `command.close()` terminates the remote command.

Every run method and `Shell.execute` accept an optional `cancel`
`threading.Event`; setting it terminates the remote command.

## Parameters and transports

`winrmclient.parameters.Parameters` holds the operation timeout (`PT60S`),
the locale (`en-US`) and the maximum envelope size (153600 bytes) sent with
every request. Pass your own instance to `Client` to change them.

By default requests go through `winrmclient.transport.HttpTransport`, which
uses HTTP basic authentication and the proxy settings of the environment.
`Parameters.dial` replaces how the default transport opens its connection,
and `Parameters.transport_decorator` supplies a different transport, for
example `CertificateTransport`, which authenticates over HTTPS with the
client certificate and key given as `cert` and `key` on the endpoint.

## Errors

Failures raise `winrmclient.errors.WinRMError`. A command that cannot be
started raises `ExecuteCommandError`, whose `body` holds the server's raw
response. A server that does not answer in time raises
`winrmclient.transport.TransportTimeout`.

## What it does not do

Only basic authentication and client certificates are supported: there is
no NTLM, Kerberos or CredSSP authentication, and no message-level
encryption, so plain-HTTP endpoints must accept unencrypted basic
authentication. The package is a library and has no command-line tool.

## Tests

```
pip install winrmclient[test]
pytest
```