"""Shared fixtures for the upload function tests."""
import azure.functions as func
import pytest

from shared.config import Config
from shared.file_share import FileShare

BOUNDARY = "----townhallUploadBoundary"


class InMemoryFileShare(FileShare):
    """File share fake that keeps file bytes in a dict and records calls.

    Set ``fail_on[operation] = exc`` to make that operation raise.
    """

    def __init__(self, exists=True):
        self.exists = exists
        self.files = {}
        self.calls = []
        self.fail_on = {}
        self.closed = False

    def _record(self, operation, *args):
        self.calls.append((operation,) + args)
        if operation in self.fail_on:
            raise self.fail_on[operation]

    async def share_exists(self):
        self._record("share_exists")
        return self.exists

    async def create_file(self, directory, name, length):
        self._record("create_file", directory, name, length)
        self.files[f"{directory}/{name}"] = bytearray(length)

    async def write_range(self, directory, name, offset, data):
        self._record("write_range", directory, name, offset, len(data))
        content = self.files[f"{directory}/{name}"]
        content[offset:offset + len(data)] = data

    async def delete_file(self, directory, name):
        self._record("delete_file", directory, name)
        del self.files[f"{directory}/{name}"]

    async def close(self):
        self.closed = True

    def operations(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def share():
    return InMemoryFileShare()


@pytest.fixture
def share_factory(share):
    """Factory handing out the fake share; connection arguments are kept on ``.connections``."""
    connections = []

    def factory(connection_string, share_name):
        connections.append((connection_string, share_name))
        return share

    factory.connections = connections
    return factory


@pytest.fixture
def settings():
    return Config(values={
        "AzureWebJobsStorage": "DefaultEndpointsProtocol=https;AccountName=devstore;AccountKey=a2V5;EndpointSuffix=core.windows.net",
        "FILE_SHARE_NAME": "contractsshare",
    })


def _multipart_body(parts):
    body = b""
    for field, filename, content in parts:
        body += (
            f"--{BOUNDARY}\r\n"
            f"Content-Disposition: form-data; name=\"{field}\"; filename=\"{filename}\"\r\n"
            "Content-Type: application/octet-stream\r\n"
            "\r\n"
        ).encode() + content + b"\r\n"
    body += f"--{BOUNDARY}--\r\n".encode()
    return body


@pytest.fixture
def make_request():
    """Build an HttpRequest carrying the given (field, filename, content) file parts."""

    def build(parts=(), method="POST"):
        if not parts:
            return func.HttpRequest(method=method, url="/api/upload_file_to_share", body=b"")
        return func.HttpRequest(
            method=method,
            url="/api/upload_file_to_share",
            headers={"Content-Type": f"multipart/form-data; boundary={BOUNDARY}"},
            body=_multipart_body(parts),
        )

    return build
