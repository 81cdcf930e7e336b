"""
Upload pipeline: copies one uploaded file into the configured file share.

Every step returns a StepResult instead of raising, so the caller composes
the steps explicitly and a failure at any point maps to one UploadOutcome.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Callable, Mapping, Optional

from .config import Config
from .file_share import AzureFileShare, FileShare

ShareFactory = Callable[[str, str], FileShare]

MAX_FILENAME_LENGTH = 255

# Characters Azure Files rejects in file names, plus control characters
_INVALID_FILENAME_CHARS = re.compile(r'[":|<>*?\x00-\x1f]')


class UploadOutcome(Enum):
    SUCCESS = "success"
    NO_FILE = "no_file"
    INVALID_FILENAME = "invalid_filename"
    SHARE_UNAVAILABLE = "share_unavailable"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class StepResult:
    value: Any = None
    outcome: UploadOutcome = UploadOutcome.SUCCESS
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.outcome is UploadOutcome.SUCCESS

    @classmethod
    def success(cls, value: Any = None) -> "StepResult":
        return cls(value=value)

    @classmethod
    def failure(cls, outcome: UploadOutcome, error: Optional[BaseException] = None) -> "StepResult":
        return cls(outcome=outcome, error=error)


@dataclass
class UploadedFile:
    filename: str
    length: int
    stream: BinaryIO


def select_first_file(files: Mapping[str, Any]) -> Optional[Any]:
    """Return the first file part of a parsed form, ignoring the rest"""
    if not files:
        return None
    return next(iter(files.values()), None)


def resolve_filename(raw_name: Optional[str]) -> StepResult:
    """
    Reduce a client supplied filename to a single safe path component.
    Both separators are honoured so 'C:\\fakepath\\a.txt' and '../a.txt'
    resolve to 'a.txt'.
    """
    name = (raw_name or "").replace("\\", "/").split("/")[-1].strip()

    if name in ("", ".", ".."):
        logging.warning(f"Rejected upload filename {raw_name!r}: no usable name")
        return StepResult.failure(UploadOutcome.INVALID_FILENAME)
    if len(name) > MAX_FILENAME_LENGTH or _INVALID_FILENAME_CHARS.search(name):
        logging.warning(f"Rejected upload filename {raw_name!r}: not a valid share file name")
        return StepResult.failure(UploadOutcome.INVALID_FILENAME)

    return StepResult.success(name)


def read_upload(filename: str, stream: BinaryIO) -> StepResult:
    """Measure the uploaded stream and wrap it as an UploadedFile"""
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return StepResult.success(UploadedFile(filename=filename, length=length, stream=stream))
    except Exception as e:
        logging.error(f"Error reading uploaded file '{filename}': {str(e)}", exc_info=True)
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)


def connect(settings: Config, share_factory: ShareFactory) -> StepResult:
    try:
        share = share_factory(settings.storage_connection_string, settings.file_share_name)
        return StepResult.success(share)
    except Exception as e:
        logging.error(f"Error connecting to file share: {str(e)}", exc_info=True)
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)


async def check_share(share: FileShare, share_name: str) -> StepResult:
    try:
        if not await share.share_exists():
            logging.error(f"File share '{share_name}' does not exist")
            return StepResult.failure(UploadOutcome.SHARE_UNAVAILABLE)
        return StepResult.success()
    except Exception as e:
        logging.error(f"Error checking file share '{share_name}': {str(e)}", exc_info=True)
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)


def locate_directory(settings: Config) -> StepResult:
    """Resolve the upload directory name; the directory itself is never created"""
    try:
        directory = settings.upload_directory.strip("/")
    except Exception as e:
        logging.error(f"Error resolving upload directory: {str(e)}", exc_info=True)
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)
    if not directory:
        error = ValueError("Upload directory must not be empty")
        logging.error(f"Error resolving upload directory: {str(error)}")
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, error)
    return StepResult.success(directory)


async def create_remote_file(share: FileShare, directory: str, name: str, length: int) -> StepResult:
    try:
        await share.create_file(directory, name, length)
        return StepResult.success()
    except Exception as e:
        logging.error(f"Error creating file '{directory}/{name}': {str(e)}", exc_info=True)
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)


async def copy_range(share: FileShare, directory: str, uploaded: UploadedFile) -> StepResult:
    """Write bytes [0, length) of the upload as one range"""
    if uploaded.length == 0:
        return StepResult.success()
    try:
        data = uploaded.stream.read(uploaded.length)
        if len(data) != uploaded.length:
            raise IOError(f"Expected {uploaded.length} bytes from upload stream, read {len(data)}")
        await share.write_range(directory, uploaded.filename, 0, data)
        return StepResult.success()
    except Exception as e:
        logging.error(f"Error uploading range to '{directory}/{uploaded.filename}': {str(e)}", exc_info=True)
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)


async def discard_partial_file(share: FileShare, directory: str, name: str) -> StepResult:
    try:
        await share.delete_file(directory, name)
        logging.info(f"Deleted partially uploaded file '{directory}/{name}'")
        return StepResult.success()
    except Exception as e:
        logging.warning(f"Could not delete partially uploaded file '{directory}/{name}': {str(e)}")
        return StepResult.failure(UploadOutcome.TRANSPORT_ERROR, e)


async def upload_to_share(uploaded: UploadedFile, settings: Config,
                          share_factory: ShareFactory = AzureFileShare) -> UploadOutcome:
    """Run the upload steps in order, stopping at the first failure"""
    connected = connect(settings, share_factory)
    if not connected.ok:
        return connected.outcome

    async with connected.value as share:
        exists = await check_share(share, settings.file_share_name)
        if not exists.ok:
            return exists.outcome

        located = locate_directory(settings)
        if not located.ok:
            return located.outcome
        directory = located.value

        created = await create_remote_file(share, directory, uploaded.filename, uploaded.length)
        if not created.ok:
            return created.outcome

        copied = await copy_range(share, directory, uploaded)
        if not copied.ok:
            await discard_partial_file(share, directory, uploaded.filename)
            return copied.outcome

    logging.info(f"Uploaded '{uploaded.filename}' ({uploaded.length} bytes) to "
                 f"'{settings.file_share_name}/{directory}'")
    return UploadOutcome.SUCCESS
