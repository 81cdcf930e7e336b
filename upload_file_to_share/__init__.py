"""
Upload endpoint that copies a multipart file into the Azure Files share
"""
import logging
import sys
from contextlib import closing
from typing import Optional

import azure.functions as func
from shared.config import Config, config
from shared.file_share import AzureFileShare
from shared.responses import build_response
from shared.uploads import (
    ShareFactory,
    UploadOutcome,
    read_upload,
    resolve_filename,
    select_first_file,
    upload_to_share,
)

# Force logging to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    stream=sys.stdout,
    force=True
)


async def handle(req: func.HttpRequest, settings: Optional[Config] = None,
                 share_factory: ShareFactory = AzureFileShare) -> func.HttpResponse:
    """
    Store the first uploaded file under the upload directory of the share.
    Later file parts are ignored.
    """
    logging.info("UploadFileToShare processing a request for a file.")
    if settings is None:
        settings = config

    upload = select_first_file(req.files)
    if upload is None:
        return build_response(UploadOutcome.NO_FILE)

    with closing(upload):
        name = resolve_filename(upload.filename)
        if not name.ok:
            return build_response(name.outcome)

        uploaded = read_upload(name.value, upload.stream)
        if not uploaded.ok:
            return build_response(uploaded.outcome)

        outcome = await upload_to_share(uploaded.value, settings, share_factory)

    return build_response(outcome)


async def main(req: func.HttpRequest) -> func.HttpResponse:
    return await handle(req)
