"""
HTTP responses for upload outcomes
"""
import azure.functions as func
from .uploads import UploadOutcome

NO_FILE_MESSAGE = "No file uploaded."
INVALID_FILENAME_MESSAGE = "Invalid file name."
SUCCESS_MESSAGE = "File uploaded successfully."


def build_response(outcome: UploadOutcome) -> func.HttpResponse:
    if outcome is UploadOutcome.SUCCESS:
        return func.HttpResponse(SUCCESS_MESSAGE, status_code=200, mimetype="text/plain")
    if outcome is UploadOutcome.NO_FILE:
        return func.HttpResponse(NO_FILE_MESSAGE, status_code=400, mimetype="text/plain")
    if outcome is UploadOutcome.INVALID_FILENAME:
        return func.HttpResponse(INVALID_FILENAME_MESSAGE, status_code=400, mimetype="text/plain")
    # Share unavailable and transport errors carry no detail to the client
    return func.HttpResponse(status_code=500)
