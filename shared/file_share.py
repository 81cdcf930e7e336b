"""
Azure Files access used by the upload function
"""
import logging
from azure.core.exceptions import ResourceNotFoundError
from azure.storage.fileshare.aio import ShareClient


class FileShare:
    """Operations the upload pipeline needs from a remote file share"""

    async def share_exists(self) -> bool:
        raise NotImplementedError

    async def create_file(self, directory: str, name: str, length: int) -> None:
        raise NotImplementedError

    async def write_range(self, directory: str, name: str, offset: int, data: bytes) -> None:
        raise NotImplementedError

    async def delete_file(self, directory: str, name: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()


class AzureFileShare(FileShare):
    """File share backed by azure-storage-file-share"""

    def __init__(self, connection_string: str, share_name: str):
        self.share_name = share_name
        self.share_client = ShareClient.from_connection_string(
            conn_str=connection_string,
            share_name=share_name
        )

    def _file_client(self, directory: str, name: str):
        directory_client = self.share_client.get_directory_client(directory)
        return directory_client.get_file_client(name)

    async def share_exists(self) -> bool:
        try:
            await self.share_client.get_share_properties()
        except ResourceNotFoundError:
            return False
        return True

    async def create_file(self, directory: str, name: str, length: int) -> None:
        await self._file_client(directory, name).create_file(size=length)
        logging.info(f"Created '{directory}/{name}' ({length} bytes) in share '{self.share_name}'")

    async def write_range(self, directory: str, name: str, offset: int, data: bytes) -> None:
        await self._file_client(directory, name).upload_range(data, offset=offset, length=len(data))

    async def delete_file(self, directory: str, name: str) -> None:
        await self._file_client(directory, name).delete_file()

    async def close(self) -> None:
        try:
            await self.share_client.close()
        except Exception as e:
            logging.warning(f"Error closing file share client: {str(e)}")
