import os
import logging
import mimetypes
from datetime import datetime, timezone
from typing import List, Protocol
from .records import FileRecord
from ..config.settings import FOLDER_MIME_TYPE


class FileStore(Protocol):
    """The remote drive as seen by the organizer."""

    def list_files(self) -> List[FileRecord]:
        ...

    def get_content(self, file_id: str) -> str:
        ...

    def delete_file(self, file_id: str) -> None:
        ...


class LocalFileStore:
    """FileStore over a local directory; file ids are paths relative to root."""

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def _path(self, file_id):
        path = os.path.abspath(os.path.join(self.root, file_id))
        if os.path.commonpath([self.root, path]) != self.root:
            raise ValueError(f"File id escapes the store root: {file_id}")
        return path

    def list_files(self):
        records = []
        for current, dirs, files in os.walk(self.root):
            rel_dir = os.path.relpath(current, self.root)
            folder_path = "Root" if rel_dir == "." else rel_dir.replace(os.sep, "/")

            for d in sorted(dirs):
                file_id = os.path.relpath(os.path.join(current, d), self.root).replace(os.sep, "/")
                records.append(FileRecord(
                    file_id=file_id, name=d, mime_type=FOLDER_MIME_TYPE, folder_path=folder_path,
                ))

            for name in sorted(files):
                path = os.path.join(current, name)
                stat = os.stat(path)
                mime_type, _ = mimetypes.guess_type(name)
                records.append(FileRecord(
                    file_id=os.path.relpath(path, self.root).replace(os.sep, "/"),
                    name=name,
                    mime_type=mime_type or "application/octet-stream",
                    size_bytes=stat.st_size,
                    modified_time=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    folder_path=folder_path,
                ))
        return records

    def get_content(self, file_id):
        with open(self._path(file_id), "r", encoding="utf-8", errors="ignore") as f:
            return f.read()

    def delete_file(self, file_id):
        os.remove(self._path(file_id))


def delete_files(store, file_ids):
    """Deletes each file, collecting failures instead of stopping."""
    deleted, failed = [], []
    for file_id in file_ids:
        try:
            store.delete_file(file_id)
            deleted.append(file_id)
            logging.info(f"🗑️ Deleted {file_id}")
        except Exception as e:
            logging.error(f"❌ Failed to delete {file_id}: {e}")
            failed.append(file_id)
    return {"deleted": deleted, "failed": failed}
