"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Single-file operations used by the safe deleter: trash, permanent removal
and rename-with-prefix. Every method raises on failure; batching and error
collection are the caller's job.
"""
import os
from pathlib import Path

from send2trash import send2trash


class FileService:
    """
    Cross-platform file operations.
    Missing paths raise FileNotFoundError before anything is attempted.
    """

    @staticmethod
    def _existing_file(file_path: str) -> Path:
        path = Path(file_path)
        if not path.exists() and not path.is_symlink():
            raise FileNotFoundError(f"File not found: {path}")
        if path.is_dir():
            raise IsADirectoryError(f"Is a directory: {path}")
        return path

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = FileService._existing_file(file_path)

        try:
            send2trash(str(path))
        except OSError:
            raise
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @staticmethod
    def delete_permanently(file_path: str) -> None:
        """Unlinks a file. No way back."""
        path = FileService._existing_file(file_path)
        os.remove(path)

    @staticmethod
    def renamed_path(file_path: str, prefix: str) -> str:
        """Destination of rename_with_prefix: same directory, '<prefix>_<name>'."""
        FileService.validate_prefix(prefix)
        path = Path(file_path)
        return str(path.with_name(f"{prefix}_{path.name}"))

    @staticmethod
    def rename_with_prefix(file_path: str, prefix: str) -> str:
        """
        Renames a file in place to '<prefix>_<name>' and returns the new path.

        Raises:
            FileNotFoundError: source missing
            FileExistsError: destination already exists (checked before renaming)
        """
        path = FileService._existing_file(file_path)
        destination = Path(FileService.renamed_path(file_path, prefix))

        if destination.exists() or destination.is_symlink():
            raise FileExistsError(f"Destination exists: {destination}")

        os.rename(path, destination)
        return str(destination)

    @staticmethod
    def validate_prefix(prefix: str) -> None:
        if not prefix or not prefix.strip():
            raise ValueError("Rename prefix cannot be empty")
        if os.sep in prefix or (os.altsep and os.altsep in prefix):
            raise ValueError(f"Rename prefix cannot contain a path separator: '{prefix}'")
