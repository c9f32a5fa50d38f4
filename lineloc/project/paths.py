"""Conversion between file references and portable stored paths."""

import os
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..config import config, PATH_STYLES
from ..errors import PathOutsideProjectError, ReferenceNotFoundError

PathLike = Union[str, os.PathLike]


class PathResolver:
    """
    Stores file and folder references as paths that survive moving the project.

    Two styles are supported:
    - "relative": the path relative to the project root. References outside
      the root cannot be stored.
    - "placeholder": the project root replaced by a token such as
      ${ProjectRoot}. References outside the root are stored as absolute
      paths.

    Reading accepts either form, whatever the configured style.
    """

    def __init__(self, style: Optional[str] = None, placeholder: Optional[str] = None):
        self.style = style or config.path_style
        self.placeholder = placeholder or config.project_root_variable
        if self.style not in PATH_STYLES:
            raise ValueError(f"Unknown path style {self.style!r}; expected one of {', '.join(PATH_STYLES)}")

    def to_stored(self, reference: PathLike, project_root: PathLike) -> str:
        """
        Convert a reference into the string stored in the project file.

        Args:
            reference: File or folder path (absolute, or relative to the working directory)
            project_root: Root folder of the project

        Returns:
            Stored path string using forward slashes

        Raises:
            PathOutsideProjectError: In "relative" style, if the reference is outside the root
        """
        root = Path(os.path.abspath(project_root))
        target = Path(os.path.abspath(reference))

        try:
            relative = target.relative_to(root)
        except ValueError:
            if self.style == "relative":
                raise PathOutsideProjectError(target, root) from None
            return target.as_posix()

        relative_posix = relative.as_posix()
        if self.style == "relative":
            return relative_posix
        if relative_posix == ".":
            return self.placeholder
        return f"{self.placeholder}/{relative_posix}"

    def resolve(self, stored: str, project_root: PathLike) -> Path:
        """Turn a stored path into an absolute path without checking it exists."""
        root = Path(os.path.abspath(project_root))

        if stored == self.placeholder:
            return root
        if stored.startswith(self.placeholder + "/"):
            return root.joinpath(*PurePosixPath(stored[len(self.placeholder) + 1:]).parts)

        path = Path(stored)
        if path.is_absolute():
            return path
        return Path(os.path.normpath(root / path))

    def to_reference(self, stored: str, project_root: PathLike) -> Path:
        """
        Convert a stored path back into a reference to an existing file or folder.

        Args:
            stored: Path string from the project file
            project_root: Root folder of the project

        Returns:
            Absolute path to the file or folder

        Raises:
            ReferenceNotFoundError: If nothing exists at the stored path
        """
        resolved = self.resolve(stored, project_root)
        if not resolved.exists():
            raise ReferenceNotFoundError(stored, resolved)
        return resolved
