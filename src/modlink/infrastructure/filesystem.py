"""Filesystem primitives for projection entries.

Symlinks are projections in link mode; hardlinked or byte-identical
copies are projections in copy mode. Nothing here follows a symlink
unless it says so.
"""

from __future__ import annotations

import filecmp
import os
import shutil
from pathlib import Path


def lexists(path: Path) -> bool:
    """True if *path* exists, counting dangling symlinks."""
    return path.is_symlink() or path.exists()


def is_dangling(path: Path) -> bool:
    """True if *path* is a symlink whose target does not exist."""
    return path.is_symlink() and not path.exists()


def points_to(link: Path, src: Path) -> bool:
    """True if symlink *link* resolves to the same entry as *src*."""
    if not link.is_symlink() or not src.exists():
        return False
    try:
        return link.resolve(strict=True) == src.resolve(strict=True)
    except OSError:
        return False


def remove_entry(path: Path) -> None:
    """Remove a file, symlink, or directory tree at *path*.

    A symlink to a directory is unlinked, never descended into.
    """
    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)


def make_symlink(src: Path, dest: Path, *, relative: bool = False) -> None:
    """Create ``dest -> src``, relative to ``dest.parent`` when asked."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    target = os.path.relpath(src, dest.parent) if relative else os.fspath(src)
    os.symlink(target, dest, target_is_directory=src.is_dir())


def hardlink_copy(src: Path, dest: Path) -> None:
    """Duplicate *src* at *dest* using hardlinks for every regular file.

    Symlinks inside a copied tree are recreated as symlinks.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    if src.is_dir():
        shutil.copytree(src, dest, symlinks=True, copy_function=os.link)
    else:
        os.link(src, dest)


def is_hardlinked_copy(src: Path, dest: Path) -> bool:
    """True if *dest* is a hardlinked copy of *src*.

    Files must share an inode; directories must hold the same set of
    entries with every file sharing an inode with its source.
    """
    if dest.is_symlink() or not dest.exists() or not src.exists():
        return False
    if src.is_file():
        return dest.is_file() and os.path.samefile(src, dest)
    if not dest.is_dir():
        return False

    for dirpath, dirnames, filenames in os.walk(src):
        rel = Path(dirpath).relative_to(src)
        mirror = dest / rel
        expected = set(dirnames) | set(filenames)
        try:
            actual = {entry.name for entry in os.scandir(mirror)}
        except OSError:
            return False
        if expected != actual:
            return False
        for name in filenames:
            src_file = Path(dirpath) / name
            if src_file.is_symlink():
                continue
            try:
                if not os.path.samefile(src_file, mirror / name):
                    return False
            except OSError:
                return False
    return True


def same_content(src: Path, dest: Path) -> bool:
    """True if real entry *dest* holds byte-identical content to *src*.

    Covers copies whose inodes no longer match the source, such as the
    leftovers of an export fetched into a since-discarded scratch tree.
    """
    if dest.is_symlink() or not dest.exists() or not src.exists():
        return False
    if src.is_file():
        return dest.is_file() and filecmp.cmp(src, dest, shallow=False)
    if not dest.is_dir():
        return False

    for dirpath, dirnames, filenames in os.walk(src):
        rel = Path(dirpath).relative_to(src)
        mirror = dest / rel
        try:
            actual = {entry.name for entry in os.scandir(mirror)}
        except OSError:
            return False
        if set(dirnames) | set(filenames) != actual:
            return False
        for name in dirnames + filenames:
            src_entry = Path(dirpath) / name
            dest_entry = mirror / name
            if src_entry.is_symlink() or dest_entry.is_symlink():
                if not (src_entry.is_symlink() and dest_entry.is_symlink()):
                    return False
                if os.readlink(src_entry) != os.readlink(dest_entry):
                    return False
            elif src_entry.is_dir() and not dest_entry.is_dir():
                return False
        for name in filenames:
            src_file = Path(dirpath) / name
            dest_file = mirror / name
            if src_file.is_symlink():
                continue
            if not dest_file.is_file():
                return False
            if not filecmp.cmp(src_file, dest_file, shallow=False):
                return False
    return True


def is_within(root: Path, path: Path) -> bool:
    """True if *path* stays inside *root* once normalized lexically."""
    root_abs = Path(os.path.abspath(root))
    return Path(os.path.abspath(path)).is_relative_to(root_abs)


def linked_ancestor(root: Path, path: Path) -> Path | None:
    """Return the first existing ancestor of *path* below *root* that is a symlink.

    *path* must already be lexically inside *root*. Creating an entry under
    such an ancestor would write through the link into its target.
    """
    root_abs = Path(os.path.abspath(root))
    rel = Path(os.path.abspath(path)).relative_to(root_abs)
    current = root_abs
    for part in rel.parts[:-1]:
        current = current / part
        if current.is_symlink():
            return current
        if not current.exists():
            return None
    return None
