"""
File manifest handling: flattening the camera listing and finding the
files an exposure added.
"""
import logging
from typing import Iterable, Iterator, List

from .models import CameraFile

def flatten(nodes: Iterable[CameraFile]) -> List[CameraFile]:
    """
    Walks the storage/container/directory tree depth-first and returns
    only the plain files, in listing order.
    """
    return list(_iter_files(nodes))

def _iter_files(nodes: Iterable[CameraFile]) -> Iterator[CameraFile]:
    for node in nodes:
        if node.is_dir:
            yield from _iter_files(node.children)
        else:
            yield node

def load_manifest(camera) -> List[CameraFile]:
    """Lists every file currently stored on the camera."""
    files = flatten(camera.list_files())
    logging.debug(f"Camera listing: {len(files)} files")
    return files

def find_new(baseline: List[CameraFile],
             candidate: List[CameraFile],
             count_shortcut: bool = True) -> List[CameraFile]:
    """
    Returns the records of `candidate` whose name is absent from `baseline`,
    keeping candidate order.

    With `count_shortcut`, equal-length manifests are assumed identical and
    nothing is compared. That only holds when files are never removed
    between the two snapshots; pass False to always compare names.
    """
    if count_shortcut and len(baseline) == len(candidate):
        return []

    known = {f.name for f in baseline}
    return [f for f in candidate if f.name not in known]

def advance(listing: List[CameraFile], removed: Iterable[CameraFile] = ()) -> List[CameraFile]:
    """Next baseline: the fresh listing minus files deleted from the camera."""
    gone = {f.name for f in removed}
    if not gone:
        return list(listing)
    return [f for f in listing if f.name not in gone]
