"""Mapping between live absolute paths and their mirrored location under a package or backup root."""

from pathlib import Path, PurePath


def mirror_relpath(path) -> PurePath:
    """
    Turn an absolute live path into a relative subpath.

    The anchor is dropped, so on drive-lettered filesystems the drive goes
    with it and every volume lands under one mirror root:

        /etc/app.conf                 -> etc/app.conf
        C:\\Users\\admin\\test.txt    -> Users\\admin\\test.txt
    """
    p = path if isinstance(path, PurePath) else PurePath(path)
    if not p.anchor:
        return p
    return type(p)(*p.parts[1:])


def mirror_path(mirror_root: Path, live_path) -> Path:
    """Return where LIVE_PATH lives inside MIRROR_ROOT."""
    return Path(mirror_root) / mirror_relpath(Path(live_path))


def is_under(path: Path, root: Path) -> bool:
    """Return True if path is under root."""
    try:
        Path(path).resolve().relative_to(Path(root).resolve())
        return True
    except ValueError:
        return False
