# openmensa_berlin/storage.py
# Dateien atomar schreiben (temporäre Datei + rename)

import os
import shutil
import tempfile
from pathlib import Path


def write_atomic(path, data, backup=False):
    """Replace ``path`` with ``data`` (bytes) so readers never see a partial file.

    With ``backup`` the previous content is kept as ``<path>.old``.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix="." + path.name + ".", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if backup and path.exists():
            shutil.copy2(path, path.with_name(path.name + ".old"))
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
