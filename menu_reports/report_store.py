import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import DEFAULT_REPORT_DIR, ENV_REPORT_DIR
from .exporters import ExportArtifact

logger = logging.getLogger(__name__)


def resolve_report_dir(report_dir: Optional[Path] = None) -> Path:
    if report_dir is not None:
        return Path(report_dir)
    env_dir = os.getenv(ENV_REPORT_DIR, "").strip()
    return Path(env_dir) if env_dir else DEFAULT_REPORT_DIR


def _safe_filename(filename: str) -> str:
    """Flatten path separators so a subject name cannot add directories."""
    for sep in (os.sep, os.altsep):
        if sep:
            filename = filename.replace(sep, "-")
    return filename


def save_artifact(artifact: ExportArtifact, report_dir: Optional[Path] = None) -> Path:
    """
    Persist an export artifact and a small metadata sidecar. The artifact is
    written to a temp file and moved into place so readers never see a
    partial file. Returns the artifact path.
    """
    target_dir = resolve_report_dir(report_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / _safe_filename(artifact.filename)
    if path.resolve().parent != target_dir.resolve():
        raise ValueError(f"Refusing to write {artifact.filename!r} outside {target_dir}")

    fd, tmp_name = tempfile.mkstemp(dir=target_dir, prefix=".export-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(artifact.content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    metadata = {
        "filename": path.name,
        "format": artifact.fmt,
        "mime_type": artifact.mime_type,
        "bytes": artifact.size,
        "sections": list(artifact.sections),
        "saved_at": datetime.now().isoformat(timespec="seconds"),
        "path": str(path),
    }
    try:
        path.with_name(f"{path.name}.json").write_text(json.dumps(metadata, indent=2))
    except OSError:
        # Metadata failures should not block the export.
        logger.warning("could not write metadata sidecar for %s", path, exc_info=True)
    logger.info("saved %s (%d bytes)", path, artifact.size)
    return path
