import logging
import posixpath
import tempfile
from pathlib import Path, PurePosixPath

from .errors import InputError
from .models import RepositoryRef

logger = logging.getLogger(__name__)


def make_staging_dir(working_directory: Path | str | None, template_id: str) -> Path:
    """Create a fresh, uniquely named directory for one checkout.

    The directory is named ``{template_id}{random suffix}`` under
    ``working_directory`` (or the system temp dir). It is never removed
    here; the caller owns its lifetime.
    """
    root = str(working_directory) if working_directory else tempfile.gettempdir()
    staging = Path(tempfile.mkdtemp(prefix=template_id, dir=root))
    logger.debug("Created staging directory %s", staging)
    return staging


def resolve_template_dir(repo: RepositoryRef, spec_path: str | None) -> Path:
    """Return the template directory relative to the checkout root."""
    # a leading slash is relative to the file directory, not the filesystem root
    sub_path = (spec_path or ".").lstrip("/") or "."
    rel = PurePosixPath(posixpath.normpath(posixpath.join(repo.directory, sub_path)))
    if rel.parts and rel.parts[0] == "..":
        raise InputError(
            f"Template path '{spec_path}' resolves outside the repository checkout"
        )
    return Path(*rel.parts) if rel.parts else Path(".")
