import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .enums import Stage
from .exceptions import ToolchainError

logger = logging.getLogger(__name__)

SOURCE_NAME = "input.cpp"
ASSEMBLY_NAME = "output.s"


@contextmanager
def scoped_workspace(prefix: str = "simdmca-", base_dir: Optional[str] = None) -> Iterator[Path]:
    """Create a uniquely named temp directory and always remove it afterwards.

    Creation failures raise ToolchainError(WORKSPACE_SETUP). Removal failures
    are logged and never propagate.
    """
    try:
        workspace = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir))
    except OSError as e:
        raise ToolchainError(Stage.WORKSPACE_SETUP, f"Could not create temporary workspace: {e}") from e
    logger.debug(f"Created temp directory: {workspace}")
    try:
        yield workspace
    finally:
        remove_workspace(workspace)


def remove_workspace(workspace: Path) -> bool:
    try:
        shutil.rmtree(workspace)
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning(f"[{Stage.CLEANUP.value}] Could not remove {workspace}: {e}")
        return False
    logger.debug(f"Cleaned up {workspace}")
    return True
