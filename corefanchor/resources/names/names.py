from typing import FrozenSet, Optional
from functools import lru_cache
import logging, os

logger = logging.getLogger(__name__)

script_dir = os.path.dirname(os.path.abspath(__file__))


@lru_cache(maxsize=None)
def load_common_names(path: Optional[str] = None) -> FrozenSet[str]:
    """Load a list of common names, one name per line.  Common names
    are never folded onto a target name, since they are too likely to
    refer to several people.

    .. note::

        The list is read once per process and per ``path``.  Reading
        failures are not fatal: a warning is logged and an empty set is
        returned.

    :param path: path of the names file.  Defaults to the list shipped
        with this package.
    """
    if path is None:
        path = f"{script_dir}/datas/common_names.txt"
    try:
        with open(os.path.expanduser(path)) as f:
            return frozenset(line.strip() for line in f if line.strip() != "")
    except OSError as e:
        logger.warning(f"could not load common names from {path}: {e}")
        return frozenset()
