"""Infrastructure adapters for project persistence.

Export/import of the planned network as a JSON-compatible blob, plus file
helpers for hosts that save projects to disk.
"""

from .errors import PersistenceError, ProjectFormatError
from .project_codec import (
    ImportReport,
    dumps_project,
    export_project,
    import_project,
    loads_project,
    read_project_file,
    write_project_file,
)

__all__ = [
    "ImportReport",
    "PersistenceError",
    "ProjectFormatError",
    "dumps_project",
    "export_project",
    "import_project",
    "loads_project",
    "read_project_file",
    "write_project_file",
]
