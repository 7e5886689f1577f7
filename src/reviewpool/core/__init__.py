"""reviewpool core library: models, schemas, storage and the assignment engine."""
from . import config
from . import errors
from . import models
from . import schemas
from . import storage
from . import assignment

__all__ = [
    "config",
    "errors",
    "models",
    "schemas",
    "storage",
    "assignment",
]
