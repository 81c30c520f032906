"""Version info"""

__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

__author__ = "onlinemetrics Contributors"
__email__ = "onlinemetrics@example.com"
__license__ = "Apache-2.0"
__copyright__ = "Copyright 2026 onlinemetrics Contributors"

PROJECT_NAME = "onlinemetrics"
PROJECT_FULL_NAME = "Online evaluation metrics for classification and regression"
PROJECT_DESCRIPTION = (
    "Thread-safe streaming accumulators for accuracy, confusion matrices, "
    "log loss and regression errors"
)
