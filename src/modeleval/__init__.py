"""modeleval — grouped model-quality metrics over tabular predictions.

ROC curves, AUC, thresholded binary-classification scores, and
regression error statistics, evaluated independently per group.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("modeleval")
except PackageNotFoundError:
    # Fallback for source-only usage before installation.
    __version__ = "0.1.0"
