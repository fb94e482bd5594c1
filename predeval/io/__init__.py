"""I/O utilities.

Subpackages
-----------
- :mod:`predeval.io.readers`: parsing adapters for dataset, split and prediction files
"""

from .readers import *  # noqa: F401,F403
