# Path: catalog_validator/__main__.py
"""Allow running as: python -m catalog_validator"""

import sys

from catalog_validator.cli.validate_cli import main

sys.exit(main())
