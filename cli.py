#!/usr/bin/env python3
"""
clusterctl CLI.

Entry point for running the CLI from a source checkout without installing
the package. Installed copies use the ``clusterctl`` console script.

Usage:
    python cli.py --help
    python cli.py use staging
    python cli.py nodes
    python cli.py operator trigger aerospike add_namespace -p name=ns1
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from clusterctl.cli.main import app

if __name__ == "__main__":
    app()
