"""
CLI Commands.

Organized by domain/feature area.
"""

from clusterctl.cli.commands.cluster import app as cluster_app
from clusterctl.cli.commands.operator import app as operator_app
from clusterctl.cli.commands.remote_config import app as remote_config_app
from clusterctl.cli.commands.status import app as status_app

__all__ = [
    "cluster_app",
    "operator_app",
    "remote_config_app",
    "status_app",
]
