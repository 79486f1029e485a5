"""
CLI Client Module.

Command-line client built with Typer for communicating with a cluster's
HTTP API.

Architecture:
- CLI is a thin presentation layer
- Cluster logic lives on the server
- CLI calls the cluster via HTTP (httpx)
- Sends X-Frontend-ID: cli header for log routing

Usage:
    clusterctl --help
    clusterctl health
    clusterctl operator trigger aerospike add_namespace -p name=ns1
"""
