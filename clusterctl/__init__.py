"""
clusterctl.

Command-line client for inspecting and operating a distributed cluster
over its HTTP API, including schema-driven operator invocation.
"""

__version__ = "0.1.0"
