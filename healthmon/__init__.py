"""
healthmon - readiness sidecar for blockchain nodes.

Polls an execution, beacon or Avalanche C-chain node once per second and
exposes a single ready/not-ready verdict over HTTP (/ready and /metrics).
"""

__version__ = "0.1.0"
