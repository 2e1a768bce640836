"""
Install KEDA and deploy Kafka-autoscaled workloads by driving kubectl and helm.
"""

__version__ = "0.1.0"
