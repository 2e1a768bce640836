import os

import yaml

from keda_setup.log import logger

DEPLOYMENT_FILE_SUFFIX = "_deployment.yaml"
SERVICE_FILE_SUFFIX = "_service.yaml"
SCALED_OBJECT_FILE_SUFFIX = "_scaledobject.yaml"

def build_deployment(
    namespace:str = None,
    deployment_name:str = None,
    image:str = None,
    tag:str = None,
    port:int = None,
    cpu_request:str = None,
    memory_request:str = None,
    cpu_limit:str = None,
    memory_limit:str = None,
    replicas:int = 1,
) -> dict:
    """
    Build an apps/v1 Deployment running a single container of `image`:`tag`.
    """
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": deployment_name,
            "namespace": namespace,
        },
        "spec": {
            "replicas": replicas,
            "selector": {
                "matchLabels": {"app": deployment_name},
            },
            "template": {
                "metadata": {
                    "labels": {"app": deployment_name},
                },
                "spec": {
                    "containers": [{
                        "name": deployment_name,
                        "image": "%s:%s" % (image, tag),
                        "ports": [{"containerPort": port}],
                        "resources": {
                            "requests": {
                                "memory": memory_request,
                                "cpu": cpu_request,
                            },
                            "limits": {
                                "memory": memory_limit,
                                "cpu": cpu_limit,
                            },
                        },
                    }],
                },
            },
        },
    }

def build_service(namespace:str = None, deployment_name:str = None, port:int = None) -> dict:
    """
    Build a ClusterIP Service exposing `port` on the pods of `deployment_name`.
    """
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": "%s-service" % deployment_name,
            "namespace": namespace,
        },
        "spec": {
            "selector": {"app": deployment_name},
            "ports": [{
                "protocol": "TCP",
                "port": port,
                "targetPort": port,
            }],
            "type": "ClusterIP",
        },
    }

def build_scaled_object(
    namespace:str = None,
    deployment_name:str = None,
    kafka_bootstrap_servers:str = None,
    kafka_topic:str = None,
    kafka_consumer_group:str = None,
    lag_threshold:str = None,
    polling_interval:int = 30,
    cooldown_period:int = 300,
    min_replica_count:int = 1,
    max_replica_count:int = 10,
) -> dict:
    """
    Build a KEDA ScaledObject that scales `deployment_name` on the consumer lag of a Kafka topic.

    KEDA expects every trigger metadata value to be a string, so `lag_threshold` is
    written as one. It is omitted entirely when None, leaving KEDA's default in place.
    """
    trigger_metadata = {
        "bootstrapServers": kafka_bootstrap_servers,
        "topic": kafka_topic,
        "consumerGroup": kafka_consumer_group,
    }
    if lag_threshold is not None:
        trigger_metadata["lagThreshold"] = str(lag_threshold)

    return {
        "apiVersion": "keda.sh/v1alpha1",
        "kind": "ScaledObject",
        "metadata": {
            "name": "%s-scaledobject" % deployment_name,
            "namespace": namespace,
        },
        "spec": {
            "scaleTargetRef": {"name": deployment_name},
            "pollingInterval": polling_interval,
            "cooldownPeriod": cooldown_period,
            "minReplicaCount": min_replica_count,
            "maxReplicaCount": max_replica_count,
            "triggers": [{
                "type": "kafka",
                "metadata": trigger_metadata,
            }],
        },
    }

def render_manifest(manifest:dict) -> str:
    return yaml.safe_dump(manifest, default_flow_style = False, sort_keys = False)

def write_manifest(manifest:dict, path:str) -> str:
    """
    Serialize `manifest` as YAML to `path`, overwriting any existing file. Returns `path`.
    """
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(path, "w", encoding = 'utf-8') as f:
        f.write(render_manifest(manifest))

    logger.debug("Wrote %s manifest to \"%s\"" % (manifest["kind"], path))
    return path

def manifest_paths(deployment_name:str, output_dir:str = ".") -> tuple:
    """
    Return the (deployment, service, scaled object) file paths for `deployment_name`.
    """
    return (
        os.path.join(output_dir, deployment_name + DEPLOYMENT_FILE_SUFFIX),
        os.path.join(output_dir, deployment_name + SERVICE_FILE_SUFFIX),
        os.path.join(output_dir, deployment_name + SCALED_OBJECT_FILE_SUFFIX),
    )
