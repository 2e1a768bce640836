from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from keda_setup.log import logger, log_error, log_important, log_success, log_warning
from keda_setup.manifests import (
    build_deployment,
    build_scaled_object,
    build_service,
    manifest_paths,
    write_manifest,
)
from keda_setup.shell import command_succeeds, is_installed, run_command

MIN_PORT = 1
MAX_PORT = 65535

def check_required_tools(kubectl:str = "kubectl", helm:str = "helm"):
    """
    Make sure that both the cluster CLI and the package manager CLI are on the PATH.
    """
    logger.info("Checking prerequisites...")
    if not is_installed(kubectl):
        log_error("%s is not installed. Please install it and try again." % kubectl)
        exit(1)

    if not is_installed(helm):
        log_error("%s is not installed. Please install it and try again." % helm)
        exit(1)

    log_success("Prerequisites are installed.")

def connect_cluster(kubectl:str = "kubectl"):
    """
    Make sure that kubectl can read a cluster configuration.
    """
    logger.info("Connecting to the Kubernetes cluster...")
    if not command_succeeds([kubectl, "config", "view"], quiet = True):
        log_error("Could not connect to the cluster. Ensure kubeconfig is configured correctly.")
        exit(1)

    log_success("Cluster connection successful.")

def create_namespace(namespace:str, kubectl:str = "kubectl"):
    # Failure is assumed to mean that the namespace already exists.
    if not command_succeeds([kubectl, "create", "namespace", namespace]):
        logger.info("Namespace '%s' already exists." % namespace)

def install_keda(
    kubectl:str = "kubectl",
    helm:str = "helm",
    keda_namespace:str = "keda",
    helm_repo_name:str = "kedacore",
    helm_repo_url:str = "https://kedacore.github.io/charts",
    helm_release_name:str = "keda",
    helm_chart:str = "kedacore/keda",
):
    """
    Install KEDA into `keda_namespace` from its Helm chart repository.
    """
    log_important("Installing KEDA using Helm...")
    create_namespace(keda_namespace, kubectl = kubectl)

    if not command_succeeds([helm, "repo", "add", helm_repo_name, helm_repo_url]):
        log_error("Failed to add the KEDA Helm repository.")
        exit(1)

    if not command_succeeds([helm, "repo", "update"]):
        log_error("Failed to update Helm repositories.")
        exit(1)

    if not command_succeeds([helm, "install", helm_release_name, helm_chart, "--namespace", keda_namespace]):
        log_error("KEDA installation failed. Check Helm logs for more information.")
        exit(1)

    log_success("KEDA installed successfully.")

def apply_manifest(path:str, kubectl:str = "kubectl") -> bool:
    """
    Run `kubectl apply` on the manifest at `path`, logging whatever kubectl prints.
    """
    result = run_command([kubectl, "apply", "-f", path], capture = True)

    for line in (result.stdout or "").splitlines():
        logger.info(line)

    if result.returncode != 0:
        for line in (result.stderr or "").splitlines():
            log_error(line)
        return False

    return True

def create_deployment(
    namespace:str = None,
    deployment_name:str = None,
    image:str = None,
    tag:str = None,
    port:str = None,
    cpu_request:str = None,
    memory_request:str = None,
    cpu_limit:str = None,
    memory_limit:str = None,
    kafka_bootstrap_servers:str = None,
    kafka_topic:str = None,
    kafka_consumer_group:str = None,
    lag_threshold:str = None,
    kubectl:str = "kubectl",
    output_dir:str = ".",
    replicas:int = 1,
    polling_interval:int = 30,
    cooldown_period:int = 300,
    min_replica_count:int = 1,
    max_replica_count:int = 10,
):
    """
    Create a Deployment, a ClusterIP Service and a KEDA ScaledObject with a Kafka trigger.

    Each manifest is written to `output_dir` and applied before the next one is written.
    The first failed apply terminates the process; resources applied before it are left in place.
    """
    try:
        port = int(port)
    except (TypeError, ValueError):
        log_error("Invalid port \"%s\". The port must be an integer." % port)
        exit(1)

    if port < MIN_PORT or port > MAX_PORT:
        log_error("Invalid port %d. The port must be between %d and %d." % (port, MIN_PORT, MAX_PORT))
        exit(1)

    log_important("Creating deployment '%s' in namespace '%s'..." % (deployment_name, namespace))
    create_namespace(namespace, kubectl = kubectl)

    deployment_file, service_file, scaled_object_file = manifest_paths(deployment_name, output_dir = output_dir)

    steps = [
        (
            "deployment",
            deployment_file,
            build_deployment(
                namespace = namespace,
                deployment_name = deployment_name,
                image = image,
                tag = tag,
                port = port,
                cpu_request = cpu_request,
                memory_request = memory_request,
                cpu_limit = cpu_limit,
                memory_limit = memory_limit,
                replicas = replicas,
            ),
            "Failed to create deployment '%s'." % deployment_name,
        ),
        (
            "service",
            service_file,
            build_service(namespace = namespace, deployment_name = deployment_name, port = port),
            "Failed to create service for deployment '%s'." % deployment_name,
        ),
        (
            "KEDA ScaledObject",
            scaled_object_file,
            build_scaled_object(
                namespace = namespace,
                deployment_name = deployment_name,
                kafka_bootstrap_servers = kafka_bootstrap_servers,
                kafka_topic = kafka_topic,
                kafka_consumer_group = kafka_consumer_group,
                lag_threshold = lag_threshold,
                polling_interval = polling_interval,
                cooldown_period = cooldown_period,
                min_replica_count = min_replica_count,
                max_replica_count = max_replica_count,
            ),
            "Failed to create KEDA ScaledObject for deployment '%s'." % deployment_name,
        ),
    ]

    # Log records are written through tqdm while the progress bar is active.
    with logging_redirect_tqdm(loggers = [logger]):
        for label, path, manifest, failure_message in tqdm(steps, desc = "Applying manifests", unit = "manifest"):
            write_manifest(manifest, path)
            logger.info("Applying %s YAML..." % label)
            if not apply_manifest(path, kubectl = kubectl):
                log_error(failure_message)
                exit(1)

    log_success("Deployment created successfully!")
    logger.info("Service Type: ClusterIP")
    logger.info("Kafka Autoscaling Configured:")
    logger.info("  - Bootstrap Servers: %s" % kafka_bootstrap_servers)
    logger.info("  - Topic: %s" % kafka_topic)
    logger.info("  - Consumer Group: %s" % kafka_consumer_group)
    if lag_threshold is not None:
        logger.info("  - Lag Threshold: %s" % lag_threshold)
    log_important("Access the service within the cluster using the service name and namespace.")

def check_health_status(namespace:str = None, deployment_name:str = None, kubectl:str = "kubectl"):
    """
    Verify that the deployment exists and that pod metrics can be read.

    A missing deployment is fatal. Missing metrics only produce a warning.
    """
    logger.info("Checking health status for deployment '%s' in namespace '%s'..." % (deployment_name, namespace))

    if not command_succeeds([kubectl, "get", "deployment", deployment_name, "-n", namespace], quiet = True):
        log_error("Deployment '%s' not found in namespace '%s'." % (deployment_name, namespace))
        exit(1)

    if not command_succeeds([kubectl, "top", "pods", "-n", namespace], quiet = True):
        log_warning("Metrics server is not installed, or pods are not running. Install Metrics Server for resource metrics.")

    log_success("Health status check complete.")
