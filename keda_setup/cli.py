import argparse

from keda_setup.cluster import (
    check_health_status,
    check_required_tools,
    connect_cluster,
    create_deployment,
    install_keda,
)
from keda_setup.config import load_config
from keda_setup.log import set_no_color, set_verbose

def get_args(argv:list = None) -> argparse.Namespace:
    """
    Parse the commandline arguments.
    """
    parser = argparse.ArgumentParser(prog = "keda-setup", description = "Install KEDA and deploy Kafka-autoscaled workloads to a Kubernetes cluster.")

    parser.add_argument("-y", "--yaml", type = str, default = None, help = "The path of a YAML configuration file. Options missing from the file keep their default values.")
    parser.add_argument("--no-color", dest = "no_color", action = "store_true", help = "Do not add colors to log messages.")
    parser.add_argument("-v", "--verbose", action = "store_true", help = "Log every external command before it is executed.")

    subparsers = parser.add_subparsers(dest = "command", metavar = "{installtools,setup,deploy,health}")

    install_parser = subparsers.add_parser("install", aliases = ["installtools"], help = "Check prerequisites for the cluster.")
    install_parser.add_argument("--check-cluster", dest = "check_cluster", action = "store_true", help = "Also verify that kubectl can read a cluster configuration.")

    subparsers.add_parser("setup", help = "Setup KEDA on the cluster.")

    deploy_parser = subparsers.add_parser("deploy", help = "Create a deployment.")
    deploy_parser.add_argument("namespace")
    deploy_parser.add_argument("deployment_name")
    deploy_parser.add_argument("image")
    deploy_parser.add_argument("tag")
    deploy_parser.add_argument("port")
    deploy_parser.add_argument("cpu_request")
    deploy_parser.add_argument("memory_request")
    deploy_parser.add_argument("cpu_limit")
    deploy_parser.add_argument("memory_limit")
    deploy_parser.add_argument("kafka_bootstrap_servers", help = "Kafka broker URL(s).")
    deploy_parser.add_argument("kafka_topic", help = "Kafka topic name.")
    deploy_parser.add_argument("kafka_consumer_group", help = "Kafka consumer group name.")
    deploy_parser.add_argument("lag_threshold", nargs = "?", default = None, help = "Kafka consumer lag threshold for scaling. KEDA's default is used if omitted.")

    health_parser = subparsers.add_parser("health", help = "Check deployment health.")
    health_parser.add_argument("namespace")
    health_parser.add_argument("deployment_name")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        exit(1)

    return args

def main(argv:list = None):
    args = get_args(argv)

    set_verbose(args.verbose)
    set_no_color(args.no_color)
    config = load_config(args.yaml)
    set_no_color(args.no_color or config["no_color"])

    kubectl = config["kubectl"]

    if args.command in ("install", "installtools"):
        check_required_tools(kubectl = kubectl, helm = config["helm"])
        if args.check_cluster:
            connect_cluster(kubectl = kubectl)
    elif args.command == "setup":
        install_keda(
            kubectl = kubectl,
            helm = config["helm"],
            keda_namespace = config["keda_namespace"],
            helm_repo_name = config["helm_repo_name"],
            helm_repo_url = config["helm_repo_url"],
            helm_release_name = config["helm_release_name"],
            helm_chart = config["helm_chart"],
        )
    elif args.command == "deploy":
        create_deployment(
            namespace = args.namespace,
            deployment_name = args.deployment_name,
            image = args.image,
            tag = args.tag,
            port = args.port,
            cpu_request = args.cpu_request,
            memory_request = args.memory_request,
            cpu_limit = args.cpu_limit,
            memory_limit = args.memory_limit,
            kafka_bootstrap_servers = args.kafka_bootstrap_servers,
            kafka_topic = args.kafka_topic,
            kafka_consumer_group = args.kafka_consumer_group,
            lag_threshold = args.lag_threshold,
            kubectl = kubectl,
            output_dir = config["output_dir"],
            replicas = config["replicas"],
            polling_interval = config["polling_interval"],
            cooldown_period = config["cooldown_period"],
            min_replica_count = config["min_replica_count"],
            max_replica_count = config["max_replica_count"],
        )
    elif args.command == "health":
        check_health_status(namespace = args.namespace, deployment_name = args.deployment_name, kubectl = kubectl)

if __name__ == "__main__":
    main()
