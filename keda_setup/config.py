import yaml

from keda_setup.log import logger, log_error, log_success, log_warning

DEFAULT_CONFIG = {
    "no_color": False,
    "kubectl": "kubectl",
    "helm": "helm",
    "keda_namespace": "keda",
    "helm_repo_name": "kedacore",
    "helm_repo_url": "https://kedacore.github.io/charts",
    "helm_release_name": "keda",
    "helm_chart": "kedacore/keda",
    "output_dir": ".",
    "replicas": 1,
    "polling_interval": 30,
    "cooldown_period": 300,
    "min_replica_count": 1,
    "max_replica_count": 10,
}

def load_config(path:str = None) -> dict:
    """
    Load the YAML configuration file located at `path`.

    Every key missing from the file falls back to its entry in DEFAULT_CONFIG.
    If `path` is None, then the defaults are returned as-is.
    """
    config = dict(DEFAULT_CONFIG)

    if path is None:
        return config

    try:
        with open(path, "r") as stream:
            logger.info("Loading arguments from YAML file located at \"%s\"" % path)
            arguments = yaml.safe_load(stream)
    except OSError as exc:
        log_error("Failed to open YAML file \"%s\"." % path)
        log_error("Error: %s" % str(exc))
        exit(1)
    except yaml.YAMLError as exc:
        log_error("Failed to load arguments from YAML file \"%s\"." % path)
        log_error("Error: %s" % str(exc))
        exit(1)

    # An empty file is fine; everything takes its default value.
    if arguments is None:
        arguments = {}

    if not isinstance(arguments, dict):
        log_error("YAML file \"%s\" must contain a mapping of option names to values." % path)
        exit(1)

    for key in arguments:
        if key not in DEFAULT_CONFIG:
            log_warning("Ignoring unknown option \"%s\" in YAML file \"%s\"." % (key, path))

    for key, default in DEFAULT_CONFIG.items():
        value = arguments.get(key, default)

        # bool is a subclass of int, so an int option must not accept true/false and vice versa.
        if isinstance(value, bool) != isinstance(default, bool) or not isinstance(value, type(default)):
            log_error("Option \"%s\" in YAML file \"%s\" must be of type %s, not %s (%r)." % (key, path, type(default).__name__, type(value).__name__, value))
            exit(1)

        config[key] = value

    log_success("Loaded %d arguments from YAML file." % len(arguments))
    return config
