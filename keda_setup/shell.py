import shutil
import subprocess

from keda_setup.log import logger, log_error

def is_installed(executable:str) -> bool:
    """
    Return True if `executable` can be found on the PATH.
    """
    return shutil.which(executable) is not None

def run_command(command:list, quiet:bool = False, capture:bool = False) -> subprocess.CompletedProcess:
    """
    Execute `command` and block until it exits.

    Keyword Arguments:
    ------------------
        quiet (bool):
            If True, then the command's standard output and standard error are discarded.

        capture (bool):
            If True, then the command's standard output and standard error are captured
            as text on the returned CompletedProcess instead of going to the terminal.

    The caller is responsible for checking the return code. If the executable itself
    cannot be found, then an error is logged and the process exits.
    """
    logger.debug("Executing command: " + str(command))

    kwargs = {}
    if capture:
        kwargs = {"capture_output": True, "text": True}
    elif quiet:
        kwargs = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}

    try:
        return subprocess.run(command, **kwargs)
    except FileNotFoundError:
        log_error("Could not execute \"%s\": executable \"%s\" was not found." % (" ".join(command), command[0]))
        exit(1)

def command_succeeds(command:list, quiet:bool = False) -> bool:
    return run_command(command, quiet = quiet).returncode == 0
