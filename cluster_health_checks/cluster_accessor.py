"""Access to the cluster through the `oc` command line client."""

import json
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger

from cluster_health_checks.exceptions import ClusterAccessError, CommandError

SERVICE_ACCOUNT_TOKEN = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class ClusterAccessor:
    """Runs read-only `oc` commands against the current cluster."""

    def __init__(
        self,
        kubeconfig: Optional[str] = None,
        oc_binary: str = "oc",
        command_timeout: float = 60,
    ) -> None:
        """Initialize the accessor.

        Args:
            kubeconfig: Explicit kubeconfig path. When None, credentials are
                discovered from the pod service account, $KUBECONFIG or ~/.kube/config.
            oc_binary: The client executable.
            command_timeout: Seconds before a single command is abandoned.
        """
        self.kubeconfig = kubeconfig
        self.oc_binary = oc_binary
        self.command_timeout = command_timeout

    # Credentials
    # =====================================================================
    def resolve_kubeconfig(self) -> Optional[str]:
        """Locate the credentials to use.

        Returns:
            The kubeconfig path, or None when running inside a pod with a
            service account token.

        Raises:
            ClusterAccessError: If no credentials can be found.
        """
        if self.kubeconfig:
            if not Path(self.kubeconfig).is_file():
                raise ClusterAccessError(f"Kubeconfig not found: {self.kubeconfig}")
            return self.kubeconfig

        if os.environ.get("KUBERNETES_SERVICE_HOST") and Path(SERVICE_ACCOUNT_TOKEN).is_file():
            logger.debug("[CLUSTER] Using in-cluster service account credentials")
            return None

        env_path = os.environ.get("KUBECONFIG")
        if env_path:
            for candidate in env_path.split(os.pathsep):
                if candidate and Path(candidate).is_file():
                    return candidate
            raise ClusterAccessError(f"KUBECONFIG points to no readable file: {env_path}")

        default = Path.home() / ".kube" / "config"
        if default.is_file():
            return str(default)

        raise ClusterAccessError(
            "No cluster credentials found: set KUBECONFIG, pass --kubeconfig or log in with 'oc login'"
        )

    def load_kubeconfig(self) -> Dict[str, Any]:
        """Parse the resolved kubeconfig file."""
        path = self.resolve_kubeconfig()
        if path is None:
            return {}
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ClusterAccessError(f"Unable to read kubeconfig {path}: {e}") from e
        if not isinstance(data, dict):
            raise ClusterAccessError(f"Invalid kubeconfig: {path}")
        return data

    def current_context(self) -> Optional[str]:
        return self.load_kubeconfig().get("current-context")

    def verify_access(self) -> str:
        """Check that the client is installed and authenticated.

        Returns:
            The authenticated user name.

        Raises:
            ClusterAccessError: If the cluster cannot be used.
        """
        if shutil.which(self.oc_binary) is None:
            raise ClusterAccessError(f"'{self.oc_binary}' command not found in PATH")

        self.resolve_kubeconfig()
        try:
            user = self.run_command(["whoami"]).strip()
        except CommandError as e:
            raise ClusterAccessError(f"Not authenticated to an OpenShift cluster: {e.stderr}") from e

        logger.info(f"[CLUSTER] Authenticated as {user}")
        return user

    # Commands
    # =====================================================================
    def run_command(self, args: List[str]) -> str:
        """Run an `oc` command and return its standard output.

        Raises:
            ClusterAccessError: If the client is missing.
            CommandError: If the command fails or times out.
        """
        command = [self.oc_binary, *args]
        if self.kubeconfig:
            command += ["--kubeconfig", self.kubeconfig]

        logger.debug(f"[CLUSTER] Running: {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ClusterAccessError(f"'{self.oc_binary}' command not found in PATH") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(command, None, f"timed out after {self.command_timeout}s") from e

        if completed.returncode != 0:
            raise CommandError(command, completed.returncode, completed.stderr)
        return completed.stdout

    def get_json(self, args: List[str]) -> Dict[str, Any]:
        """Run an `oc get` style command with JSON output and decode it."""
        output = self.run_command([*args, "-o", "json"])
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise ClusterAccessError(f"Invalid JSON from 'oc {' '.join(args)}': {e}") from e

    def get_resources(
        self, kind: str, namespace: Optional[str] = None, all_namespaces: bool = False
    ) -> List[Dict[str, Any]]:
        """List the resources of a kind in one namespace, every namespace, or cluster scope."""
        args = ["get", kind]
        if namespace:
            args += ["-n", namespace]
        elif all_namespaces:
            args.append("--all-namespaces")
        return self.get_json(args).get("items", [])

    def get_resource(
        self, kind: str, name: str, namespace: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Fetch one resource, or None if it does not exist."""
        args = ["get", kind, name]
        if namespace:
            args += ["-n", namespace]
        try:
            return self.get_json(args)
        except CommandError as e:
            if "NotFound" in e.stderr or "not found" in e.stderr:
                return None
            raise

    def get_raw(self, path: str) -> Dict[str, Any]:
        """Fetch a raw API path and decode the JSON body."""
        output = self.run_command(["get", "--raw", path])
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise ClusterAccessError(f"Invalid JSON from {path}: {e}") from e
