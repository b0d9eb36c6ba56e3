"""Kubernetes API wrapper."""

from __future__ import annotations

import logging
import time

import yaml
from kubernetes import client, config
from kubernetes.client import ApiException

from chart_tester.errors import ChartTesterError

logger = logging.getLogger(__name__)

_REQUEST_TIMEOUT = 30
_POLL_INTERVAL = 2.0


class K8sClient:
    """Thin wrapper around the Kubernetes Python client.

    Provides the cluster operations the install pipeline needs: waiting for
    deployments, collecting pod diagnostics and deleting namespaces.
    """

    def __init__(
        self,
        context: str | None = None,
        deployment_timeout: int = 300,
        namespace_timeout: int = 120,
    ):
        self.context = context
        self.deployment_timeout = deployment_timeout
        self.namespace_timeout = namespace_timeout
        self._core_v1: client.CoreV1Api | None = None
        self._apps_v1: client.AppsV1Api | None = None
        self._api_client: client.ApiClient | None = None

    def _load_config(self) -> client.ApiClient:
        if self._api_client is not None:
            return self._api_client
        try:
            cfg = client.Configuration()
            config.load_kube_config(
                context=self.context,
                client_configuration=cfg,
            )
            # Prevent indefinite hangs on unreachable clusters
            cfg.retries = 1
            if not cfg.connection_pool_maxsize:
                cfg.connection_pool_maxsize = 4
            self._api_client = client.ApiClient(configuration=cfg)
        except config.ConfigException:
            config.load_incluster_config()
            self._api_client = client.ApiClient()
        return self._api_client

    @property
    def core_v1(self) -> client.CoreV1Api:
        if self._core_v1 is None:
            self._core_v1 = client.CoreV1Api(api_client=self._load_config())
        return self._core_v1

    @property
    def apps_v1(self) -> client.AppsV1Api:
        if self._apps_v1 is None:
            self._apps_v1 = client.AppsV1Api(api_client=self._load_config())
        return self._apps_v1

    def delete_namespace(self, namespace: str) -> None:
        """Delete a namespace and wait for it to disappear; failures are logged."""
        logger.info("Deleting namespace '%s'...", namespace)
        try:
            self.core_v1.delete_namespace(name=namespace, _request_timeout=_REQUEST_TIMEOUT)
        except ApiException as e:
            if e.status != 404:
                logger.warning("Error deleting namespace '%s': %s", namespace, e.reason)
            return
        except Exception:
            logger.warning("Error deleting namespace '%s'", namespace, exc_info=True)
            return

        deadline = time.monotonic() + self.namespace_timeout
        while time.monotonic() < deadline:
            try:
                self.core_v1.read_namespace(name=namespace, _request_timeout=_REQUEST_TIMEOUT)
            except ApiException as e:
                if e.status == 404:
                    logger.info("Namespace '%s' terminated.", namespace)
                    return
                logger.warning("Error checking namespace '%s': %s", namespace, e.reason)
                return
            except Exception:
                logger.warning("Error checking namespace '%s'", namespace, exc_info=True)
                return
            time.sleep(_POLL_INTERVAL)
        logger.warning("Namespace '%s' still terminating after %ss", namespace, self.namespace_timeout)

    def wait_for_deployments(self, namespace: str, selector: str) -> None:
        """Block until every deployment matching ``selector`` has all replicas ready."""
        try:
            deployments = self.apps_v1.list_namespaced_deployment(
                namespace=namespace,
                label_selector=selector or None,
                _request_timeout=_REQUEST_TIMEOUT,
            ).items
        except ApiException as e:
            raise ChartTesterError(f"Error listing deployments in '{namespace}': {e.reason}") from e

        for deployment in deployments:
            name = deployment.metadata.name
            logger.info("Waiting for deployment '%s' to become ready...", name)
            self._wait_for_deployment(namespace, name)

    def _wait_for_deployment(self, namespace: str, name: str) -> None:
        deadline = time.monotonic() + self.deployment_timeout
        while True:
            try:
                deployment = self.apps_v1.read_namespaced_deployment(
                    name=name, namespace=namespace, _request_timeout=_REQUEST_TIMEOUT,
                )
            except ApiException as e:
                raise ChartTesterError(f"Error reading deployment '{name}': {e.reason}") from e

            desired = deployment.spec.replicas if deployment.spec.replicas is not None else 1
            ready = deployment.status.ready_replicas or 0
            if ready >= desired:
                logger.info("Deployment '%s' ready (%d/%d replicas).", name, ready, desired)
                return
            if time.monotonic() >= deadline:
                raise ChartTesterError(
                    f"Not all replicas of deployment '{name}' are ready ({ready}/{desired}) "
                    f"after {self.deployment_timeout}s"
                )
            time.sleep(_POLL_INTERVAL)

    def get_pods(self, namespace: str, selector: str) -> list[str]:
        try:
            pods = self.core_v1.list_namespaced_pod(
                namespace=namespace,
                label_selector=selector or None,
                _request_timeout=_REQUEST_TIMEOUT,
            ).items
        except ApiException as e:
            raise ChartTesterError(f"Error listing pods in '{namespace}': {e.reason}") from e
        return [p.metadata.name for p in pods]

    def describe_pod(self, namespace: str, pod: str) -> str:
        """Return the pod's status and recent events rendered as YAML."""
        try:
            obj = self.core_v1.read_namespaced_pod(name=pod, namespace=namespace)
            events = self.core_v1.list_namespaced_event(
                namespace=namespace,
                field_selector=f"involvedObject.name={pod}",
                _request_timeout=_REQUEST_TIMEOUT,
            ).items
        except ApiException as e:
            raise ChartTesterError(f"Error describing pod '{pod}': {e.reason}") from e

        serialized = self._load_config().sanitize_for_serialization(obj)
        description = {
            "name": pod,
            "namespace": namespace,
            "node": serialized.get("spec", {}).get("nodeName", ""),
            "status": serialized.get("status", {}),
            "events": [
                {"type": ev.type, "reason": ev.reason, "message": ev.message}
                for ev in events
            ],
        }
        return yaml.safe_dump(description, default_flow_style=False, sort_keys=False)

    def logs(self, namespace: str, pod: str, container: str) -> str:
        try:
            return self.core_v1.read_namespaced_pod_log(
                name=pod, namespace=namespace, container=container, _request_timeout=_REQUEST_TIMEOUT,
            )
        except ApiException as e:
            raise ChartTesterError(f"Error getting logs of '{pod}/{container}': {e.reason}") from e

    def get_init_containers(self, namespace: str, pod: str) -> list[str]:
        spec = self._read_pod_spec(namespace, pod)
        return [c.name for c in spec.init_containers or []]

    def get_containers(self, namespace: str, pod: str) -> list[str]:
        spec = self._read_pod_spec(namespace, pod)
        return [c.name for c in spec.containers or []]

    def _read_pod_spec(self, namespace: str, pod: str) -> client.V1PodSpec:
        try:
            return self.core_v1.read_namespaced_pod(name=pod, namespace=namespace).spec
        except ApiException as e:
            raise ChartTesterError(f"Error reading pod '{pod}': {e.reason}") from e
