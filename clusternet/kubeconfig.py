"""Building kubeconfig and client connection settings for child clusters."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from . import known

DEFAULT_USER_NAME = "clusternet"
DEFAULT_CLUSTER_NAME = "clusternet-cluster"
ANONYMOUS_USER = "system:anonymous"
PROXIES_GROUP_VERSION = "proxies.clusternet.io/v1alpha1"

SERVICE_ACCOUNT_TOKEN_KEY = "token"
SERVICE_ACCOUNT_ROOT_CA_KEY = "ca.crt"

DEFAULT_QPS = 5.0
DEFAULT_BURST = 10


@dataclass
class Cluster:
    """Where an API server lives and how to trust it."""

    server: str
    insecure_skip_tls_verify: bool = False
    certificate_authority_data: bytes | None = None


@dataclass
class Context:
    """A pairing of a cluster with a user."""

    cluster: str
    auth_info: str


@dataclass
class AuthInfo:
    """Credentials of a user."""

    token: str = ""
    username: str = ""
    impersonate: str = ""
    impersonate_user_extra: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class KubeConfig:
    """Clusters, users and contexts, with the context in use."""

    clusters: dict[str, Cluster] = field(default_factory=dict)
    contexts: dict[str, Context] = field(default_factory=dict)
    auth_infos: dict[str, AuthInfo] = field(default_factory=dict)
    current_context: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the document in the usual kubeconfig file layout."""
        clusters = []
        for name, cluster in self.clusters.items():
            entry: dict[str, Any] = {"server": cluster.server}
            if cluster.insecure_skip_tls_verify:
                entry["insecure-skip-tls-verify"] = True
            if cluster.certificate_authority_data:
                entry["certificate-authority-data"] = base64.b64encode(
                    cluster.certificate_authority_data
                ).decode("ascii")
            clusters.append({"name": name, "cluster": entry})

        contexts = [
            {"name": name, "context": {"cluster": ctx.cluster, "user": ctx.auth_info}}
            for name, ctx in self.contexts.items()
        ]

        users = []
        for name, auth in self.auth_infos.items():
            entry = {}
            if auth.token:
                entry["token"] = auth.token
            if auth.username:
                entry["username"] = auth.username
            if auth.impersonate:
                entry["as"] = auth.impersonate
            if auth.impersonate_user_extra:
                entry["as-user-extra"] = {k: list(v) for k, v in auth.impersonate_user_extra.items()}
            users.append({"name": name, "user": entry})

        return {
            "apiVersion": "v1",
            "kind": "Config",
            "clusters": clusters,
            "contexts": contexts,
            "users": users,
            "current-context": self.current_context,
        }


@dataclass
class RestConfig:
    """Connection settings for an API client, including its rate limits."""

    host: str = ""
    bearer_token: str = ""
    insecure: bool = False
    ca_data: bytes | None = None
    qps: float = DEFAULT_QPS
    burst: int = DEFAULT_BURST


def _basic_kubeconfig(
    server_url: str, cluster_name: str, user_name: str, ca_cert: bytes | None
) -> KubeConfig:
    context_name = f"{user_name}@{cluster_name}"
    return KubeConfig(
        clusters={
            cluster_name: Cluster(
                server=server_url,
                insecure_skip_tls_verify=ca_cert is None,
                certificate_authority_data=ca_cert,
            )
        },
        contexts={context_name: Context(cluster=cluster_name, auth_info=user_name)},
        auth_infos={},
        current_context=context_name,
    )


def create_kubeconfig_with_token(server_url: str, token: str, ca_cert: bytes | None) -> KubeConfig:
    """A kubeconfig that reaches the API server with a bearer token."""
    config = _basic_kubeconfig(server_url, DEFAULT_CLUSTER_NAME, DEFAULT_USER_NAME, ca_cert)
    config.auth_infos[DEFAULT_USER_NAME] = AuthInfo(token=token)
    return config


def create_kubeconfig_for_socket_proxy_with_token(server_url: str, token: str) -> KubeConfig:
    """A kubeconfig that reaches a child cluster through the socket proxy."""
    config = _basic_kubeconfig(server_url, DEFAULT_CLUSTER_NAME, DEFAULT_USER_NAME, None)
    config.auth_infos[DEFAULT_USER_NAME] = AuthInfo(
        username=ANONYMOUS_USER,
        impersonate=DEFAULT_USER_NAME,
        impersonate_user_extra={"clusternet-token": [token]},
    )
    return config


def child_apiserver_proxy_url(parent_apiserver_url: str, cluster_id: str | None) -> str:
    """The URL on the parent that proxies straight to a child cluster's API server."""
    if cluster_id is None:
        raise ValueError(
            "unable to generate child cluster apiserver proxy url from nil ManagedCluster object"
        )
    if not parent_apiserver_url:
        raise ValueError("got empty parent apiserver url")
    return "/".join(
        [
            parent_apiserver_url.rstrip("/"),
            "apis",
            PROXIES_GROUP_VERSION,
            "sockets",
            cluster_id,
            "proxy/direct",
        ]
    )


def _text(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def child_cluster_config(
    secret_data: Mapping[str, bytes | str],
    use_socket: bool,
    cluster_id: str | None,
    parent_apiserver_url: str,
) -> KubeConfig:
    """Build the kubeconfig for a child cluster from its deployer secret."""
    token = _text(secret_data.get(SERVICE_ACCOUNT_TOKEN_KEY))
    if use_socket:
        server = child_apiserver_proxy_url(parent_apiserver_url, cluster_id)
        return create_kubeconfig_for_socket_proxy_with_token(server, token)

    ca_cert = secret_data.get(SERVICE_ACCOUNT_ROOT_CA_KEY)
    if isinstance(ca_cert, str):
        ca_cert = ca_cert.encode("utf-8")
    return create_kubeconfig_with_token(
        _text(secret_data.get(known.CLUSTER_APISERVER_URL_KEY)), token, ca_cert
    )


def apply_default_rate_limiter(config: RestConfig, flow_rate: int) -> RestConfig:
    """Scale the default QPS and burst by ``flow_rate``; negative rates count as 1."""
    if flow_rate < 0:
        flow_rate = 1
    return replace(config, qps=DEFAULT_QPS * flow_rate, burst=DEFAULT_BURST * flow_rate)