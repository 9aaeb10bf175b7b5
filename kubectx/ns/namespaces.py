"""Namespace lookups against the cluster of the current context."""

from __future__ import annotations

import base64
import json
import os
import subprocess
import tempfile
from contextlib import ExitStack
from typing import Any
from urllib.parse import quote

import requests
import yaml

from kubectx.cmdutil import CommandError
from kubectx.kubeconfig import Kubeconfig, KubeconfigError

_MOCK_ENV = "_MOCK_NAMESPACES"
_MOCK_NAMESPACES = ("ns1", "ns2")
_PAGE_SIZE = 500
_TIMEOUT = 30


def _named(entries: Any, name: Any, kind: str) -> dict[str, Any]:
    """Return the body of the entry called ``name`` in a kubeconfig list."""
    if isinstance(entries, list):
        for entry in entries:
            if isinstance(entry, dict) and entry.get("name") == name:
                body = entry.get(kind)
                return body if isinstance(body, dict) else {}
    raise CommandError(f'{kind} "{name}" not found in kubeconfig')


def _decode(data: str, what: str) -> bytes:
    try:
        return base64.b64decode(data)
    except (ValueError, TypeError) as err:
        raise CommandError(f"invalid {what}: {err}") from err


def _exec_credentials(spec: dict[str, Any]) -> dict[str, Any]:
    """Run a credential plugin and return the status it reports."""
    command = spec.get("command")
    if not command:
        raise CommandError("exec credential plugin has no command")
    args = [str(command), *(str(arg) for arg in spec.get("args") or [])]
    child_env = dict(os.environ)
    for item in spec.get("env") or []:
        if isinstance(item, dict) and item.get("name"):
            child_env[str(item["name"])] = str(item.get("value", ""))
    child_env["KUBERNETES_EXEC_INFO"] = json.dumps(
        {
            "apiVersion": spec.get("apiVersion", ""),
            "kind": "ExecCredential",
            "spec": {"interactive": False},
        }
    )
    try:
        result = subprocess.run(
            args, stdout=subprocess.PIPE, env=child_env, text=True, check=True
        )
        status = json.loads(result.stdout).get("status") or {}
    except (OSError, subprocess.CalledProcessError, ValueError, AttributeError) as err:
        raise CommandError(f"exec credential plugin failed: {err}") from err
    if not isinstance(status, dict):
        raise CommandError("exec credential plugin returned no status")
    return status


class _ApiClient:
    """A minimal HTTP client for the API server of the current context."""

    def __init__(self, config: dict[str, Any]) -> None:
        self._stack = ExitStack()
        self.session = requests.Session()
        self._stack.callback(self.session.close)
        try:
            self._configure(config)
        except BaseException:
            self._stack.close()
            raise

    def __enter__(self) -> _ApiClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._stack.close()

    def _data_file(self, data: str, what: str) -> str:
        content = _decode(data, what)
        handle = tempfile.NamedTemporaryFile(delete=False, suffix=".pem")
        with handle:
            handle.write(content)
        self._stack.callback(os.unlink, handle.name)
        return handle.name

    def _configure(self, config: dict[str, Any]) -> None:
        current = config.get("current-context") or ""
        if not current:
            raise CommandError("current-context is not set")
        context = _named(config.get("contexts"), current, "context")
        cluster = _named(config.get("clusters"), context.get("cluster"), "cluster")
        user_name = context.get("user")
        user = _named(config.get("users"), user_name, "user") if user_name else {}

        server = cluster.get("server") or ""
        if not server:
            raise CommandError(f'cluster of context "{current}" has no server')
        self.base_url = str(server).rstrip("/")

        if cluster.get("insecure-skip-tls-verify"):
            self.session.verify = False
        elif cluster.get("certificate-authority-data"):
            self.session.verify = self._data_file(
                cluster["certificate-authority-data"], "certificate-authority-data"
            )
        elif cluster.get("certificate-authority"):
            self.session.verify = str(cluster["certificate-authority"])

        proxy = cluster.get("proxy-url")
        if proxy:
            self.session.proxies = {"http": str(proxy), "https": str(proxy)}

        self._configure_user(user)

    def _configure_user(self, user: dict[str, Any]) -> None:
        cert = key = None
        if user.get("client-certificate-data"):
            cert = self._data_file(user["client-certificate-data"], "client-certificate-data")
        elif user.get("client-certificate"):
            cert = str(user["client-certificate"])
        if user.get("client-key-data"):
            key = self._data_file(user["client-key-data"], "client-key-data")
        elif user.get("client-key"):
            key = str(user["client-key"])

        bearer = user.get("token") or ""
        if not bearer and user.get("tokenFile"):
            try:
                with open(user["tokenFile"], encoding="utf-8") as handle:
                    bearer = handle.read().strip()
            except OSError as err:
                raise CommandError(f"failed to read token file: {err}") from err

        exec_spec = user.get("exec")
        if not bearer and cert is None and isinstance(exec_spec, dict):
            status = _exec_credentials(exec_spec)
            bearer = status.get("token") or ""
            if status.get("clientCertificateData") and status.get("clientKeyData"):
                cert = self._plain_file(status["clientCertificateData"])
                key = self._plain_file(status["clientKeyData"])

        if cert is not None:
            self.session.cert = (cert, key) if key is not None else cert
        if bearer:
            self.session.headers["Authorization"] = f"Bearer {bearer}"
        elif user.get("username"):
            self.session.auth = (str(user["username"]), str(user.get("password", "")))

    def _plain_file(self, content: str) -> str:
        handle = tempfile.NamedTemporaryFile(delete=False, suffix=".pem", mode="w")
        with handle:
            handle.write(content)
        self._stack.callback(os.unlink, handle.name)
        return handle.name

    def get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        return self.session.get(self.base_url + path, params=params, timeout=_TIMEOUT)


def _client(kc: Kubeconfig) -> _ApiClient:
    try:
        raw = kc.to_bytes()
    except KubeconfigError as err:
        raise CommandError(f"failed to convert in-memory kubeconfig to yaml: {err}") from err
    try:
        config = yaml.safe_load(raw)
        if not isinstance(config, dict):
            raise CommandError("kubeconfig is not a map document")
        return _ApiClient(config)
    except (yaml.YAMLError, CommandError) as err:
        raise CommandError(f"failed to initialize config: {err}") from err


def _open_client(kc: Kubeconfig) -> _ApiClient:
    try:
        return _client(kc)
    except CommandError as err:
        raise CommandError(f"failed to initialize k8s REST client: {err}") from err


def query_namespaces(kc: Kubeconfig) -> list[str]:
    """Return the names of all namespaces in the cluster, page by page."""
    if os.environ.get(_MOCK_ENV, ""):
        return list(_MOCK_NAMESPACES)

    names: list[str] = []
    continue_token = ""
    with _open_client(kc) as client:
        while True:
            params: dict[str, Any] = {"limit": _PAGE_SIZE}
            if continue_token:
                params["continue"] = continue_token
            try:
                response = client.get("/api/v1/namespaces", params)
                response.raise_for_status()
                body = response.json()
            except (requests.RequestException, ValueError) as err:
                raise CommandError(f"failed to list namespaces from k8s API: {err}") from err
            for item in body.get("items") or []:
                name = (item.get("metadata") or {}).get("name")
                if name:
                    names.append(name)
            continue_token = (body.get("metadata") or {}).get("continue") or ""
            if not continue_token:
                break
    return names


def namespace_exists(kc: Kubeconfig, namespace: str) -> bool:
    """Tell whether the cluster has a namespace with this name."""
    if os.environ.get(_MOCK_ENV, ""):
        return namespace in _MOCK_NAMESPACES

    if not namespace:
        raise CommandError("resource name may not be empty")
    with _open_client(kc) as client:
        try:
            response = client.get(f"/api/v1/namespaces/{quote(namespace, safe='')}")
            if response.status_code == 404:
                return False
            response.raise_for_status()
        except requests.RequestException as err:
            raise CommandError(
                f'failed to query namespace "{namespace}" from k8s API: {err}'
            ) from err
    return True