from __future__ import annotations

from typing import Any

import pytest
from kubernetes.client import V1Node, V1NodeCondition, V1NodeSpec, V1NodeStatus, V1ObjectMeta, V1Taint


def make_operator(
    name: str,
    available: str = "True",
    degraded: str = "False",
    progressing: str = "False",
) -> dict[str, Any]:
    conditions = []
    for cond_type, status in (("Available", available), ("Degraded", degraded), ("Progressing", progressing)):
        if status is not None:
            conditions.append({"type": cond_type, "status": status, "reason": "AsExpected", "message": ""})
    return {
        "apiVersion": "config.openshift.io/v1",
        "kind": "ClusterOperator",
        "metadata": {"name": name},
        "status": {"conditions": conditions},
    }


def make_machine(name: str, phase: str = "Running") -> dict[str, Any]:
    return {
        "apiVersion": "machine.openshift.io/v1beta1",
        "kind": "Machine",
        "metadata": {"name": name, "namespace": "openshift-machine-api"},
        "status": {"phase": phase},
    }


def make_node(
    name: str,
    ready: str = "True",
    unschedulable: bool = False,
    network_unavailable: str | None = None,
    taints: tuple[str, ...] = (),
) -> V1Node:
    conditions = [V1NodeCondition(type="Ready", status=ready, reason="KubeletReady")]
    if network_unavailable is not None:
        conditions.append(V1NodeCondition(type="NetworkUnavailable", status=network_unavailable))
    return V1Node(
        metadata=V1ObjectMeta(name=name),
        spec=V1NodeSpec(
            unschedulable=unschedulable,
            taints=[V1Taint(key=key, effect="NoSchedule") for key in taints] or None,
        ),
        status=V1NodeStatus(conditions=conditions),
    )


@pytest.fixture
def healthy_operators() -> dict[str, dict[str, Any]]:
    names = ("etcd", "network", "kube-apiserver")
    return {name: make_operator(name) for name in names}
