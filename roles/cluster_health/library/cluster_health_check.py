#!/usr/bin/python
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MIT

"""Dependency-aware OpenShift cluster health check module for Ansible.

Audits a running cluster from the Ansible control node: cluster version
stability, machine/node consistency and cluster operator conditions. Operators
are checked in dependency order, and an operator whose prerequisite already
failed is reported as skipped instead of failed, so a single root failure does
not fan out into a wall of alarms. Results are returned as a JUnit test suite.

All API calls are read-only (list/get). Zero writes to the cluster.
"""

from __future__ import annotations

DOCUMENTATION = r"""
---
module: cluster_health_check
short_description: Run a dependency-aware health check against an OpenShift cluster
version_added: "1.0.0"
description:
  - Connects to an OpenShift cluster via kubeconfig and checks cluster version
    stability, machine and node consistency, and cluster operator conditions.
  - Cluster operators are evaluated in topological order of a curated
    dependency map. Operators whose prerequisites failed are skipped.
  - Produces a JUnit XML report, optionally persisted under I(junit_dir).
  - Completely read-only. All API calls are list/get operations.
  - Check failures are reported in the result, the task itself never fails
    because of cluster state.
options:
  kubeconfig:
    description: Path to the kubeconfig file.
    type: path
    default: ~/.kube/config
  context:
    description: Kubeconfig context to use. Defaults to current context.
    type: str
  junit_dir:
    description:
      - Directory for the JUnit report file
        C(cluster-health-check_YYYYMMDD-HHMMSS.xml).
      - When omitted, no file is written.
    type: path
requirements:
  - kubernetes (Python package, same requirement as kubernetes.core collection)
author:
  - cluster-health contributors
"""

EXAMPLES = r"""
- name: Run the health check against current context
  cluster_health_check:
  register: health

- name: Check a specific cluster context and keep the JUnit report
  cluster_health_check:
    kubeconfig: /etc/kubernetes/admin.conf
    context: prod-cluster
    junit_dir: /tmp/artifacts
  register: health

- name: Fail playbook if any check failed
  cluster_health_check:
  register: health
  failed_when: health.summary.failed > 0
"""

RETURN = r"""
aborted:
  description: Whether the run stopped before all checks completed.
  type: bool
  returned: always
msg:
  description: Reason the run was aborted, or a non-fatal report write error.
  type: str
  returned: always
summary:
  description: Test case counts.
  type: dict
  returned: always
  sample:
    total: 24
    passed: 20
    failed: 1
    skipped: 3
test_cases:
  description: All recorded test cases, in evaluation order.
  type: list
  returned: always
  elements: dict
  sample:
    - name: "operator conditions etcd"
      outcome: "failed"
      message: 'Operator "etcd" - Available=True, Degraded=True, Progressing=False'
    - name: "operator conditions network"
      outcome: "skipped"
      message: 'Precondition operator "etcd" failed, skipping'
junit_xml:
  description: The JUnit XML report. Empty when the run was aborted.
  type: str
  returned: always
junit_path:
  description: Path of the persisted JUnit report, when one was written.
  type: str
  returned: always
report_text:
  description: Human-readable text report.
  type: str
  returned: always
"""

import logging
import os
import re
import xml.etree.ElementTree as ET
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Sequence

logger = logging.getLogger("cluster_health_check")


# =====================================================================
# Models
# =====================================================================

class ClusterHealthError(Exception):
    pass


class DependencyCycleError(ClusterHealthError):
    def __init__(self, operators: Iterable[str]):
        self.operators = sorted(operators)
        super().__init__(f"dependency graph has a cycle among: {', '.join(self.operators)}")


class Outcome(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Condition:
    type: str
    status: str = ""
    reason: str = ""
    message: str = ""

    def describe(self) -> str:
        return f"{self.status} | {self.reason} | {self.message}"


@dataclass
class JUnitTestCase:
    name: str
    outcome: Outcome = Outcome.PASSED
    message: str = ""

    @classmethod
    def passed(cls, name: str) -> JUnitTestCase:
        return cls(name=name)

    @classmethod
    def failed(cls, name: str, message: str) -> JUnitTestCase:
        return cls(name=name, outcome=Outcome.FAILED, message=message)

    @classmethod
    def skipped(cls, name: str, message: str) -> JUnitTestCase:
        return cls(name=name, outcome=Outcome.SKIPPED, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "outcome": self.outcome.value, "message": self.message}


@dataclass
class JUnitTestSuite:
    name: str
    test_cases: list[JUnitTestCase] = field(default_factory=list)

    def add(self, test_case: JUnitTestCase) -> None:
        self.test_cases.append(test_case)

    @property
    def num_tests(self) -> int:
        return len(self.test_cases)

    @property
    def num_failed(self) -> int:
        return sum(1 for tc in self.test_cases if tc.outcome == Outcome.FAILED)

    @property
    def num_skipped(self) -> int:
        return sum(1 for tc in self.test_cases if tc.outcome == Outcome.SKIPPED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.num_tests,
            "passed": self.num_tests - self.num_failed - self.num_skipped,
            "failed": self.num_failed,
            "skipped": self.num_skipped,
        }


SUITE_NAME = "Cluster Health Check"
OPERATOR_TEST_PREFIX = "operator conditions"
MACHINES_RUNNING_TEST = "all machines should be in Running state"
NODES_READY_TEST = "all nodes should be ready"
NODE_COUNT_TEST = "node count should match or exceed machine count"

# key: operator name, value: the operators it directly requires
OPERATOR_DEPENDENCIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "etcd": (),
    "network": ("etcd",),
    "kube-apiserver": ("etcd", "network"),
    "kube-controller-manager": ("kube-apiserver",),
    "kube-scheduler": ("kube-apiserver",),
    "service-ca": ("kube-apiserver",),
    "cloud-credential": ("network",),
    "dns": ("kube-apiserver",),
    "openshift-apiserver": ("kube-apiserver",),
    "openshift-controller-manager": ("openshift-apiserver", "kube-apiserver"),
    "cloud-controller-manager": ("kube-apiserver", "cloud-credential"),
    "machine-api": ("cloud-controller-manager", "cloud-credential", "kube-apiserver"),
    "machine-config": ("kube-apiserver", "openshift-apiserver", "machine-api"),
    "ingress": ("network", "machine-api", "cloud-credential", "dns"),
    "storage": ("cloud-credential", "machine-api"),
    "image-registry": ("ingress", "cloud-credential"),
    "authentication": ("ingress",),
    "console": ("authentication", "ingress"),
    "monitoring": ("storage",),
})


# =====================================================================
# Condition Helpers
# =====================================================================

def _field(obj: Any, name: str) -> Any:
    # Custom objects arrive as plain dicts, core resources as client models.
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def get_condition(record: Any, condition_type: str) -> Condition | None:
    """Return the first ``status.conditions`` entry of the given type, if any."""
    conditions = _field(_field(record, "status"), "conditions")
    if not isinstance(conditions, (list, tuple)):
        return None
    for cond in conditions:
        if _field(cond, "type") != condition_type:
            continue
        return Condition(
            type=condition_type,
            status=str(_field(cond, "status") or ""),
            reason=str(_field(cond, "reason") or ""),
            message=str(_field(cond, "message") or ""),
        )
    return None


def condition_status(record: Any, condition_type: str) -> str:
    cond = get_condition(record, condition_type)
    return cond.status if cond else ""


def _resource_name(obj: Any) -> str:
    return str(_field(_field(obj, "metadata"), "name") or "")


# =====================================================================
# Dependency Graph
# =====================================================================

def expand_dependencies(direct: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    """Expand a direct-dependency map into full transitive dependency lists.

    Every operator mentioned anywhere in ``direct``, as a key or as a
    dependency, gets an entry. Operators that only ever appear as a dependency
    are leaves and map to an empty list. Each list is sorted.

    For example ``{"A": ["B"], "B": ["C"]}`` expands to
    ``{"A": ["B", "C"], "B": ["C"], "C": []}``.

    Cycles are not reported here; the traversal visits each operator once, so
    a cycle simply ends up inside the closure and is caught when sorting.
    """
    domain: set[str] = set(direct)
    for deps in direct.values():
        domain.update(deps)

    expanded: dict[str, list[str]] = {}
    for op in sorted(domain):
        if op in direct:
            expanded[op] = upstream_dependencies(op, direct)
        else:
            expanded[op] = []
    return expanded


def upstream_dependencies(op: str, direct: Mapping[str, Sequence[str]]) -> list[str]:
    found: set[str] = set()
    _collect_upstream(op, direct, set(), found)
    return sorted(found)


def _collect_upstream(current, direct, visited, found):
    if current in visited:
        return
    visited.add(current)
    for dep in direct.get(current, ()):
        found.add(dep)
        _collect_upstream(dep, direct, visited, found)


def topological_sort(operators: Iterable[str], deps: Mapping[str, Sequence[str]]) -> list[str]:
    """Order ``operators`` so that every dependency comes before its dependents.

    Kahn's algorithm over the given operator set only; dependencies outside of
    it are ignored. Ties are broken by lexical order of the operator names, so
    the result is stable for a given input.

    Raises DependencyCycleError if the operators cannot all be ordered.
    """
    ordered = sorted(set(operators))
    members = set(ordered)

    in_degree = {op: sum(1 for dep in set(deps.get(op, ())) if dep in members) for op in ordered}
    queue = deque(op for op in ordered if in_degree[op] == 0)

    result: list[str] = []
    while queue:
        node = queue.popleft()
        result.append(node)
        for op in ordered:
            if node in deps.get(op, ()):
                in_degree[op] -= 1
                if in_degree[op] == 0:
                    queue.append(op)

    if len(result) != len(ordered):
        raise DependencyCycleError(members.difference(result))
    return result


# =====================================================================
# Cluster Operator Checks
# =====================================================================

def operator_test_name(name: str) -> str:
    return f"{OPERATOR_TEST_PREFIX} {name}"


def check_operator_conditions(name: str, record: Any) -> JUnitTestCase:
    available = condition_status(record, "Available")
    degraded = condition_status(record, "Degraded")
    progressing = condition_status(record, "Progressing")

    tc_name = operator_test_name(name)
    if available == "True" and degraded == "False" and progressing == "False":
        logger.info("%s PASSed", name)
        return JUnitTestCase.passed(tc_name)

    message = f'Operator "{name}" - Available={available}, Degraded={degraded}, Progressing={progressing}'
    logger.info("%s", message)
    return JUnitTestCase.failed(tc_name, message)


def evaluate_operators(
    operators_by_name: Mapping[str, Any],
    deps: Mapping[str, Sequence[str]] | None = None,
) -> list[JUnitTestCase]:
    """Check every cluster operator, skipping those behind a failed prerequisite.

    Operators of the dependency map come first, in topological order. Operators
    found in the cluster but absent from the map follow, in no particular order.
    A dependency-map operator missing from the cluster is skipped and does not
    block its dependents. When several prerequisites failed, the skip message
    names the first one in the operator's (sorted) dependency list.
    """
    if deps is None:
        deps = expand_dependencies(OPERATOR_DEPENDENCIES)

    core_operators = topological_sort(deps, deps)
    logger.info("Core operators will be checked in order:\n%s", "\n".join(core_operators))

    remaining = dict(operators_by_name)
    final_operators: list[tuple[str, Any]] = [(name, remaining.pop(name, None)) for name in core_operators]
    final_operators.extend(remaining.items())
    logger.info(
        "Final operator list has %d items (%d core + %d additional)",
        len(final_operators), len(core_operators), len(remaining),
    )

    failed: set[str] = set()
    test_cases: list[JUnitTestCase] = []
    for name, record in final_operators:
        logger.info("Checking %s.........", name)
        tc_name = operator_test_name(name)

        if record is None:
            skip_msg = f'Operator "{name}" not found in the cluster, skipping'
            logger.info("%s", skip_msg)
            test_cases.append(JUnitTestCase.skipped(tc_name, skip_msg))
            continue

        failed_dep = next((dep for dep in deps.get(name, ()) if dep in failed), None)
        if failed_dep is not None:
            skip_msg = f'Precondition operator "{failed_dep}" failed, skipping'
            logger.info("%s", skip_msg)
            test_cases.append(JUnitTestCase.skipped(tc_name, skip_msg))
            continue

        tc = check_operator_conditions(name, record)
        if tc.outcome == Outcome.FAILED:
            failed.add(name)
        test_cases.append(tc)

    return test_cases


# =====================================================================
# Cluster Version Check
# =====================================================================

CLUSTER_VERSION_EXPECTED = (
    ("Available", "True"),
    ("Failing", "False"),
    ("Progressing", "False"),
)


def check_cluster_version(record: Any) -> str | None:
    """Return the first stability problem of a ClusterVersion, None if stable."""
    for cond_type, expected in CLUSTER_VERSION_EXPECTED:
        cond = get_condition(record, cond_type) or Condition(type=cond_type)
        if cond.status != expected:
            return f"ClusterVersion {cond_type}={cond.describe()}"
    return None


# =====================================================================
# Machine / Node Consistency Checks
# =====================================================================

def _machine_phase(machine: Any) -> str:
    return str(_field(_field(machine, "status"), "phase") or "")


NOT_READY_TAINTS = ("node.kubernetes.io/not-ready", "node.kubernetes.io/unreachable")


def is_node_schedulable(node: Any) -> bool:
    """Ready, network available and not cordoned.

    A Ready=True node still carrying a node-controller not-ready or
    unreachable taint counts as not ready.
    """
    if node is None:
        return False
    spec = _field(node, "spec")
    if _field(spec, "unschedulable"):
        return False
    if condition_status(node, "Ready") != "True":
        return False
    for taint in _field(spec, "taints") or []:
        if _field(taint, "key") in NOT_READY_TAINTS:
            return False
    network = get_condition(node, "NetworkUnavailable")
    return network is None or network.status == "False"


def check_machines(machines: Sequence[Any], error: Exception | None = None) -> tuple[JUnitTestCase, list[str]]:
    """Check machine phases. Returns the test case and the running machine names."""
    if error is not None:
        message = f"Could not list machines: {error}. The Machine API might not be available."
        return JUnitTestCase.failed(MACHINES_RUNNING_TEST, message), []
    if not machines:
        message = "No Machines found or could not retrieve list. Skipping Machine check."
        return JUnitTestCase.skipped(MACHINES_RUNNING_TEST, message), []

    running: list[str] = []
    not_running: list[str] = []
    for machine in machines:
        name = _resource_name(machine)
        phase = _machine_phase(machine)
        if phase.lower() == "running":
            running.append(name)
        else:
            not_running.append(f'Machine "{name}" is in "{phase}" state')

    if not not_running:
        return JUnitTestCase.passed(MACHINES_RUNNING_TEST), running

    logger.warning("Proceeding with node count check despite %d non-Running machines", len(not_running))
    message = f"Found {len(not_running)} out of {len(machines)} Machines not in Running state: "
    message += " ".join(not_running)
    return JUnitTestCase.failed(MACHINES_RUNNING_TEST, message), running


def check_nodes(
    nodes: Sequence[Any],
    running_machines: Sequence[str],
    is_schedulable: Callable[[Any], bool] = is_node_schedulable,
) -> list[JUnitTestCase]:
    schedulable = [_resource_name(n) for n in nodes if is_schedulable(n)]
    not_ready = [_resource_name(n) for n in nodes if not is_schedulable(n)]
    test_cases: list[JUnitTestCase] = []

    if not_ready:
        message = f"Found {len(not_ready)} out of {len(nodes)} Nodes not Ready or unschedulable: "
        message += " ".join(not_ready)
        test_cases.append(JUnitTestCase.failed(NODES_READY_TEST, message))
    else:
        test_cases.append(JUnitTestCase.passed(NODES_READY_TEST))

    ready_count = len(schedulable)
    machine_count = len(running_machines)
    logger.info("Found %d Ready and Schedulable Nodes out of %d total Nodes", ready_count, len(nodes))

    if ready_count >= machine_count:
        logger.info(
            "Ready and Schedulable Nodes count (%d) >= Running Machine count (%d). Check passed.",
            ready_count, machine_count,
        )
        test_cases.append(JUnitTestCase.passed(NODE_COUNT_TEST))
    else:
        message = (
            f"Ready and Schedulable Nodes count ({ready_count}) is less than "
            f"Running Machine count ({machine_count}): "
            f"Ready and Schedulable Nodes: {' '.join(schedulable)}; "
            f"Running Machines: {' '.join(running_machines)}"
        )
        test_cases.append(JUnitTestCase.failed(NODE_COUNT_TEST, message))

    return test_cases


def check_machine_node_consistency(
    fetch_machines: Callable[[], Sequence[Any]],
    fetch_nodes: Callable[[], Sequence[Any]],
    suite: JUnitTestSuite,
    is_schedulable: Callable[[Any], bool] = is_node_schedulable,
) -> None:
    logger.info("Starting Machine and Node consistency check")

    machines: Sequence[Any] = []
    machine_error = None
    try:
        machines = fetch_machines()
    except Exception as exc:
        logger.warning("Could not list machines: %s", exc)
        machine_error = exc
    machine_tc, running_machines = check_machines(machines, machine_error)
    suite.add(machine_tc)

    try:
        nodes = fetch_nodes()
    except Exception as exc:
        logger.error("Failed to list nodes: %s", exc)
        suite.add(JUnitTestCase.failed(NODES_READY_TEST, f"Failed to list nodes: {exc}."))
        return

    for tc in check_nodes(nodes, running_machines, is_schedulable):
        suite.add(tc)


# =====================================================================
# Cluster Data Source
# =====================================================================

OPERATOR_GROUP = "config.openshift.io"
OPERATOR_VERSION = "v1"
MACHINE_GROUP = "machine.openshift.io"
MACHINE_VERSION = "v1beta1"
MACHINE_NAMESPACE = "openshift-machine-api"


def list_cluster_operators(api_client) -> dict[str, Any]:
    from kubernetes.client import CustomObjectsApi

    custom = CustomObjectsApi(api_client)
    result = custom.list_cluster_custom_object(OPERATOR_GROUP, OPERATOR_VERSION, "clusteroperators")
    operators: dict[str, Any] = {}
    for item in result.get("items", []):
        name = _resource_name(item)
        if name:
            operators[name] = item
    logger.debug("Listed %d clusteroperators", len(operators))
    return operators


def get_cluster_version(api_client) -> dict[str, Any]:
    from kubernetes.client import CustomObjectsApi

    custom = CustomObjectsApi(api_client)
    return custom.get_cluster_custom_object(OPERATOR_GROUP, OPERATOR_VERSION, "clusterversions", "version")


def list_machines(api_client) -> list[Any]:
    from kubernetes.client import CustomObjectsApi

    custom = CustomObjectsApi(api_client)
    result = custom.list_namespaced_custom_object(MACHINE_GROUP, MACHINE_VERSION, MACHINE_NAMESPACE, "machines")
    return result.get("items", [])


def list_nodes(api_client) -> list[Any]:
    from kubernetes.client import CoreV1Api

    return CoreV1Api(api_client).list_node().items or []


# =====================================================================
# JUnit Report
# =====================================================================

REPORT_FILE_PREFIX = "cluster-health-check"
ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
# characters outside the XML 1.0 Char production
XML_INVALID_CHAR = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _xml_text(text: str) -> str:
    return XML_INVALID_CHAR.sub("\ufffd", strip_ansi(text))


def render_junit(suite: JUnitTestSuite) -> str:
    root = ET.Element("testsuite", {
        "name": _xml_text(suite.name),
        "tests": str(suite.num_tests),
        "skipped": str(suite.num_skipped),
        "failures": str(suite.num_failed),
    })
    for tc in suite.test_cases:
        case = ET.SubElement(root, "testcase", {"name": _xml_text(tc.name)})
        if tc.outcome == Outcome.FAILED:
            ET.SubElement(case, "failure", {"message": _xml_text(tc.message)})
        elif tc.outcome == Outcome.SKIPPED:
            ET.SubElement(case, "skipped", {"message": _xml_text(tc.message)})
    ET.indent(root, space="    ")
    return ET.tostring(root, encoding="unicode")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


def report_filename(now: datetime) -> str:
    return f"{REPORT_FILE_PREFIX}_{now.astimezone(timezone.utc).strftime('%Y%m%d-%H%M%S')}.xml"


def write_junit(xml_text: str, junit_dir: str | None, now: datetime | None = None) -> str | None:
    if not junit_dir:
        return None
    now = now or datetime.now(timezone.utc)
    path = os.path.join(junit_dir, report_filename(now))
    logger.info("Writing JUnit report to %s", path)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o640)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(strip_ansi(xml_text))
    return path


def generate_report_text(suite: JUnitTestSuite) -> str:
    counts = suite.to_dict()
    lines = [
        f"# {suite.name}",
        f"## Summary: {counts['total']} tests ({counts['passed']} passed, "
        f"{counts['failed']} failed, {counts['skipped']} skipped)",
        "",
    ]
    labels = {Outcome.PASSED: "PASS", Outcome.FAILED: "FAIL", Outcome.SKIPPED: "SKIP"}
    for tc in suite.test_cases:
        line = f"- [{labels[tc.outcome]}] {tc.name}"
        if tc.message:
            line += f": {tc.message}"
        lines.append(line)
    return "\n".join(lines)


# =====================================================================
# Health Check Run
# =====================================================================

@dataclass
class HealthCheckRun:
    suite: JUnitTestSuite = field(default_factory=lambda: JUnitTestSuite(name=SUITE_NAME))
    junit_xml: str = ""
    junit_path: str | None = None
    aborted: bool = False
    msg: str = ""

    def abort(self, msg: str) -> HealthCheckRun:
        self.aborted = True
        self.msg = msg
        return self

    def to_result(self) -> dict[str, Any]:
        return {
            "aborted": self.aborted,
            "msg": self.msg,
            "summary": self.suite.to_dict(),
            "test_cases": [tc.to_dict() for tc in self.suite.test_cases],
            "junit_xml": self.junit_xml,
            "junit_path": self.junit_path,
            "report_text": generate_report_text(self.suite),
        }


def run_health_check(
    api_client,
    junit_dir: str | None = None,
    write: bool = True,
    now: datetime | None = None,
) -> HealthCheckRun:
    """Run all checks once. Cluster problems end up in the report, not as errors."""
    run = HealthCheckRun()

    logger.info("Check ClusterVersion Stability...")
    try:
        problem = check_cluster_version(get_cluster_version(api_client))
    except Exception as exc:
        problem = f"Fail to get cluster version: {exc}"
    if problem:
        logger.warning("Continue though cluster version stability check failed (%s)", problem)

    check_machine_node_consistency(
        lambda: list_machines(api_client),
        lambda: list_nodes(api_client),
        run.suite,
    )

    logger.info("Checking Cluster Operators...")
    try:
        operators = list_cluster_operators(api_client)
    except Exception as exc:
        logger.error("Failed to list clusteroperators: %s", exc)
        return run.abort(f"Failed to list clusteroperators: {exc}")

    try:
        operator_cases = evaluate_operators(operators)
    except DependencyCycleError as exc:
        logger.error("Failed to sort core operators: %s", exc)
        return run.abort(f"Failed to sort core operators: {exc}")
    for tc in operator_cases:
        run.suite.add(tc)

    run.junit_xml = render_junit(run.suite)
    if write:
        try:
            run.junit_path = write_junit(run.junit_xml, junit_dir, now)
        except OSError as exc:
            logger.error("Failed to write JUnit report: %s", exc)
            run.msg = f"Failed to write JUnit report: {exc}"
    return run


# =====================================================================
# Ansible Module Entry Point
# =====================================================================

def run_module():
    from ansible.module_utils.basic import AnsibleModule

    module = AnsibleModule(
        argument_spec=dict(
            kubeconfig=dict(type="path", default="~/.kube/config"),
            context=dict(type="str", default=None),
            junit_dir=dict(type="path", default=None),
        ),
        supports_check_mode=True,
    )

    # Verify kubernetes package is available
    try:
        from kubernetes import client, config
        from kubernetes.config.config_exception import ConfigException
    except ImportError:
        module.fail_json(msg="The 'kubernetes' Python package is required. Install with: pip install kubernetes")
        return

    kubeconfig = module.params["kubeconfig"]
    context = module.params["context"]
    junit_dir = module.params["junit_dir"]

    # Connect to cluster. A missing kubeconfig ends the run but is not a task failure.
    try:
        try:
            config.load_kube_config(config_file=kubeconfig, context=context)
        except ConfigException:
            config.load_incluster_config()
        api_client = client.ApiClient()
    except Exception as e:
        logger.error("kubeconfig file NOT found: %s", e)
        run = HealthCheckRun().abort(f"Failed to connect to Kubernetes cluster: {e}")
        module.exit_json(changed=False, **run.to_result())
        return

    run = run_health_check(api_client, junit_dir=junit_dir, write=not module.check_mode)
    module.exit_json(changed=run.junit_path is not None, **run.to_result())


def main():
    run_module()


if __name__ == "__main__":
    main()
