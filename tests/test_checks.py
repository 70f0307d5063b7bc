import logging

import pytest

from cluster_health_check import (
    MACHINES_RUNNING_TEST,
    NODE_COUNT_TEST,
    NODES_READY_TEST,
    JUnitTestSuite,
    Outcome,
    check_cluster_version,
    check_machine_node_consistency,
    check_machines,
    check_nodes,
    is_node_schedulable,
)
from conftest import make_machine, make_node


def _cluster_version(available="True", failing="False", progressing="False"):
    return {
        "metadata": {"name": "version"},
        "status": {"conditions": [
            {"type": "Available", "status": available, "reason": "", "message": "Done applying 4.16.3"},
            {"type": "Failing", "status": failing, "reason": "ClusterOperatorDegraded", "message": "etcd is degraded"},
            {"type": "Progressing", "status": progressing, "reason": "", "message": ""},
        ]},
    }


# ---------------------------------------------------------------------
# ClusterVersion
# ---------------------------------------------------------------------

def test_cluster_version_stable():
    assert check_cluster_version(_cluster_version()) is None


def test_cluster_version_failing():
    problem = check_cluster_version(_cluster_version(failing="True"))
    assert problem == "ClusterVersion Failing=True | ClusterOperatorDegraded | etcd is degraded"


def test_cluster_version_reports_first_problem_only():
    problem = check_cluster_version(_cluster_version(available="False", progressing="True"))
    assert problem.startswith("ClusterVersion Available=False")


def test_cluster_version_missing_conditions():
    assert check_cluster_version({"status": {}}) == "ClusterVersion Available= |  | "


# ---------------------------------------------------------------------
# Machines
# ---------------------------------------------------------------------

def test_machines_all_running():
    tc, running = check_machines([make_machine("m-0"), make_machine("m-1", phase="running")])
    assert tc.outcome == Outcome.PASSED
    assert tc.name == MACHINES_RUNNING_TEST
    assert running == ["m-0", "m-1"]


def test_machines_not_running(caplog):
    machines = [make_machine("m-0"), make_machine("m-1", phase="Provisioning"), make_machine("m-2", phase="Failed")]
    with caplog.at_level(logging.WARNING, logger="cluster_health_check"):
        tc, running = check_machines(machines)

    assert tc.outcome == Outcome.FAILED
    assert tc.message == (
        "Found 2 out of 3 Machines not in Running state: "
        'Machine "m-1" is in "Provisioning" state Machine "m-2" is in "Failed" state'
    )
    assert running == ["m-0"]
    assert "despite 2 non-Running machines" in caplog.text


def test_machine_without_phase_is_not_running():
    tc, running = check_machines([{"metadata": {"name": "m-0"}}])
    assert tc.outcome == Outcome.FAILED
    assert 'Machine "m-0" is in "" state' in tc.message
    assert running == []


def test_no_machines_is_skipped():
    tc, running = check_machines([])
    assert tc.outcome == Outcome.SKIPPED
    assert tc.message == "No Machines found or could not retrieve list. Skipping Machine check."
    assert running == []


def test_machine_list_error_is_failed():
    tc, running = check_machines([], RuntimeError("404 Not Found"))
    assert tc.outcome == Outcome.FAILED
    assert tc.message == "Could not list machines: 404 Not Found. The Machine API might not be available."
    assert running == []


# ---------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------

@pytest.mark.parametrize("node,expected", [
    (make_node("n"), True),
    (make_node("n", ready="False"), False),
    (make_node("n", ready="Unknown"), False),
    (make_node("n", unschedulable=True), False),
    (make_node("n", network_unavailable="True"), False),
    (make_node("n", network_unavailable="False"), True),
    (make_node("n", taints=("node.kubernetes.io/unreachable",)), False),
    (make_node("n", taints=("node.kubernetes.io/not-ready",)), False),
    (make_node("n", taints=("node-role.kubernetes.io/infra",)), True),
    (None, False),
])
def test_is_node_schedulable(node, expected):
    assert is_node_schedulable(node) is expected


def test_nodes_all_ready():
    cases = check_nodes([make_node("n-0"), make_node("n-1")], ["m-0", "m-1"])
    assert [(tc.name, tc.outcome) for tc in cases] == [
        (NODES_READY_TEST, Outcome.PASSED),
        (NODE_COUNT_TEST, Outcome.PASSED),
    ]


def test_nodes_not_ready_and_count_deficit():
    nodes = [make_node("n-0"), make_node("n-1", unschedulable=True)]
    cases = check_nodes(nodes, ["m-0", "m-1"])

    assert cases[0].outcome == Outcome.FAILED
    assert cases[0].message == "Found 1 out of 2 Nodes not Ready or unschedulable: n-1"
    assert cases[1].outcome == Outcome.FAILED
    assert cases[1].message == (
        "Ready and Schedulable Nodes count (1) is less than Running Machine count (2): "
        "Ready and Schedulable Nodes: n-0; Running Machines: m-0 m-1"
    )


def test_more_nodes_than_machines_passes_count():
    cases = check_nodes([make_node("n-0"), make_node("n-1")], [])
    assert cases[1].outcome == Outcome.PASSED


def test_custom_schedulable_predicate():
    cases = check_nodes([make_node("n-0")], ["m-0"], is_schedulable=lambda node: False)
    assert cases[0].outcome == Outcome.FAILED
    assert cases[1].outcome == Outcome.FAILED


# ---------------------------------------------------------------------
# Machine / node group
# ---------------------------------------------------------------------

def test_consistency_group_records_three_cases():
    suite = JUnitTestSuite(name="s")
    check_machine_node_consistency(
        lambda: [make_machine("m-0")],
        lambda: [make_node("n-0")],
        suite,
    )
    assert [tc.name for tc in suite.test_cases] == [MACHINES_RUNNING_TEST, NODES_READY_TEST, NODE_COUNT_TEST]
    assert suite.num_failed == 0


def test_machine_failure_does_not_block_node_checks():
    def fail():
        raise RuntimeError("the server could not find the requested resource")

    suite = JUnitTestSuite(name="s")
    check_machine_node_consistency(fail, lambda: [make_node("n-0")], suite)

    outcomes = [(tc.name, tc.outcome) for tc in suite.test_cases]
    assert outcomes == [
        (MACHINES_RUNNING_TEST, Outcome.FAILED),
        (NODES_READY_TEST, Outcome.PASSED),
        (NODE_COUNT_TEST, Outcome.PASSED),
    ]


def test_node_list_failure_ends_group():
    def fail():
        raise RuntimeError("connection refused")

    suite = JUnitTestSuite(name="s")
    check_machine_node_consistency(lambda: [make_machine("m-0")], fail, suite)

    assert [(tc.name, tc.outcome) for tc in suite.test_cases] == [
        (MACHINES_RUNNING_TEST, Outcome.PASSED),
        (NODES_READY_TEST, Outcome.FAILED),
    ]
    assert suite.test_cases[1].message == "Failed to list nodes: connection refused."
