"""Tests for DefinitionBody and StateMachine."""

from __future__ import annotations

import json

import pytest

from stepgraph.core import (
    Chain,
    DefinitionBody,
    Duration,
    GraphValidationError,
    LogLevel,
    LogOptions,
    Parallel,
    Pass,
    PolicyStatement,
    StateMachine,
    StateMachineType,
    StepGraphError,
)


def machine(chainable=None, **kwargs):
    chainable = chainable or Chain.start(Pass("Start")).next(Pass("End"))
    return StateMachine("Machine", definition_body=DefinitionBody.from_chainable(chainable), **kwargs)


class TestDefinitionBody:
    """Tests for DefinitionBody."""

    def test_from_chainable(self):
        """Chains render to compact JSON with the comment last."""
        body = DefinitionBody.from_chainable(Chain.start(Pass("a")))

        assert body.bind(comment="demo") == (
            '{"StartAt":"a","States":{"a":{"Type":"Pass","End":true}},"Comment":"demo"}'
        )

    def test_timeout(self):
        """The timeout renders as TimeoutSeconds."""
        body = DefinitionBody.from_chainable(Pass("a"))

        assert json.loads(body.bind(timeout=Duration.hours(1)))["TimeoutSeconds"] == 3600

    def test_from_string(self):
        """Text definitions are used as is."""
        text = '{"StartAt":"x","States":{"x":{"Type":"Succeed"}}}'

        assert DefinitionBody.from_string(text).bind(comment="ignored", timeout=Duration.seconds(5)) == text

    def test_from_file(self, tmp_path):
        """File definitions are read as text."""
        path = tmp_path / "definition.json"
        path.write_text('{"StartAt":"x"}')

        assert DefinitionBody.from_file(path).bind() == '{"StartAt":"x"}'

    def test_from_missing_file(self, tmp_path):
        """A missing file raises."""
        with pytest.raises(FileNotFoundError):
            DefinitionBody.from_file(tmp_path / "missing.json")


class TestStateMachine:
    """Tests for StateMachine."""

    def test_definition(self):
        """The definition holds the states, timeout and comment."""
        definition = machine(comment="orders", timeout=Duration.minutes(5)).definition

        assert definition == {
            "StartAt": "Start",
            "States": {"Start": {"Type": "Pass", "Next": "End"}, "End": {"Type": "Pass", "End": True}},
            "TimeoutSeconds": 300,
            "Comment": "orders",
        }

    def test_definition_string_is_stable(self):
        """Rendering twice gives the same text."""
        sm = machine(Parallel("P").branch(Pass("A")).branch(Pass("B")))

        assert sm.definition_string == sm.definition_string

    def test_invalid_graph(self):
        """Graph problems surface when the definition is rendered."""
        sm = machine(Parallel("P"))

        with pytest.raises(GraphValidationError, match="at least one branch"):
            sm.definition_string

    def test_text_definition_has_no_graph(self):
        """A text definition has no graph."""
        sm = StateMachine("Machine", definition_body=DefinitionBody.from_string("{}"))

        assert sm.graph is None
        assert sm.policy_statements == []

    def test_name_and_prefix_conflict(self):
        """An explicit name cannot be combined with a prefix."""
        with pytest.raises(StepGraphError, match="Cannot specify both 'stateMachineName' and 'namePrefix'"):
            machine(state_machine_name="orders", name_prefix="orders-")

    def test_invalid_name(self):
        """Explicit names are validated."""
        with pytest.raises(StepGraphError, match="between 1 and 80 characters"):
            machine(state_machine_name="a" * 81)
        with pytest.raises(StepGraphError, match="must match"):
            machine(state_machine_name="has space")

    def test_generated_prefix(self):
        """Without a name a prefix is generated from the id."""
        sm = StateMachine("My Machine!", definition_body=DefinitionBody.from_string("{}"))

        assert sm.name_prefix == "MyMachine-"
        assert sm.to_resource_config()["name_prefix"] == "MyMachine-"

    def test_long_prefix_is_truncated(self):
        """Generated prefixes leave room for a unique suffix."""
        sm = machine(name_prefix="a" * 100)

        assert sm.name_prefix == "a" * 53 + "-"

    def test_policy_statements(self, fake_task):
        """Graph, logging and tracing permissions are collected."""
        task = fake_task("Task", policies=[PolicyStatement(["sqs:SendMessage"], ["arn:q"])])
        sm = machine(task, logs=LogOptions(log_destination="arn:logs"), tracing_enabled=True)

        statements = sm.policy_statements

        assert statements[0] == PolicyStatement(["sqs:SendMessage"], ["arn:q"])
        assert "logs:CreateLogDelivery" in statements[1].actions
        assert "xray:PutTraceSegments" in statements[2].actions

    def test_resource_config(self):
        """The resource config has everything needed to deploy."""
        sm = machine(
            state_machine_name="orders",
            state_machine_type=StateMachineType.EXPRESS,
            logs=LogOptions(log_destination="arn:logs", include_execution_data=True, level=LogLevel.ALL),
            tracing_enabled=False,
        )

        config = sm.to_resource_config()

        assert config["name"] == "orders"
        assert config["type"] == "EXPRESS"
        assert json.loads(config["definition"])["StartAt"] == "Start"
        assert config["logging_configuration"] == {
            "level": "ALL",
            "log_destination": "arn:logs",
            "include_execution_data": True,
        }
        assert config["tracing_configuration"] == {"enabled": False}
        assert config["policy_statements"][0]["Action"][0] == "logs:CreateLogDelivery"
